"""Gestion centralisée de la configuration de la console."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_BASE_URL = "http://localhost:3001"
DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_READ_TIMEOUT = 15.0
_TRUE_VALUES = ("1", "true", "yes", "on")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(RuntimeError):
    """Erreur levée lorsque la configuration est invalide."""


@dataclass(frozen=True, slots=True)
class ConsoleConfig:
    """Paramètres nécessaires pour joindre l'API d'administration."""

    base_url: str = DEFAULT_BASE_URL
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    strict_session: bool = False
    log_level: str = "INFO"


def _read_timeout(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} doit être un nombre de secondes (reçu : {raw!r}).") from exc
    if value <= 0:
        raise ConfigError(f"{name} doit être strictement positif (reçu : {raw!r}).")
    return value


def load_config() -> ConsoleConfig:
    """Charge la configuration depuis l'environnement (et un éventuel fichier .env)."""
    load_dotenv()

    base_url = os.getenv("ADMIN_API_BASE_URL", DEFAULT_BASE_URL).strip() or DEFAULT_BASE_URL
    if not base_url.startswith(("http://", "https://")):
        raise ConfigError(
            "ADMIN_API_BASE_URL doit commencer par http:// ou https:// "
            f"(reçu : {base_url!r})."
        )

    strict = os.getenv("ADMIN_STRICT_SESSION", "false").strip().lower() in _TRUE_VALUES
    log_level = os.getenv("ADMIN_LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"ADMIN_LOG_LEVEL doit valoir l'un de {', '.join(LOG_LEVELS)} (reçu : {log_level!r}).")

    return ConsoleConfig(
        base_url=base_url.rstrip("/"),
        connect_timeout=_read_timeout("ADMIN_API_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT),
        read_timeout=_read_timeout("ADMIN_API_READ_TIMEOUT", DEFAULT_READ_TIMEOUT),
        strict_session=strict,
        log_level=log_level,
    )

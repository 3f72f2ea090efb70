"""Encodage des requêtes et lecture des quelques réponses JSON de l'API.

Le backend ne renvoie que des formes fixes (drapeau de connexion, objet
d'erreur, tableau d'utilisateurs). Le décodage passe par :mod:`json`, puis
une normalisation explicite remplace tout champ absent ou mal typé par une
valeur neutre (chaîne vide, zéro, ``False``) au lieu de lever une erreur.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from adminconsole.models import UserRecord

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error"


def encode_credentials(username: str, password: str) -> str:
    """Sérialise ``{"username", "password"}`` en JSON compact et purement ASCII.

    Tout caractère non ASCII, y compris un demi-substitut isolé, devient une
    séquence ``\\uXXXX`` : le corps s'encode toujours sans erreur.
    """
    return json.dumps(
        {"username": username, "password": password},
        ensure_ascii=True,
        separators=(",", ":"),
    )


def _loads(body: str | bytes | None) -> Any:
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        logger.debug("Réponse non JSON ignorée (%d octets)", len(body))
        return None


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_int(value: Any) -> int:
    # bool est une sous-classe d'int : on l'exclut explicitement.
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def _as_bool(value: Any) -> bool:
    return value is True


def parse_is_admin(body: str | bytes | None) -> bool:
    """Lit le booléen ``isAdmin`` d'une réponse de connexion (``False`` par défaut)."""
    data = _loads(body)
    if not isinstance(data, dict):
        return False
    return _as_bool(data.get("isAdmin"))


def parse_error_message(body: str | bytes | None) -> str:
    """Extrait ``error.message`` d'un objet d'erreur du backend."""
    data = _loads(body)
    error = data.get("error") if isinstance(data, dict) else None
    message = error.get("message") if isinstance(error, dict) else None
    return message if isinstance(message, str) else UNKNOWN_ERROR


def normalize_user(raw: dict[str, Any]) -> UserRecord:
    return UserRecord(
        id=_as_int(raw.get("id")),
        username=_as_str(raw.get("username")),
        real_name=_as_str(raw.get("realName")),
        date_of_birth=_as_str(raw.get("dob")),
        bio=_as_str(raw.get("bio")),
        avatar_type=_as_str(raw.get("avatarType")),
        avatar_key=_as_str(raw.get("avatarKey")),
        avatar_path=_as_str(raw.get("avatarPath")),
        is_admin=_as_bool(raw.get("isAdmin")),
        article_count=_as_int(raw.get("articleCount")),
    )


def parse_user_list(body: str | bytes | None) -> list[UserRecord]:
    """Décode le tableau d'utilisateurs en conservant l'ordre du serveur.

    Un corps illisible ou qui n'est pas un tableau donne une liste vide ;
    les éléments qui ne sont pas des objets sont ignorés.
    """
    data = _loads(body)
    if not isinstance(data, list):
        return []
    return [normalize_user(item) for item in data if isinstance(item, dict)]

"""Client HTTP de l'API d'administration, porteur du cookie de session."""

from __future__ import annotations

import logging
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from typing import Any, Callable, TypeVar

import httpx

from adminconsole.config import DEFAULT_BASE_URL, DEFAULT_CONNECT_TIMEOUT, DEFAULT_READ_TIMEOUT, ConsoleConfig
from adminconsole.models import (
    AvatarFailure,
    AvatarLoaded,
    AvatarResult,
    LoginFailure,
    LoginOutcome,
    LoginSuccess,
    UserRecord,
)
from adminconsole.services.payloads import (
    encode_credentials,
    parse_error_message,
    parse_is_admin,
    parse_user_list,
)

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/login"
LOGOUT_PATH = "/api/logout"
ADMIN_USERS_PATH = "/api/users"
USER_AVATAR_PATH = ADMIN_USERS_PATH + "/{user_id}/avatar"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"

MISSING_CREDENTIALS = "Missing credentials"
NO_SESSION_ISSUED = "Login succeeded but no session cookie was issued"
AVATAR_LOAD_FAILED = "Failed to load image"
CLIENT_CLOSED = "API client is closed"

# Erreurs levées avant ou pendant l'envoi : toutes deviennent des échecs typés.
REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL, httpx.CookieConflict, UnicodeError)

T = TypeVar("T")


class ApiClientError(RuntimeError):
    """Erreur levée lorsque le client est utilisé après sa fermeture."""


def extract_session_token(response: httpx.Response) -> str | None:
    """Retourne le premier segment ``nom=valeur`` de l'en-tête Set-Cookie."""
    headers = response.headers.get_list("set-cookie")
    if not headers:
        return None
    segment = headers[0].split(";", 1)[0].strip()
    if "=" not in segment or segment.startswith("="):
        return None
    # Un jeton non ASCII ne pourrait pas être renvoyé dans l'en-tête Cookie.
    if not segment.isascii():
        logger.warning("Cookie de session non ASCII ignoré")
        return None
    return segment


class SessionApiClient:
    """Passerelle unique entre l'interface et le backend.

    Le jeton de session est un attribut explicite du client : il est capturé
    à la connexion, renvoyé dans l'en-tête ``Cookie`` de chaque requête et
    effacé à la déconnexion. Le cookie jar de httpx est vidé après chaque
    réponse pour qu'il ne conserve jamais la session à notre place.

    Les opérations sont bloquantes ; ``submit`` et ``fetch_avatar_async`` les
    exécutent sur un pool de threads pour ne jamais bloquer le thread de l'UI.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        strict_session: bool = False,
        transport: httpx.BaseTransport | None = None,
        max_workers: int = 4,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._strict_session = strict_session
        self._session_token: str | None = None
        self._closed = False
        self._http = httpx.Client(
            base_url=self._base_url,
            timeout=httpx.Timeout(read_timeout, connect=connect_timeout),
            transport=transport,
        )
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="api-client")

    @classmethod
    def from_config(cls, config: ConsoleConfig, **kwargs: Any) -> "SessionApiClient":
        return cls(
            config.base_url,
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
            strict_session=config.strict_session,
            **kwargs,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def session_token(self) -> str | None:
        return self._session_token

    @property
    def is_authenticated(self) -> bool:
        return self._session_token is not None

    # ------------------------------------------------------------ Transport -
    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        headers: dict[str, str] = kwargs.pop("headers", None) or {}
        if self._session_token:
            headers["Cookie"] = self._session_token
        try:
            response = self._http.request(method, path, headers=headers, **kwargs)
        finally:
            self._http.cookies.clear()
        logger.debug("%s %s -> %s", method, path, response.status_code)
        return response

    # ----------------------------------------------------------- Opérations -
    def login(self, username: str | None, password: str | None) -> LoginOutcome:
        """Ouvre une session ; ne lève jamais d'exception."""
        if username is None or password is None:
            return LoginFailure(MISSING_CREDENTIALS)

        username = username.strip()
        try:
            response = self._request(
                "POST",
                LOGIN_PATH,
                content=encode_credentials(username, password).encode("ascii"),
                headers={"Content-Type": JSON_CONTENT_TYPE},
            )
        except REQUEST_ERRORS as exc:
            logger.warning("Connexion impossible à %s : %s", self._base_url, exc)
            return LoginFailure(f"Connection error: {exc}")

        status = response.status_code
        if status == 200:
            is_admin = parse_is_admin(response.content)
            token = extract_session_token(response)
            if token is None:
                if self._strict_session:
                    logger.warning("Connexion de %s refusée : aucun cookie de session reçu", username)
                    return LoginFailure(NO_SESSION_ISSUED)
                logger.warning("Connexion de %s acceptée sans cookie de session", username)
            else:
                self._session_token = token
            logger.info("Connexion de %s réussie (admin=%s)", username, is_admin)
            return LoginSuccess(is_admin=is_admin, username=username)
        if status in (400, 401):
            message = parse_error_message(response.content)
            logger.info("Connexion de %s refusée (%s) : %s", username, status, message)
            return LoginFailure(message)
        logger.warning("Réponse inattendue à la connexion : statut %s", status)
        return LoginFailure(f"Login failed (status {status})")

    def logout(self) -> None:
        """Ferme la session côté serveur au mieux, et toujours côté client."""
        try:
            self._request("POST", LOGOUT_PATH)
        except REQUEST_ERRORS as exc:
            logger.debug("Déconnexion serveur ignorée : %s", exc)
        finally:
            self._session_token = None

    def reset_session(self) -> None:
        self._session_token = None

    def list_users(self) -> list[UserRecord]:
        """Liste des utilisateurs ; toute erreur donne une liste vide."""
        try:
            response = self._request("GET", ADMIN_USERS_PATH)
        except REQUEST_ERRORS as exc:
            logger.warning("Impossible de récupérer les utilisateurs : %s", exc)
            return []
        if response.status_code != 200:
            logger.info("Liste des utilisateurs indisponible (statut %s)", response.status_code)
            return []
        return parse_user_list(response.content)

    def delete_user(self, user_id: int) -> bool:
        """Supprime un utilisateur ; True uniquement sur un 204."""
        try:
            response = self._request("DELETE", f"{ADMIN_USERS_PATH}/{user_id}")
        except REQUEST_ERRORS as exc:
            logger.warning("Suppression de l'utilisateur %s impossible : %s", user_id, exc)
            return False
        if response.status_code != 204:
            logger.info("Suppression de l'utilisateur %s refusée (statut %s)", user_id, response.status_code)
            return False
        return True

    def fetch_avatar_bytes(self, user_id: int) -> AvatarResult:
        """Télécharge l'avatar brut, sans le décoder."""
        try:
            response = self._request("GET", USER_AVATAR_PATH.format(user_id=user_id))
        except REQUEST_ERRORS as exc:
            return AvatarFailure(str(exc) or exc.__class__.__name__)
        if response.status_code == 200 and response.content:
            return AvatarLoaded(response.content)
        return AvatarFailure(AVATAR_LOAD_FAILED)

    # ----------------------------------------------------------- Arrière-plan -
    def submit(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> "Future[T]":
        """Exécute une opération du client sur le pool de threads."""
        if self._closed:
            raise ApiClientError("Le client API a été fermé.")
        return self._executor.submit(fn, *args, **kwargs)

    def fetch_avatar_async(
        self,
        user_id: int,
        on_loaded: Callable[[bytes], None],
        on_error: Callable[[str], None],
    ) -> "Future[AvatarResult]":
        """Charge l'avatar en arrière-plan puis appelle l'un des deux rappels.

        Les rappels s'exécutent dans le thread du pool : l'appelant doit
        les rapatrier lui-même sur son propre thread.
        """
        try:
            future = self.submit(self.fetch_avatar_bytes, user_id)
        except RuntimeError as exc:
            # Client fermé : l'échec passe par le rappel, jamais par une exception.
            logger.debug("Avatar de l'utilisateur %s non demandé : %s", user_id, exc)
            closed: "Future[AvatarResult]" = Future()
            closed.set_result(AvatarFailure(CLIENT_CLOSED))
            on_error(CLIENT_CLOSED)
            return closed

        def _deliver(done: "Future[AvatarResult]") -> None:
            try:
                result = done.result()
            except (CancelledError, Exception) as exc:  # noqa: BLE001
                on_error(str(exc) or exc.__class__.__name__)
                return
            if isinstance(result, AvatarLoaded):
                on_loaded(result.data)
            else:
                on_error(result.message)

        future.add_done_callback(_deliver)
        return future

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=False, cancel_futures=True)
        self._http.close()

    def __enter__(self) -> "SessionApiClient":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

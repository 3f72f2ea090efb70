"""Logique de la fenêtre principale, sans dépendance à Tkinter.

Le présentateur décide quoi faire des résultats du client ; la vue se
contente d'afficher. Tous les rappels réseau repassent par le
``UiDispatcher`` avant de toucher l'état ou la vue.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Protocol

from adminconsole.models import LoginFailure, LoginOutcome, LoginSuccess, UserRecord
from adminconsole.state import AdminState
from adminconsole.ui.dispatch import UiDispatcher
from adminconsole.ui.user_table import UserTableModel

if TYPE_CHECKING:
    from adminconsole.services import SessionApiClient

logger = logging.getLogger(__name__)

STATUS_NEUTRAL = "neutral"
STATUS_SUCCESS = "success"
STATUS_ERROR = "error"

NOT_ADMIN_MESSAGE = "Ce compte n'est pas administrateur."
LOGIN_FAILED_MESSAGE = "Échec de l'authentification."
DELETE_FAILED_MESSAGE = "La suppression de l'utilisateur a échoué."


@dataclass(frozen=True, slots=True)
class ControlStates:
    login: bool
    logout: bool
    delete: bool


class ConsoleView(Protocol):
    def set_status(self, text: str, tone: str) -> None: ...

    def set_controls(self, controls: ControlStates) -> None: ...

    def show_error(self, title: str, message: str) -> None: ...

    def ask_confirmation(self, title: str, message: str) -> bool: ...

    def clear_password(self) -> None: ...

    def render_users(self, rows: list[tuple[object, ...]]) -> None: ...

    def remove_row(self, index: int) -> None: ...

    def clear_avatar(self) -> None: ...

    def show_avatar_loading(self, username: str) -> None: ...

    def show_avatar(self, data: bytes) -> None: ...

    def show_avatar_error(self) -> None: ...


class ConsolePresenter:
    """Enchaîne connexion, chargement, sélection et suppression des utilisateurs."""

    def __init__(
        self,
        client: "SessionApiClient",
        state: AdminState,
        view: ConsoleView,
        dispatcher: UiDispatcher,
    ) -> None:
        self._client = client
        self._state = state
        self._view = view
        self._dispatcher = dispatcher
        self._table_model = UserTableModel(state)
        # Opérations en cours ; leurs déclencheurs restent désactivés jusqu'au rappel.
        self._pending: set[str] = set()

    @property
    def table_model(self) -> UserTableModel:
        return self._table_model

    def controls(self) -> ControlStates:
        logged_in = self._state.is_authenticated
        session_busy = bool({"login", "logout"} & self._pending)
        return ControlStates(
            login=not logged_in and not session_busy,
            logout=logged_in and not session_busy,
            delete=(
                logged_in
                and self._state.selected_user is not None
                and "delete" not in self._pending
            ),
        )

    def refresh_controls(self) -> None:
        self._view.set_controls(self.controls())

    # -------------------------------------------------------------- Session -
    def login(self, username: str, password: str) -> None:
        if self._state.is_authenticated or "login" in self._pending:
            return

        self._pending.add("login")
        self._view.set_status("Connexion en cours…", STATUS_NEUTRAL)
        self.refresh_controls()
        future = self._client.submit(self._client.login, username, password)
        self._dispatcher.when_done(future, self._on_login_done)

    def _on_login_done(self, future: "Future[LoginOutcome]") -> None:
        self._pending.discard("login")
        try:
            outcome = future.result()
        except Exception as exc:  # noqa: BLE001
            logger.exception("Échec inattendu de la connexion")
            outcome = LoginFailure(str(exc))

        if isinstance(outcome, LoginSuccess) and outcome.is_admin:
            self._state.username = outcome.username or "administrateur"
            self._view.clear_password()
            self._view.set_status(f"Connecté en tant que : {self._state.username}", STATUS_SUCCESS)
            self.refresh_controls()
            self.load_users()
            return

        if isinstance(outcome, LoginSuccess):
            message = NOT_ADMIN_MESSAGE
            # La session ouverte par un non-administrateur est refermée aussitôt.
            self._start_logout()
        else:
            message = outcome.message or LOGIN_FAILED_MESSAGE

        self._view.set_status("Échec de la connexion", STATUS_ERROR)
        self.refresh_controls()
        self._view.show_error("Connexion refusée", message)

    def logout(self) -> None:
        if not self._state.is_authenticated or "logout" in self._pending:
            return

        self._state.reset()
        self._view.render_users([])
        self._view.clear_avatar()
        self._view.set_status("Non connecté", STATUS_NEUTRAL)
        self._start_logout()
        self.refresh_controls()

    def _start_logout(self) -> None:
        self._pending.add("logout")
        self._dispatcher.when_done(self._client.submit(self._client.logout), self._on_logout_done)

    def _on_logout_done(self, _future: "Future[None]") -> None:
        self._pending.discard("logout")
        self.refresh_controls()

    # -------------------------------------------------------- Utilisateurs -
    def load_users(self) -> None:
        future = self._client.submit(self._client.list_users)
        self._dispatcher.when_done(future, self._on_users_loaded)

    def _on_users_loaded(self, future: "Future[list[UserRecord]]") -> None:
        try:
            users = future.result()
        except Exception:  # noqa: BLE001
            logger.exception("Échec inattendu du chargement des utilisateurs")
            users = []
        if not self._state.is_authenticated:
            return
        self._state.set_users(users)
        self._view.render_users(self._table_model.rows())
        self._view.clear_avatar()
        self.refresh_controls()

    def select_row(self, index: int | None) -> None:
        user = self._state.select(index)
        if user is None:
            self._view.clear_avatar()
        else:
            self._view.show_avatar_loading(user.username)
            self._client.fetch_avatar_async(
                user.id,
                on_loaded=self._dispatcher.wrap(partial(self._on_avatar_loaded, user)),
                on_error=self._dispatcher.wrap(partial(self._on_avatar_error, user)),
            )
        self.refresh_controls()

    def _on_avatar_loaded(self, user: UserRecord, data: bytes) -> None:
        # Une réponse arrivée après un changement de sélection est ignorée.
        if self._state.is_selected(user):
            self._view.show_avatar(data)

    def _on_avatar_error(self, user: UserRecord, message: str) -> None:
        logger.info("Avatar de l'utilisateur %s indisponible : %s", user.id, message)
        if self._state.is_selected(user):
            self._view.show_avatar_error()

    def delete_selected(self) -> None:
        user = self._state.selected_user
        if user is None or "delete" in self._pending:
            return

        confirmed = self._view.ask_confirmation(
            "Confirmer la suppression",
            f"Supprimer l'utilisateur « {user.username} » ?",
        )
        if not confirmed:
            return

        self._pending.add("delete")
        self.refresh_controls()
        future = self._client.submit(self._client.delete_user, user.id)
        self._dispatcher.when_done(future, partial(self._on_user_deleted, user))

    def _on_user_deleted(self, user: UserRecord, future: "Future[bool]") -> None:
        self._pending.discard("delete")
        try:
            deleted = future.result()
        except Exception:  # noqa: BLE001
            logger.exception("Échec inattendu de la suppression")
            deleted = False

        if deleted:
            was_selected = self._state.is_selected(user)
            index = self._state.remove(user)
            if index is not None:
                self._view.remove_row(index)
            if was_selected:
                self._view.clear_avatar()
        else:
            self._view.show_error("Erreur", DELETE_FAILED_MESSAGE)
        self.refresh_controls()

"""Tests du présentateur de la fenêtre principale, sans Tk."""

from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Callable

import pytest

from adminconsole.models import LoginFailure, LoginSuccess, UserRecord
from adminconsole.state import AdminState
from adminconsole.ui.dispatch import UiDispatcher
from adminconsole.ui.presenter import (
    DELETE_FAILED_MESSAGE,
    NOT_ADMIN_MESSAGE,
    STATUS_SUCCESS,
    ConsolePresenter,
    ControlStates,
)

ALICE = UserRecord(id=1, username="alice")
BOB = UserRecord(id=2, username="bob")


class FakeClient:
    """Client synchrone : chaque tâche soumise est déjà terminée."""

    def __init__(self) -> None:
        self.login_outcome: Any = LoginSuccess(is_admin=True, username="admin")
        self.users: list[UserRecord] = [ALICE, BOB]
        self.delete_result = True
        self.calls: list[tuple[Any, ...]] = []
        self.avatar_requests: list[tuple[int, Callable[[bytes], None], Callable[[str], None]]] = []

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        future: Future = Future()
        future.set_result(fn(*args))
        return future

    def login(self, username: str, password: str) -> Any:
        self.calls.append(("login", username, password))
        return self.login_outcome

    def logout(self) -> None:
        self.calls.append(("logout",))

    def list_users(self) -> list[UserRecord]:
        self.calls.append(("list_users",))
        return list(self.users)

    def delete_user(self, user_id: int) -> bool:
        self.calls.append(("delete_user", user_id))
        return self.delete_result

    def fetch_avatar_async(self, user_id: int, on_loaded, on_error) -> None:
        self.avatar_requests.append((user_id, on_loaded, on_error))


class FakeView:
    def __init__(self) -> None:
        self.events: list[tuple[Any, ...]] = []
        self.controls: ControlStates | None = None
        self.confirm_answer = True

    def set_status(self, text: str, tone: str) -> None:
        self.events.append(("status", text, tone))

    def set_controls(self, controls: ControlStates) -> None:
        self.controls = controls

    def show_error(self, title: str, message: str) -> None:
        self.events.append(("error", message))

    def ask_confirmation(self, title: str, message: str) -> bool:
        self.events.append(("confirm", message))
        return self.confirm_answer

    def clear_password(self) -> None:
        self.events.append(("clear_password",))

    def render_users(self, rows) -> None:
        self.events.append(("render", [row[1] for row in rows]))

    def remove_row(self, index: int) -> None:
        self.events.append(("remove_row", index))

    def clear_avatar(self) -> None:
        self.events.append(("clear_avatar",))

    def show_avatar_loading(self, username: str) -> None:
        self.events.append(("avatar_loading", username))

    def show_avatar(self, data: bytes) -> None:
        self.events.append(("avatar", data))

    def show_avatar_error(self) -> None:
        self.events.append(("avatar_error",))

    def named(self, name: str) -> list[tuple[Any, ...]]:
        return [event for event in self.events if event[0] == name]


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def view() -> FakeView:
    return FakeView()


@pytest.fixture
def dispatcher() -> UiDispatcher:
    return UiDispatcher()


@pytest.fixture
def state() -> AdminState:
    return AdminState()


@pytest.fixture
def presenter(fake_client, state, view, dispatcher) -> ConsolePresenter:
    return ConsolePresenter(fake_client, state, view, dispatcher)


def _log_in(presenter: ConsolePresenter, dispatcher: UiDispatcher, view: FakeView) -> None:
    presenter.login("admin", "secret")
    dispatcher.drain()
    view.events.clear()


class TestLogin:
    def test_admin_login_loads_users(self, presenter, fake_client, state, view, dispatcher) -> None:
        presenter.login("admin", "secret")
        assert view.controls == ControlStates(login=False, logout=False, delete=False)

        dispatcher.drain()

        assert state.username == "admin"
        assert fake_client.calls == [("login", "admin", "secret"), ("list_users",)]
        assert ("render", ["alice", "bob"]) in view.events
        assert ("status", "Connecté en tant que : admin", STATUS_SUCCESS) in view.named("status")
        assert view.controls == ControlStates(login=False, logout=True, delete=False)

    def test_non_admin_login_is_logged_out(self, presenter, fake_client, state, view, dispatcher) -> None:
        fake_client.login_outcome = LoginSuccess(is_admin=False, username="bob")

        presenter.login("bob", "pw")
        dispatcher.drain()

        assert not state.is_authenticated
        assert ("logout",) in fake_client.calls
        assert ("list_users",) not in fake_client.calls
        assert view.named("error") == [("error", NOT_ADMIN_MESSAGE)]
        assert view.controls == ControlStates(login=True, logout=False, delete=False)

    def test_failed_login_shows_message(self, presenter, fake_client, state, view, dispatcher) -> None:
        fake_client.login_outcome = LoginFailure("Invalid credentials")

        presenter.login("admin", "bad")
        dispatcher.drain()

        assert not state.is_authenticated
        assert view.named("error") == [("error", "Invalid credentials")]
        assert fake_client.calls == [("login", "admin", "bad")]

    def test_logout_resets_state(self, presenter, fake_client, state, view, dispatcher) -> None:
        _log_in(presenter, dispatcher, view)

        presenter.logout()
        assert view.controls == ControlStates(login=False, logout=False, delete=False)
        dispatcher.drain()

        assert not state.is_authenticated
        assert state.users == []
        assert ("render", []) in view.events
        assert fake_client.calls[-1] == ("logout",)
        assert view.controls == ControlStates(login=True, logout=False, delete=False)


class TestAvatarSelection:
    def test_stale_avatar_response_is_ignored(self, presenter, fake_client, view, dispatcher) -> None:
        _log_in(presenter, dispatcher, view)

        presenter.select_row(0)
        presenter.select_row(1)
        (_, alice_loaded, _), (_, bob_loaded, _) = fake_client.avatar_requests
        alice_loaded(b"alice.png")
        bob_loaded(b"bob.png")
        dispatcher.drain()

        assert view.named("avatar") == [("avatar", b"bob.png")]

    def test_stale_avatar_error_is_ignored(self, presenter, fake_client, view, dispatcher) -> None:
        _log_in(presenter, dispatcher, view)

        presenter.select_row(0)
        presenter.select_row(None)
        _, _, alice_error = fake_client.avatar_requests[0]
        alice_error("Failed to load image")
        dispatcher.drain()

        assert view.named("avatar_error") == []

    def test_selection_enables_delete(self, presenter, view, dispatcher) -> None:
        _log_in(presenter, dispatcher, view)

        presenter.select_row(1)

        assert view.named("avatar_loading") == [("avatar_loading", "bob")]
        assert view.controls.delete is True

    def test_users_sharing_an_id_are_distinct_rows(self, presenter, fake_client, view, dispatcher) -> None:
        first, second = UserRecord(id=0, username="a"), UserRecord(id=0, username="b")
        fake_client.users = [first, second]
        _log_in(presenter, dispatcher, view)

        presenter.select_row(0)
        presenter.select_row(1)
        (_, first_loaded, _), (_, second_loaded, _) = fake_client.avatar_requests
        first_loaded(b"a.png")
        second_loaded(b"b.png")
        dispatcher.drain()

        assert view.named("avatar") == [("avatar", b"b.png")]


class TestDelete:
    def test_confirmed_delete_removes_the_row(self, presenter, fake_client, state, view, dispatcher) -> None:
        _log_in(presenter, dispatcher, view)
        presenter.select_row(1)

        presenter.delete_selected()
        dispatcher.drain()

        assert ("delete_user", 2) in fake_client.calls
        assert state.users == [ALICE]
        assert view.named("remove_row") == [("remove_row", 1)]
        assert ("clear_avatar",) in view.events
        assert view.controls.delete is False

    def test_failed_delete_keeps_the_row(self, presenter, fake_client, state, view, dispatcher) -> None:
        fake_client.delete_result = False
        _log_in(presenter, dispatcher, view)
        presenter.select_row(0)

        presenter.delete_selected()
        dispatcher.drain()

        assert state.users == [ALICE, BOB]
        assert state.selected_user is ALICE
        assert view.named("remove_row") == []
        assert view.named("error") == [("error", DELETE_FAILED_MESSAGE)]
        assert view.controls.delete is True

    def test_declined_confirmation_sends_nothing(self, presenter, fake_client, view, dispatcher) -> None:
        _log_in(presenter, dispatcher, view)
        presenter.select_row(0)
        view.confirm_answer = False

        presenter.delete_selected()
        dispatcher.drain()

        assert not any(call[0] == "delete_user" for call in fake_client.calls)

    def test_delete_removes_only_the_selected_duplicate(
        self, presenter, fake_client, state, view, dispatcher
    ) -> None:
        first, second = UserRecord(id=0, username="a"), UserRecord(id=0, username="b")
        fake_client.users = [first, second]
        _log_in(presenter, dispatcher, view)
        presenter.select_row(1)

        presenter.delete_selected()
        dispatcher.drain()

        assert len(state.users) == 1
        assert state.users[0] is first
        assert view.named("remove_row") == [("remove_row", 1)]

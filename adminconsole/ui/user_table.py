"""Modèle du tableau des utilisateurs, indépendant des widgets."""

from __future__ import annotations

from typing import NamedTuple

from adminconsole.models import UserRecord
from adminconsole.state import AdminState


class Column(NamedTuple):
    key: str
    heading: str
    width: int
    anchor: str = "w"


COLUMNS = (
    Column("id", "ID", 60, "e"),
    Column("username", "Utilisateur", 160),
    Column("real_name", "Nom réel", 200),
    Column("is_admin", "Admin", 70, "center"),
    Column("article_count", "Articles", 80, "e"),
)


class UserTableModel:
    """Présente ``AdminState.users`` ligne par ligne, dans l'ordre du serveur.

    Une ligne est désignée par sa position : les identifiants d'éléments du
    Treeview sont générés par Tk et ne dépendent pas de ``UserRecord.id``.
    """

    def __init__(self, state: AdminState) -> None:
        self._state = state

    @property
    def column_keys(self) -> tuple[str, ...]:
        return tuple(column.key for column in COLUMNS)

    def __len__(self) -> int:
        return len(self._state.users)

    @staticmethod
    def row_values(user: UserRecord) -> tuple[object, ...]:
        return (
            user.id,
            user.username,
            user.real_name,
            "Oui" if user.is_admin else "Non",
            user.article_count,
        )

    def rows(self) -> list[tuple[object, ...]]:
        return [self.row_values(user) for user in self._state.users]

    def user_at(self, index: int | None) -> UserRecord | None:
        return self._state.user_at(index)

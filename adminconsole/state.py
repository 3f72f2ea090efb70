"""Structures de données partagées entre la couche UI et les services."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from adminconsole.models import UserRecord


@dataclass(slots=True)
class AdminState:
    """État interne de la console.

    Les enregistrements sont repérés par leur position et leur identité
    d'objet, jamais par leur ``id`` : un serveur peut renvoyer des
    identifiants absents (lus comme 0) ou répétés.
    """

    username: str | None = None
    users: list[UserRecord] = field(default_factory=list)
    selected_user: UserRecord | None = None

    @property
    def is_authenticated(self) -> bool:
        """Retourne True si un administrateur est connecté."""
        return self.username is not None

    def set_users(self, users: Iterable[UserRecord]) -> None:
        """Remplace toute la collection et oublie la sélection courante."""
        self.users = list(users)
        self.selected_user = None

    def user_at(self, index: int | None) -> UserRecord | None:
        if index is None or not 0 <= index < len(self.users):
            return None
        return self.users[index]

    def index_of(self, user: UserRecord) -> int | None:
        for index, candidate in enumerate(self.users):
            if candidate is user:
                return index
        return None

    def select(self, index: int | None) -> UserRecord | None:
        """Sélectionne la ligne ``index`` ; un index invalide efface la sélection."""
        self.selected_user = self.user_at(index)
        return self.selected_user

    def is_selected(self, user: UserRecord) -> bool:
        return self.selected_user is user

    def remove(self, user: UserRecord) -> int | None:
        """Retire cet enregistrement précis et retourne sa position, ou None s'il n'y est plus."""
        index = self.index_of(user)
        if index is None:
            return None
        del self.users[index]
        if self.selected_user is user:
            self.selected_user = None
        return index

    def clear_users(self) -> None:
        self.users = []
        self.selected_user = None

    def reset(self) -> None:
        """Réinitialise l'état de la console."""
        self.username = None
        self.clear_users()

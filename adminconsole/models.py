"""Types échangés entre le client HTTP et la couche UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class UserRecord:
    """Utilisateur tel que renvoyé par la liste d'administration."""

    id: int
    username: str
    real_name: str = ""
    date_of_birth: str = ""
    bio: str = ""
    avatar_type: str = ""
    avatar_key: str = ""
    avatar_path: str = ""
    is_admin: bool = False
    article_count: int = 0


@dataclass(frozen=True, slots=True)
class LoginSuccess:
    is_admin: bool
    username: str = ""


@dataclass(frozen=True, slots=True)
class LoginFailure:
    message: str


LoginOutcome = Union[LoginSuccess, LoginFailure]


@dataclass(frozen=True, slots=True)
class AvatarLoaded:
    """Octets bruts de l'image, non décodés."""

    data: bytes


@dataclass(frozen=True, slots=True)
class AvatarFailure:
    message: str


AvatarResult = Union[AvatarLoaded, AvatarFailure]

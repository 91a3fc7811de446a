"""User aggregate and the authenticated Principal."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MIN_PASSWORD_LENGTH = 6


class Role(Enum):
    USER = "USER"
    ADMIN = "ADMIN"


@dataclass
class User:
    """A registered user.

    Only the salted password hash is ever held; hashing and verification
    are delegated to a ``PasswordHasher`` port.
    """

    id: str | None
    username: str
    email: str
    password_hash: str
    role: Role = Role.USER
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        username: str,
        email: str,
        password_hash: str,
        role: Role = Role.USER,
    ) -> User:
        return User(
            id=None,
            username=clean_username(username),
            email=normalize_email(email),
            password_hash=password_hash,
            role=role,
        )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def principal(self) -> Principal:
        return Principal(user_id=self.id, role=self.role)  # type: ignore[arg-type]


@dataclass(frozen=True)
class Principal:
    """Who is making a request, as resolved by an ``AuthResolver``."""

    user_id: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def owns(self, owner_id: str | None) -> bool:
        return owner_id is not None and owner_id == self.user_id


def clean_username(username: str | None) -> str:
    if not username or not username.strip():
        raise ValidationError("Username is required")
    return username.strip()


def normalize_email(email: str | None) -> str:
    if not email or not _EMAIL_RE.match(email.strip()):
        raise ValidationError(f"Invalid email address: {email!r}")
    return email.strip().lower()


def check_password(password: str | None) -> str:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    return password

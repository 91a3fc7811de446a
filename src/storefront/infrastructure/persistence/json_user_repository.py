"""JSON-file-backed implementation of UserRepository."""

from __future__ import annotations

from storefront.domain.exceptions import (
    DuplicateEmailError,
    DuplicateNameError,
    UserNotFoundError,
)
from storefront.domain.model.user import Role, User
from storefront.domain.model.value_objects import Page, Pagination
from storefront.domain.repository.user_repository import UserRepository
from storefront.infrastructure.persistence.json_file import (
    JsonFileRepository,
    format_datetime,
    new_id,
    parse_datetime,
)


class JsonUserRepository(JsonFileRepository, UserRepository):

    def get_by_id(self, user_id: str) -> User | None:
        for raw in self._snapshot():
            if raw["id"] == user_id:
                return self._to_domain(raw)
        return None

    def get_by_email(self, email: str) -> User | None:
        wanted = email.strip().lower()
        for raw in self._snapshot():
            if raw["email"] == wanted:
                return self._to_domain(raw)
        return None

    def list(self, pagination: Pagination) -> Page[User]:
        users = sorted(
            (self._to_domain(raw) for raw in self._snapshot()),
            key=lambda u: u.created_at,
            reverse=True,
        )
        return Page.from_sequence(users, pagination)

    def add(self, user: User) -> None:
        with self._transaction() as records:
            self._check_unique(records, user)
            user.id = new_id()
            records.append(self._to_raw(user))

    def save(self, user: User) -> None:
        with self._transaction() as records:
            i = self._index_of(records, user.id)  # type: ignore[arg-type]
            if i is None:
                raise UserNotFoundError(f"User {user.id} not found")
            self._check_unique(records, user)
            records[i] = self._to_raw(user)

    def delete(self, user_id: str) -> None:
        with self._transaction() as records:
            i = self._index_of(records, user_id)
            if i is None:
                raise UserNotFoundError(f"User {user_id} not found")
            del records[i]

    @staticmethod
    def _check_unique(records: list[dict], user: User) -> None:
        for raw in records:
            if raw["id"] == user.id:
                continue
            if raw["username"] == user.username:
                raise DuplicateNameError(f"Username {user.username!r} is already taken")
            if raw["email"] == user.email:
                raise DuplicateEmailError(f"Email {user.email!r} is already registered")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(user: User) -> dict:
        return {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "password_hash": user.password_hash,
            "role": user.role.value,
            "created_at": format_datetime(user.created_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> User:
        return User(
            id=raw["id"],
            username=raw["username"],
            email=raw["email"],
            password_hash=raw["password_hash"],
            role=Role(raw.get("role", Role.USER.value)),
            created_at=parse_datetime(raw["created_at"]),  # type: ignore[arg-type]
        )

"""Abstract repository for User aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.user import User
from storefront.domain.model.value_objects import Page, Pagination


class UserRepository(ABC):

    @abstractmethod
    def get_by_id(self, user_id: str) -> User | None:
        """Return a user by ID, or None if not found."""

    @abstractmethod
    def get_by_email(self, email: str) -> User | None:
        """Return a user by (normalised) email, or None if not found."""

    @abstractmethod
    def list(self, pagination: Pagination) -> Page[User]:
        """Return users, most recently created first."""

    @abstractmethod
    def add(self, user: User) -> None:
        """Persist a new user, assigning its ID.

        Uniqueness is enforced here, atomically with the write:
        raises DuplicateNameError for a taken username and
        DuplicateEmailError for a taken email.
        """

    @abstractmethod
    def save(self, user: User) -> None:
        """Persist an updated user.  Same uniqueness rules as ``add``."""

    @abstractmethod
    def delete(self, user_id: str) -> None:
        """Remove a user permanently."""

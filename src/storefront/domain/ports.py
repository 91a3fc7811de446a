"""Ports: abstract interfaces for capabilities the domain consumes.

The domain and application layers program against these; adapters
(JWT, bcrypt, local disk) live in the infrastructure layer and are wired
by the composition root.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.user import Principal, User


class AuthResolver(ABC):

    @abstractmethod
    def resolve(self, credentials: str | None) -> Principal:
        """Turn request credentials into a principal.

        Raises UnauthenticatedError when credentials are missing, malformed,
        expired or forged.
        """


class TokenIssuer(ABC):

    @abstractmethod
    def issue(self, user: User) -> str:
        """Return a signed credential that ``AuthResolver`` will accept."""


class PasswordHasher(ABC):

    @abstractmethod
    def hash(self, password: str) -> str:
        """Return a salted hash of ``password``."""

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        """Check ``password`` against a hash produced by ``hash``."""


class BlobStore(ABC):

    @abstractmethod
    def store(self, data: bytes, content_type: str, name_hint: str = "") -> str:
        """Persist a binary blob and return a reference path to it."""

    @abstractmethod
    def delete(self, reference: str) -> None:
        """Remove a stored blob.  Unknown references are ignored."""

"""Application service: Authenticate User (login) use case."""

from __future__ import annotations

import structlog

from storefront.application.dto import AuthTokenDTO, UserDTO
from storefront.domain.exceptions import UnauthenticatedError, ValidationError
from storefront.domain.model.user import normalize_email
from storefront.domain.ports import PasswordHasher, TokenIssuer
from storefront.domain.repository.user_repository import UserRepository

logger = structlog.get_logger(__name__)


class AuthenticateUserHandler:

    def __init__(
        self,
        user_repo: UserRepository,
        hasher: PasswordHasher,
        token_issuer: TokenIssuer,
    ) -> None:
        self._user_repo = user_repo
        self._hasher = hasher
        self._token_issuer = token_issuer

    def handle(self, email: str, password: str) -> AuthTokenDTO:
        """Exchange email + password for a signed token.

        The same error is raised for an unknown email and a wrong password.
        """
        try:
            normalized = normalize_email(email)
        except ValidationError:
            raise UnauthenticatedError("Invalid credentials") from None

        user = self._user_repo.get_by_email(normalized)
        if user is None or not password or not self._hasher.verify(password, user.password_hash):
            logger.warning("Login failed", email=normalized)
            raise UnauthenticatedError("Invalid credentials")

        logger.info("User logged in", user_id=user.id)
        return AuthTokenDTO(token=self._token_issuer.issue(user), user=UserDTO.from_user(user))

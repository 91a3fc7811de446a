"""Application service: Register User use case."""

from __future__ import annotations

import structlog

from storefront.application.dto import UserDTO
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.user import Principal, Role, User, check_password
from storefront.domain.model.value_objects import Pagination
from storefront.domain.ports import PasswordHasher
from storefront.domain.repository.user_repository import UserRepository
from storefront.domain.service.authorization_policy import AuthorizationPolicy

logger = structlog.get_logger(__name__)


def parse_role(value: str | Role | None) -> Role:
    if value is None:
        return Role.USER
    if isinstance(value, Role):
        return value
    try:
        return Role(value.strip().upper())
    except ValueError:
        raise ValidationError(f"Invalid role: {value!r}") from None


class RegisterUserHandler:

    def __init__(
        self,
        user_repo: UserRepository,
        hasher: PasswordHasher,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._hasher = hasher
        self._policy = policy or AuthorizationPolicy()

    def handle(
        self,
        username: str,
        email: str,
        password: str,
        role: str | Role | None = None,
        principal: Principal | None = None,
    ) -> UserDTO:
        """Register a new account.

        Anyone may register as USER.  ADMIN accounts can only be created by
        an administrator, except for the very first account in an empty
        directory.
        """
        wanted_role = parse_role(role)
        if not self._is_bootstrap(wanted_role):
            self._policy.can_assign_role(principal, wanted_role).enforce()

        user = User.create(
            username=username,
            email=email,
            password_hash=self._hasher.hash(check_password(password)),
            role=wanted_role,
        )
        self._user_repo.add(user)
        logger.info("User registered", user_id=user.id, role=user.role.value)
        return UserDTO.from_user(user)

    def _is_bootstrap(self, role: Role) -> bool:
        return role == Role.ADMIN and self._user_repo.list(Pagination(1, 1)).total == 0

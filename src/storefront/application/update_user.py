"""Application service: Update User use case."""

from __future__ import annotations

from typing import Any

import structlog

from storefront.application.dto import UserDTO
from storefront.application.guards import require_principal
from storefront.application.register_user import parse_role
from storefront.domain.exceptions import UserNotFoundError, ValidationError
from storefront.domain.model.user import (
    Principal,
    check_password,
    clean_username,
    normalize_email,
)
from storefront.domain.ports import PasswordHasher
from storefront.domain.repository.user_repository import UserRepository
from storefront.domain.service.authorization_policy import AuthorizationPolicy

logger = structlog.get_logger(__name__)

EDITABLE_FIELDS = frozenset({"username", "email", "password", "role"})


class UpdateUserHandler:

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
        self, principal: Principal | None, user_id: str, changes: dict[str, Any]
    ) -> UserDTO:
        """Apply profile changes.  Only administrators may change a role."""
        principal = require_principal(principal)
        self._policy.can_edit_user(principal, user_id).enforce()

        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        user = self._user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")

        # Validate everything first so a bad field changes nothing.
        cleaned: dict[str, Any] = {}
        if "username" in changes:
            cleaned["username"] = clean_username(changes["username"])
        if "email" in changes:
            cleaned["email"] = normalize_email(changes["email"])
        if "password" in changes:
            cleaned["password_hash"] = self._hasher.hash(check_password(changes["password"]))
        if "role" in changes:
            role = parse_role(changes["role"])
            if role != user.role:
                self._policy.can_manage_users(principal).enforce()
                cleaned["role"] = role

        for key, value in cleaned.items():
            setattr(user, key, value)
        self._user_repo.save(user)

        logger.info("User updated", user_id=user_id, fields=sorted(changes), by=principal.user_id)
        return UserDTO.from_user(user)

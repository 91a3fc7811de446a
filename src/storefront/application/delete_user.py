"""Application service: Delete User use case."""

from __future__ import annotations

import structlog

from storefront.application.guards import require_principal
from storefront.domain.exceptions import UserNotFoundError
from storefront.domain.model.user import Principal
from storefront.domain.repository.user_repository import UserRepository
from storefront.domain.service.authorization_policy import AuthorizationPolicy

logger = structlog.get_logger(__name__)


class DeleteUserHandler:

    def __init__(
        self,
        user_repo: UserRepository,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._policy = policy or AuthorizationPolicy()

    def handle(self, user_id: str, principal: Principal | None) -> None:
        """Remove an account.  Orders placed by the user are kept."""
        principal = require_principal(principal)
        self._policy.can_manage_users(principal).enforce()

        if self._user_repo.get_by_id(user_id) is None:
            raise UserNotFoundError(f"User {user_id} not found")

        self._user_repo.delete(user_id)
        logger.info("User deleted", user_id=user_id, by=principal.user_id)

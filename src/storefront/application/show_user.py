"""Application services: user queries."""

from __future__ import annotations

from storefront.application.dto import PageDTO, UserDTO
from storefront.application.guards import require_principal
from storefront.domain.exceptions import UserNotFoundError
from storefront.domain.model.user import Principal
from storefront.domain.model.value_objects import Pagination
from storefront.domain.repository.user_repository import UserRepository
from storefront.domain.service.authorization_policy import AuthorizationPolicy


class ShowUserHandler:

    def __init__(
        self,
        user_repo: UserRepository,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._policy = policy or AuthorizationPolicy()

    def handle(self, user_id: str, principal: Principal | None) -> UserDTO:
        principal = require_principal(principal)
        self._policy.can_view_user(principal, user_id).enforce()

        user = self._user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return UserDTO.from_user(user)


class ListUsersHandler:

    def __init__(
        self,
        user_repo: UserRepository,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._policy = policy or AuthorizationPolicy()

    def handle(
        self, principal: Principal | None, pagination: Pagination | None = None
    ) -> PageDTO[UserDTO]:
        principal = require_principal(principal)
        self._policy.can_manage_users(principal).enforce()

        page = self._user_repo.list(pagination or Pagination())
        return PageDTO.from_page(page, [UserDTO.from_user(u) for u in page.items])

"""FastAPI dependencies: settings, the calling principal, pagination."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, Query, Request

from storefront.domain.model.user import Principal
from storefront.domain.model.value_objects import DEFAULT_PAGE_SIZE, Pagination
from storefront.infrastructure import bootstrap
from storefront.infrastructure.config import Settings


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_app_settings)]


def get_optional_principal(
    settings: SettingsDep,
    authorization: Annotated[str | None, Header()] = None,
) -> Principal | None:
    """The caller, or None when no Authorization header was sent.

    A header that is present but invalid is still rejected.
    """
    if not authorization:
        return None
    return bootstrap.auth_resolver(settings).resolve(authorization)


def get_principal(
    settings: SettingsDep,
    authorization: Annotated[str | None, Header()] = None,
) -> Principal:
    return bootstrap.auth_resolver(settings).resolve(authorization)


def get_pagination(
    page: Annotated[int, Query()] = 1,
    limit: Annotated[int, Query()] = DEFAULT_PAGE_SIZE,
) -> Pagination:
    return Pagination(page=page, limit=limit)


PrincipalDep = Annotated[Principal, Depends(get_principal)]
OptionalPrincipalDep = Annotated[Principal | None, Depends(get_optional_principal)]
PaginationDep = Annotated[Pagination, Depends(get_pagination)]

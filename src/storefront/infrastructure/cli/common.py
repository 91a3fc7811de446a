"""Bits shared by every CLI command module."""

from __future__ import annotations

import click

from storefront.application.dto import PageDTO
from storefront.domain.exceptions import DomainException
from storefront.domain.model.user import Principal
from storefront.domain.model.value_objects import DEFAULT_PAGE_SIZE, Pagination
from storefront.infrastructure.bootstrap import auth_resolver

token_option = click.option(
    "--token",
    envvar="STOREFRONT_TOKEN",
    default=None,
    help="Auth token from 'user login' (or set STOREFRONT_TOKEN).",
)


def page_options(func):
    func = click.option("--limit", default=DEFAULT_PAGE_SIZE, show_default=True, type=int)(func)
    func = click.option("--page", default=1, show_default=True, type=int)(func)
    return func


def principal_from(token: str | None) -> Principal | None:
    """Resolve ``--token``; no token means an anonymous caller."""
    if not token:
        return None
    try:
        return auth_resolver().resolve(token)
    except DomainException as exc:
        raise click.ClickException(str(exc))


def pagination_from(page: int, limit: int) -> Pagination:
    try:
        return Pagination(page=page, limit=limit)
    except DomainException as exc:
        raise click.BadParameter(str(exc))


def echo_page_footer(page: PageDTO) -> None:
    click.echo(
        f"Page {page.current_page}/{max(page.total_pages, 1)}  "
        f"({page.count} shown, {page.total} total)"
    )

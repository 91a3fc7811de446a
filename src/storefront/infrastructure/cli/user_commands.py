"""CLI commands for users and authentication."""

from __future__ import annotations

import click

from storefront.application.authenticate_user import AuthenticateUserHandler
from storefront.application.register_user import RegisterUserHandler
from storefront.application.show_user import ListUsersHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import (
    password_hasher,
    token_issuer,
    user_repository,
)
from storefront.infrastructure.cli.common import (
    echo_page_footer,
    page_options,
    pagination_from,
    principal_from,
    token_option,
)


@click.command("register")
@click.option("--username", required=True)
@click.option("--email", required=True)
@click.option("--password", required=True, prompt=True, hide_input=True)
@click.option(
    "--role",
    type=click.Choice(["USER", "ADMIN"], case_sensitive=False),
    default="USER",
    show_default=True,
)
@token_option
def user_register(username: str, email: str, password: str, role: str, token: str | None) -> None:
    """Register a new account."""
    handler = RegisterUserHandler(user_repo=user_repository(), hasher=password_hasher())

    try:
        user = handler.handle(
            username=username,
            email=email,
            password=password,
            role=role,
            principal=principal_from(token),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"User {user.id} '{user.username}' registered (role={user.role})")


@click.command("login")
@click.option("--email", required=True)
@click.option("--password", required=True, prompt=True, hide_input=True)
def user_login(email: str, password: str) -> None:
    """Log in and print an auth token."""
    handler = AuthenticateUserHandler(
        user_repo=user_repository(),
        hasher=password_hasher(),
        token_issuer=token_issuer(),
    )

    try:
        result = handler.handle(email=email, password=password)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(result.token)


@click.command("list")
@token_option
@page_options
def user_list(token: str | None, page: int, limit: int) -> None:
    """List registered users (admin only)."""
    handler = ListUsersHandler(user_repo=user_repository())

    try:
        result = handler.handle(principal_from(token), pagination_from(page, limit))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.items:
        click.echo("No users found.")
        return

    click.echo(f"{'ID':<34} {'Username':<20} {'Email':<30} {'Role':<6}")
    click.echo("-" * 93)
    for u in result.items:
        click.echo(f"{u.id:<34} {u.username:<20} {u.email:<30} {u.role:<6}")
    echo_page_footer(result)

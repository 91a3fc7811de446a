"""CLI commands for categories."""

from __future__ import annotations

import click

from storefront.application.add_category import AddCategoryHandler
from storefront.application.delete_category import DeleteCategoryHandler
from storefront.application.show_category import ListCategoriesHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import category_repository, product_repository
from storefront.infrastructure.cli.common import (
    echo_page_footer,
    page_options,
    pagination_from,
    principal_from,
    token_option,
)


@click.command("add")
@click.option("--name", required=True)
@click.option("--description", default="")
@token_option
def category_add(name: str, description: str, token: str | None) -> None:
    """Add a category (admin only)."""
    handler = AddCategoryHandler(category_repo=category_repository())

    try:
        category = handler.handle(principal_from(token), name, description)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Category {category.id} '{category.name}' added")


@click.command("list")
@page_options
def category_list(page: int, limit: int) -> None:
    """List categories by name."""
    handler = ListCategoriesHandler(category_repo=category_repository())

    try:
        result = handler.handle(pagination_from(page, limit))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.items:
        click.echo("No categories found.")
        return

    for c in result.items:
        click.echo(f"{c.id:<34} {c.name:<24} {c.description}")
    echo_page_footer(result)


@click.command("delete")
@click.option("--id", "category_id", required=True)
@token_option
def category_delete(category_id: str, token: str | None) -> None:
    """Delete a category no product refers to (admin only)."""
    handler = DeleteCategoryHandler(
        category_repo=category_repository(),
        product_repo=product_repository(),
    )

    try:
        handler.handle(principal_from(token), category_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Category {category_id} deleted.")

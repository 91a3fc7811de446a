"""CLI commands for the Product aggregate."""

from __future__ import annotations

import mimetypes
from pathlib import Path

import click

from storefront.application.add_product import AddProductHandler
from storefront.application.delete_product import DeleteProductHandler
from storefront.application.dto import ImageUpload, PageDTO, ProductDTO, ProductFields
from storefront.application.show_product import ListProductsHandler, SearchProductsHandler
from storefront.application.update_product import PatchProductHandler
from storefront.application.upload_product_image import UploadProductImageHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import (
    blob_store,
    category_repository,
    product_repository,
)
from storefront.infrastructure.cli.common import (
    echo_page_footer,
    page_options,
    pagination_from,
    principal_from,
    token_option,
)
from storefront.infrastructure.config import get_settings


def _display_products(result: PageDTO[ProductDTO]) -> None:
    if not result.items:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<34} {'Name':<20} {'Price':>10} {'Stock':>6} {'Avail':>6}")
    click.echo("-" * 80)
    for p in result.items:
        click.echo(
            f"{p.id:<34} {p.name:<20} {'$' + format(p.price, '.2f'):>10} "
            f"{p.stock:>6} {'yes' if p.is_available else 'no':>6}"
        )
    echo_page_footer(result)


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--description", default="")
@click.option("--stock", default=0, type=int, show_default=True)
@click.option("--category", "category_id", default=None, help="Category ID.")
@click.option("--unavailable", is_flag=True, default=False, help="List it as not for sale.")
@token_option
def product_add(
    name: str,
    price: str,
    description: str,
    stock: int,
    category_id: str | None,
    unavailable: bool,
    token: str | None,
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(
        product_repo=product_repository(),
        category_repo=category_repository(),
    )
    fields = ProductFields(
        name=name,
        price=price,
        description=description,
        stock=stock,
        is_available=not unavailable,
        category_id=category_id,
    )

    try:
        product = handler.handle(principal_from(token), fields)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} '{product.name}' added at ${product.price:.2f}")


@click.command("list")
@click.option("--min-price", default=None)
@click.option("--max-price", default=None)
@click.option("--available/--unavailable", "is_available", default=None)
@click.option("--category", "category_id", default=None)
@page_options
def product_list(
    min_price: str | None,
    max_price: str | None,
    is_available: bool | None,
    category_id: str | None,
    page: int,
    limit: int,
) -> None:
    """List products, newest first."""
    handler = ListProductsHandler(product_repo=product_repository())

    try:
        result = handler.handle(
            min_price=min_price,
            max_price=max_price,
            is_available=is_available,
            category_id=category_id,
            pagination=pagination_from(page, limit),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_products(result)


@click.command("search")
@click.option("--term", required=True, help="Matches name or description.")
@page_options
def product_search(term: str, page: int, limit: int) -> None:
    """Search products by name or description."""
    handler = SearchProductsHandler(product_repo=product_repository())

    try:
        result = handler.handle(term, pagination_from(page, limit))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_products(result)


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--name", default=None)
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--description", default=None)
@click.option("--stock", default=None, type=int)
@click.option("--available/--unavailable", "is_available", default=None)
@click.option("--category", "category_id", default=None)
@token_option
def product_update(
    product_id: str,
    name: str | None,
    price: str | None,
    description: str | None,
    stock: int | None,
    is_available: bool | None,
    category_id: str | None,
    token: str | None,
) -> None:
    """Change some fields of a product."""
    given = {
        "name": name,
        "price": price,
        "description": description,
        "stock": stock,
        "is_available": is_available,
        "category_id": category_id,
    }
    changes = {key: value for key, value in given.items() if value is not None}
    if not changes:
        raise click.UsageError("Nothing to update.")

    handler = PatchProductHandler(
        product_repo=product_repository(),
        category_repo=category_repository(),
    )

    try:
        product = handler.handle(principal_from(token), product_id, changes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} updated ({', '.join(sorted(changes))})")


@click.command("image")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option(
    "--file", "file_path", required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@token_option
def product_image(product_id: str, file_path: Path, token: str | None) -> None:
    """Upload a new image for a product."""
    content_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
    upload = ImageUpload(
        data=file_path.read_bytes(),
        content_type=content_type,
        filename=file_path.name,
    )
    handler = UploadProductImageHandler(
        product_repo=product_repository(),
        blob_store=blob_store(),
        max_bytes=get_settings().max_image_bytes,
    )

    try:
        product = handler.handle(principal_from(token), product_id, upload)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} image set to {product.image}")


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
@token_option
def product_delete(product_id: str, token: str | None) -> None:
    """Remove a product from the catalog."""
    handler = DeleteProductHandler(
        product_repo=product_repository(),
        blob_store=blob_store(),
    )

    try:
        handler.handle(principal_from(token), product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} deleted.")

import click

from storefront.infrastructure.cli.category_commands import (
    category_add,
    category_delete,
    category_list,
)
from storefront.infrastructure.cli.order_commands import (
    order_cancel,
    order_create,
    order_delete,
    order_list,
    order_show,
    order_status,
)
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_image,
    product_list,
    product_search,
    product_update,
)
from storefront.infrastructure.cli.user_commands import user_list, user_login, user_register
from storefront.infrastructure.config import get_settings
from storefront.infrastructure.logging import configure_logging


@click.group()
def cli() -> None:
    """Storefront: catalog and order management"""
    configure_logging(get_settings())


@cli.group()
def user() -> None:
    """Manage users and log in."""


@cli.group()
def category() -> None:
    """Manage categories."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
def serve(host: str, port: int) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run(
        "storefront.infrastructure.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        log_config=None,
    )


# Register subcommands
user.add_command(user_register)
user.add_command(user_login)
user.add_command(user_list)
category.add_command(category_add)
category.add_command(category_list)
category.add_command(category_delete)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_search)
product.add_command(product_update)
product.add_command(product_image)
product.add_command(product_delete)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_status)
order.add_command(order_cancel)
order.add_command(order_delete)

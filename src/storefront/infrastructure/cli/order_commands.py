"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storefront.application.dto import AddressSpec, OrderDTO, OrderItemSpec
from storefront.application.show_order import OrderFilter
from storefront.domain.exceptions import DomainException
from storefront.domain.model.order import OrderStatus, PaymentMethod, PaymentStatus
from storefront.infrastructure.bootstrap import order_workflow
from storefront.infrastructure.cli.common import (
    echo_page_footer,
    page_options,
    pagination_from,
    principal_from,
    token_option,
)


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse 'productId:3,productId:5' into an OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductID:Quantity'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        specs.append(OrderItemSpec(product_id=product_id.strip(), quantity=qty))
    return specs


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.id}  (status={dto.status})")
    click.echo(f"Customer: {dto.user.username if dto.user else dto.user_id}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo(f"Payment:  {dto.payment.method} ({dto.payment.status})")
    address = dto.shipping_address
    click.echo(
        f"Ship to:  {address.street}, {address.city} {address.postal_code}, {address.country}"
    )
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} "
            f"{'$' + format(item.unit_price, '.2f'):>10} {'$' + format(item.line_total, '.2f'):>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Order Total':<27} {'$' + format(dto.total_price, '.2f'):>20}")


@click.command("create")
@click.option("--items", required=True, help="Items as 'ProductID:Qty,ProductID:Qty'.")
@click.option("--street", required=True)
@click.option("--city", required=True)
@click.option("--postal-code", required=True)
@click.option("--country", required=True)
@click.option(
    "--payment",
    "payment_method",
    type=click.Choice([m.value for m in PaymentMethod]),
    required=True,
)
@token_option
def order_create(
    items: str,
    street: str,
    city: str,
    postal_code: str,
    country: str,
    payment_method: str,
    token: str | None,
) -> None:
    """Place a new order (reserves stock)."""
    specs = _parse_items(items)
    address = AddressSpec(street=street, city=city, postal_code=postal_code, country=country)

    try:
        dto = order_workflow().create_order(principal_from(token), specs, address, payment_method)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.id} created")
    _display_order(dto)


@click.command("list")
@click.option("--status", type=click.Choice([s.value for s in OrderStatus]), default=None)
@click.option("--all", "all_users", is_flag=True, default=False, help="Every user's orders (admin).")
@token_option
@page_options
def order_list(
    status: str | None, all_users: bool, token: str | None, page: int, limit: int
) -> None:
    """List orders, most recent first."""
    try:
        result = order_workflow().get_orders(
            principal_from(token),
            OrderFilter(status=status, all_users=all_users),
            pagination_from(page, limit),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.items:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<34} {'Status':<11} {'Items':>5} {'Total':>12}")
    click.echo("-" * 65)
    for o in result.items:
        click.echo(
            f"{o.id:<34} {o.status:<11} {o.total_items:>5} {'$' + format(o.total_price, '.2f'):>12}"
        )
    echo_page_footer(result)


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
@token_option
def order_show(order_id: str, token: str | None) -> None:
    """Show details of an existing order."""
    try:
        dto = order_workflow().get_order(order_id, principal_from(token))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("status")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--status", type=click.Choice([s.value for s in OrderStatus]), default=None)
@click.option(
    "--payment-status",
    type=click.Choice([s.value for s in PaymentStatus]),
    default=None,
)
@token_option
def order_status(
    order_id: str, status: str | None, payment_status: str | None, token: str | None
) -> None:
    """Move an order along its lifecycle and/or record its payment status."""
    try:
        dto = order_workflow().update_order_status(
            order_id, status, principal_from(token), payment_status=payment_status
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} is now {dto.status} (payment {dto.payment.status}).")


@click.command("cancel")
@click.option("--id", "order_id", required=True, help="Order ID to cancel.")
@token_option
def order_cancel(order_id: str, token: str | None) -> None:
    """Cancel an order (returns its stock)."""
    try:
        order_workflow().cancel_order(order_id, principal_from(token))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} cancelled.")


@click.command("delete")
@click.option("--id", "order_id", required=True, help="Order ID to delete.")
@token_option
def order_delete(order_id: str, token: str | None) -> None:
    """Delete an order (admin only; returns any stock it still holds)."""
    try:
        order_workflow().delete_order(order_id, principal_from(token))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} deleted.")

"""HTTP routes for the order lifecycle."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from storefront.application.show_order import OrderFilter
from storefront.infrastructure import bootstrap
from storefront.infrastructure.api.dependencies import (
    PaginationDep,
    PrincipalDep,
    SettingsDep,
)
from storefront.infrastructure.api.schemas import (
    CreateOrderRequest,
    OrderStatusRequest,
    envelope,
    page_envelope,
)

order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201)
def create_order(body: CreateOrderRequest, settings: SettingsDep, principal: PrincipalDep) -> dict:
    order = bootstrap.order_workflow(settings).create_order(
        principal, body.item_specs(), body.address_spec(), body.payment_method()
    )
    return envelope(order)


@order_router.get("")
def list_orders(
    settings: SettingsDep,
    principal: PrincipalDep,
    pagination: PaginationDep,
    status: str | None = None,
    all_users: Annotated[bool, Query(alias="all")] = False,
) -> dict:
    page = bootstrap.order_workflow(settings).get_orders(
        principal, OrderFilter(status=status, all_users=all_users), pagination
    )
    return page_envelope(page)


@order_router.get("/{order_id}")
def get_order(order_id: str, settings: SettingsDep, principal: PrincipalDep) -> dict:
    return envelope(bootstrap.order_workflow(settings).get_order(order_id, principal))


@order_router.patch("/{order_id}/status")
def update_order_status(
    order_id: str, body: OrderStatusRequest, settings: SettingsDep, principal: PrincipalDep
) -> dict:
    order = bootstrap.order_workflow(settings).update_order_status(
        order_id, body.status, principal, payment_status=body.payment_status
    )
    return envelope(order)


@order_router.post("/{order_id}/cancel")
def cancel_order(order_id: str, settings: SettingsDep, principal: PrincipalDep) -> dict:
    return envelope(bootstrap.order_workflow(settings).cancel_order(order_id, principal))


@order_router.delete("/{order_id}")
def delete_order(order_id: str, settings: SettingsDep, principal: PrincipalDep) -> dict:
    bootstrap.order_workflow(settings).delete_order(order_id, principal)
    return {"success": True, "message": "Order deleted"}

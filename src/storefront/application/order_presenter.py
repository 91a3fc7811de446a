"""Maps Order aggregates to OrderDTOs, resolving referenced user and
product data for display."""

from __future__ import annotations

from storefront.application.dto import (
    AddressSpec,
    OrderDTO,
    OrderLineDTO,
    PaymentDTO,
    UserSummaryDTO,
)
from storefront.domain.model.order import Order
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.user_repository import UserRepository


class OrderPresenter:

    def __init__(
        self,
        user_repo: UserRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._user_repo = user_repo
        self._product_repo = product_repo

    def present(self, order: Order) -> OrderDTO:
        user = self._user_repo.get_by_id(order.user_id)
        user_dto = (
            UserSummaryDTO(id=user.id, username=user.username, email=user.email)  # type: ignore[arg-type]
            if user is not None
            else None
        )

        images: dict[str, str | None] = {}
        for line in order.items:
            if line.product_id not in images:
                product = self._product_repo.get_by_id(line.product_id)
                images[line.product_id] = product.image if product is not None else None

        return OrderDTO(
            id=order.id,  # type: ignore[arg-type]
            user_id=order.user_id,
            user=user_dto,
            status=order.status.value,
            items=[
                OrderLineDTO(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    quantity=line.quantity.value,
                    unit_price=line.unit_price.amount,
                    line_total=line.line_total.amount,
                    product_image=images[line.product_id],
                )
                for line in order.items
            ],
            total_items=order.total_items,
            total_price=order.total_price.amount,
            shipping_address=AddressSpec(
                street=order.shipping_address.street,
                city=order.shipping_address.city,
                postal_code=order.shipping_address.postal_code,
                country=order.shipping_address.country,
            ),
            payment=PaymentDTO(
                method=order.payment_info.method.value,
                status=order.payment_info.status.value,
                paid_at=order.payment_info.paid_at,
            ),
            delivered_at=order.delivered_at,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )

"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from decimal import Decimal

from storefront.domain.exceptions import InvalidTransitionError, OrderNotFoundError
from storefront.domain.model.order import (
    Order,
    OrderLine,
    OrderStatus,
    PaymentInfo,
    PaymentMethod,
    PaymentStatus,
)
from storefront.domain.model.value_objects import (
    Money,
    Page,
    Pagination,
    Quantity,
    ShippingAddress,
)
from storefront.domain.repository.order_repository import OrderQuery, OrderRepository
from storefront.infrastructure.persistence.json_file import (
    JsonFileRepository,
    format_datetime,
    new_id,
    parse_datetime,
)


class JsonOrderRepository(JsonFileRepository, OrderRepository):

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: str) -> Order | None:
        for raw in self._snapshot():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list(self, query: OrderQuery, pagination: Pagination) -> Page[Order]:
        orders = [self._to_domain(raw) for raw in self._snapshot()]
        matching = sorted(
            (o for o in orders if query.matches(o)),
            key=lambda o: o.created_at,
            reverse=True,
        )
        return Page.from_sequence(matching, pagination)

    def add(self, order: Order) -> None:
        with self._transaction() as records:
            order.id = new_id()
            records.append(self._to_raw(order))

    def save(self, order: Order, expected_status: OrderStatus | None = None) -> None:
        with self._transaction() as records:
            i = self._index_of(records, order.id)  # type: ignore[arg-type]
            if i is None:
                raise OrderNotFoundError(f"Order {order.id} not found")
            if expected_status is not None and records[i]["status"] != expected_status.value:
                raise InvalidTransitionError(
                    f"Order {order.id} was changed by another request; reload it and retry"
                )
            raw = self._to_raw(order)
            raw["stock_restituted"] = raw["stock_restituted"] or records[i].get(
                "stock_restituted", False
            )
            records[i] = raw

    def delete(self, order_id: str) -> None:
        with self._transaction() as records:
            i = self._index_of(records, order_id)
            if i is None:
                raise OrderNotFoundError(f"Order {order_id} not found")
            del records[i]

    def claim_restitution(self, order_id: str) -> bool:
        with self._transaction() as records:
            i = self._index_of(records, order_id)
            if i is None or records[i].get("stock_restituted", False):
                return False
            records[i]["stock_restituted"] = True
            return True

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "user_id": order.user_id,
            "status": order.status.value,
            "items": [
                {
                    "product_id": line.product_id,
                    "product_name": line.product_name,
                    "quantity": line.quantity.value,
                    "unit_price": str(line.unit_price.amount),
                    "currency": line.unit_price.currency,
                }
                for line in order.items
            ],
            "total_items": order.total_items,
            "total_price": str(order.total_price.amount),
            "shipping_address": {
                "street": order.shipping_address.street,
                "city": order.shipping_address.city,
                "postal_code": order.shipping_address.postal_code,
                "country": order.shipping_address.country,
            },
            "payment_info": {
                "method": order.payment_info.method.value,
                "status": order.payment_info.status.value,
                "paid_at": format_datetime(order.payment_info.paid_at),
            },
            "delivered_at": format_datetime(order.delivered_at),
            "stock_restituted": order.stock_restituted,
            "created_at": format_datetime(order.created_at),
            "updated_at": format_datetime(order.updated_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = [
            OrderLine(
                product_id=item["product_id"],
                product_name=item["product_name"],
                quantity=Quantity(item["quantity"]),
                unit_price=Money(Decimal(item["unit_price"]), item.get("currency", "USD")),
            )
            for item in raw["items"]
        ]
        address = raw["shipping_address"]
        payment = raw["payment_info"]
        return Order(
            id=raw["id"],
            user_id=raw["user_id"],
            items=items,
            shipping_address=ShippingAddress(
                street=address["street"],
                city=address["city"],
                postal_code=address["postal_code"],
                country=address["country"],
            ),
            payment_info=PaymentInfo(
                method=PaymentMethod(payment["method"]),
                status=PaymentStatus(payment.get("status", PaymentStatus.PENDING.value)),
                paid_at=parse_datetime(payment.get("paid_at")),
            ),
            total_items=raw["total_items"],
            total_price=Money(Decimal(raw["total_price"])),
            status=OrderStatus(raw["status"]),
            delivered_at=parse_datetime(raw.get("delivered_at")),
            stock_restituted=raw.get("stock_restituted", False),
            created_at=parse_datetime(raw["created_at"]),  # type: ignore[arg-type]
            updated_at=parse_datetime(raw["updated_at"]),  # type: ignore[arg-type]
        )

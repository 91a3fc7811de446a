"""Domain service: Authorization Policy.

Every "may this principal do that?" question is answered here, so the
use-case handlers never compare roles inline.  Each check returns an
explicit Decision; ``Decision.enforce()`` turns a denial into a
ForbiddenError carrying the reason.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import ForbiddenError
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.product import Product
from storefront.domain.model.user import Principal, Role


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""

    @staticmethod
    def allow() -> Decision:
        return Decision(True)

    @staticmethod
    def deny(reason: str) -> Decision:
        return Decision(False, reason)

    def enforce(self) -> None:
        if not self.allowed:
            raise ForbiddenError(self.reason)


class AuthorizationPolicy:

    # --- Orders ---------------------------------------------------------------

    def can_view_order(self, principal: Principal, order: Order) -> Decision:
        if principal.is_admin or principal.owns(order.user_id):
            return Decision.allow()
        return Decision.deny("You are not allowed to view this order")

    def can_update_order_status(
        self, principal: Principal, order: Order, new_status: OrderStatus
    ) -> Decision:
        """Admins may drive any transition; owners may only cancel a pending order."""
        if principal.is_admin:
            return Decision.allow()
        if not principal.owns(order.user_id):
            return Decision.deny("You are not allowed to update this order")
        if new_status != OrderStatus.CANCELLED:
            return Decision.deny("You can only cancel your order, not change it to other statuses")
        if order.status not in (OrderStatus.PENDING, OrderStatus.CANCELLED):
            return Decision.deny("You can only cancel pending orders")
        return Decision.allow()

    def can_update_payment_status(self, principal: Principal) -> Decision:
        if principal.is_admin:
            return Decision.allow()
        return Decision.deny("Only administrators can update payment status")

    def can_cancel_order(self, principal: Principal, order: Order) -> Decision:
        if principal.is_admin or principal.owns(order.user_id):
            return Decision.allow()
        return Decision.deny("You are not allowed to cancel this order")

    def can_delete_order(self, principal: Principal) -> Decision:
        if principal.is_admin:
            return Decision.allow()
        return Decision.deny("Only administrators can delete orders")

    def can_view_all_orders(self, principal: Principal) -> Decision:
        if principal.is_admin:
            return Decision.allow()
        return Decision.deny("Only administrators can list every user's orders")

    # --- Catalog --------------------------------------------------------------

    def can_modify_product(self, principal: Principal, product: Product) -> Decision:
        if principal.is_admin:
            return Decision.allow()
        if product.creator_id is None or principal.owns(product.creator_id):
            return Decision.allow()
        return Decision.deny("You are not allowed to modify this product")

    def can_manage_categories(self, principal: Principal) -> Decision:
        if principal.is_admin:
            return Decision.allow()
        return Decision.deny("Only administrators can manage categories")

    # --- Users ----------------------------------------------------------------

    def can_view_user(self, principal: Principal, user_id: str) -> Decision:
        if principal.is_admin or principal.owns(user_id):
            return Decision.allow()
        return Decision.deny("You are not allowed to view this user")

    def can_manage_users(self, principal: Principal) -> Decision:
        if principal.is_admin:
            return Decision.allow()
        return Decision.deny("Only administrators can manage users")

    def can_edit_user(self, principal: Principal, user_id: str) -> Decision:
        if principal.is_admin or principal.owns(user_id):
            return Decision.allow()
        return Decision.deny("You are not allowed to edit this user")

    def can_assign_role(self, principal: Principal | None, role: Role) -> Decision:
        if role == Role.USER:
            return Decision.allow()
        if principal is not None and principal.is_admin:
            return Decision.allow()
        return Decision.deny("Only administrators can grant the admin role")

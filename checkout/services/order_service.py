# checkout/services/order_service.py
from sqlalchemy.orm import Session

from checkout.data.models import OrderModel, OrderStatus
from checkout.repos.order_repo import OrderRepo
from checkout.services.order_ledger import ORDER_TYPE

MAX_PAGE_SIZE = 50


class OrderService:
    """
    Odczyty zamówień kupującego (query).
    Zapisy zamówień robi wyłącznie OrderLedger w trakcie checkoutu.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)

    def get_order(self, order_id: str, user_id: str):
        """
        Use Case: Pobranie zamówienia (Query).
        """
        order = self._get_owned_order(order_id, user_id)
        return _order_to_dict(order)

    def list_orders(self, user_id: str, status: str | None = None, page: int = 1, limit: int = 10):
        """
        Use Case: Lista zamówień kupującego, najnowsze pierwsze.
        """
        if status is not None and status not in OrderStatus.ALL:
            raise ValueError(f"Unknown order status: {status}")

        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)

        orders, total = self.repo.list_orders_for_user(
            user_id, status=status, offset=(page - 1) * limit, limit=limit
        )

        return {
            "orders": [_order_to_dict(o) for o in orders],
            "page": page,
            "limit": limit,
            "total": total,
        }

    def get_related_orders(self, order_id: str, user_id: str):
        """
        Use Case: Opłacone zamówienia z tego samego checkoutu wielu sprzedawców
        (ten sam kupujący, ten sam koszyk).
        """
        order = self._get_owned_order(order_id, user_id)

        related = [
            o
            for o in self.repo.list_checkout_orders(user_id, order.cart_id, OrderStatus.PAID)
            if (o.meta or {}).get("orderType") == ORDER_TYPE
        ]

        return {"orders": [_order_to_dict(o) for o in related]}

    def _get_owned_order(self, order_id: str, user_id: str) -> OrderModel:
        order = self.repo.get_order(order_id)

        if not order:
            raise LookupError("Order not found")

        if order.user_id != user_id:
            raise PermissionError("Access to this order is forbidden")

        return order


def _order_to_dict(order: OrderModel) -> dict:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "seller_id": order.seller_id,
        "cart_id": order.cart_id,
        "status": order.status,
        "total_cents": order.total_cents,
        "platform_fee_cents": order.platform_fee_cents,
        "currency": order.currency,
        "provider_intent": order.provider_intent,
        "failure_reason": order.failure_reason,
        "created_at": order.created_at,
        "paid_at": order.paid_at,
        "items": [
            {
                "product_id": i.product_id,
                "title": i.title,
                "unit_price_cents": i.unit_price_cents,
                "quantity": i.quantity,
                "subtotal_cents": i.subtotal_cents,
            }
            for i in order.items
        ],
    }

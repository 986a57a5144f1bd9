# checkout/services/order_ledger.py
from datetime import datetime, timezone

from checkout.data.models import OrderModel, OrderItemModel, OrderStatus
from checkout.data.unit_of_work import UnitOfWork
from checkout.domain.checkout import FeeBreakdown, SellerGroup
from checkout.domain.errors import InvalidStateTransitionError
from checkout.domain.schemas import PaymentMetadata
from checkout.repos.order_repo import OrderRepo
from checkout.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_TYPE = "multi_vendor_cart"

# pending -> pending tylko żeby dopisać referencje bramki / powód (timeout, requires_action)
_ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PENDING, OrderStatus.PAID, OrderStatus.FAILED},
    **{status: set() for status in OrderStatus.TERMINAL},
}


class OrderLedger:
    """
    Zapis zamówień jednej nogi checkoutu.

    Każda metoda kończy się uow.commit() - zamówienie jest trwałe zanim
    ktokolwiek zawoła bramkę płatności.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.repo = OrderRepo(uow.session)

    def create_pending_order(
        self,
        buyer_id: str,
        cart_id: str,
        group: SellerGroup,
        fees: FeeBreakdown,
        currency: str,
    ) -> OrderModel:
        order = self._build_order(buyer_id, cart_id, group, fees, currency, OrderStatus.PENDING)
        self.repo.add_order(order)
        self.uow.commit()

        logger.info(
            f"Order {order.id} created (pending) for seller {group.seller_id}, "
            f"total {order.total_cents}, fee {order.platform_fee_cents}"
        )
        return order

    def create_paid_order(
        self,
        buyer_id: str,
        cart_id: str,
        group: SellerGroup,
        fees: FeeBreakdown,
        currency: str,
    ) -> OrderModel:
        """Darmowa noga - nie ma czego obciążać, zamówienie od razu paid."""
        order = self._build_order(buyer_id, cart_id, group, fees, currency, OrderStatus.PAID)
        order.paid_at = datetime.now(timezone.utc)
        self.repo.add_order(order)
        self.uow.commit()

        logger.info(f"Order {order.id} created (paid, free) for seller {group.seller_id}")
        return order

    def update_order_outcome(
        self,
        order_id: str,
        external_ref: str | None,
        new_status: str,
        paid_at: datetime | None = None,
        failure_reason: str | None = None,
    ) -> OrderModel:
        if new_status not in OrderStatus.ALL:
            raise ValueError(f"Unknown order status: {new_status}")

        order = self.repo.get_order(order_id)
        if not order:
            raise ValueError(f"Order {order_id} does not exist")

        # status spoza naszej maszyny (np. zmieniony przez webhook) traktujemy jak końcowy
        if new_status not in _ALLOWED_TRANSITIONS.get(order.status, set()):
            raise InvalidStateTransitionError(order_id, order.status, new_status)

        order.status = new_status
        if external_ref:
            order.provider_intent = external_ref
        if new_status == OrderStatus.PAID:
            order.paid_at = paid_at or datetime.now(timezone.utc)
        if failure_reason:
            order.failure_reason = failure_reason

        self.uow.commit()

        logger.info(f"Order {order_id} -> {new_status} (ref {external_ref})")
        return order

    def _build_order(
        self,
        buyer_id: str,
        cart_id: str,
        group: SellerGroup,
        fees: FeeBreakdown,
        currency: str,
        status: str,
    ) -> OrderModel:
        total_cents = sum(line.subtotal_cents for line in group.items)
        if total_cents != fees.subtotal_cents:
            raise ValueError(
                f"Fee breakdown for {fees.subtotal_cents} does not match order total {total_cents}"
            )

        order = OrderModel(
            user_id=buyer_id,
            seller_id=group.seller_id,
            cart_id=cart_id,
            status=status,
            total_cents=total_cents,
            platform_fee_cents=fees.platform_fee_cents,
            currency=currency.upper(),
            meta={
                "orderType": ORDER_TYPE,
                "cartId": cart_id,
                "sellerId": group.seller_id,
            },
            items=[
                OrderItemModel(
                    product_id=line.product_id,
                    title=line.title,
                    unit_price_cents=line.unit_price_cents,
                    quantity=line.quantity,
                    subtotal_cents=line.subtotal_cents,
                )
                for line in group.items
            ],
        )
        return order


def build_payment_metadata(order: OrderModel, buyer_id: str) -> PaymentMetadata:
    return PaymentMetadata(
        order_id=order.id,
        buyer_id=buyer_id,
        seller_id=order.seller_id,
        cart_id=order.cart_id,
        order_type=ORDER_TYPE,
    )

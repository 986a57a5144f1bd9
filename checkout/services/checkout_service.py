# checkout/services/checkout_service.py
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from checkout.data.database import SessionLocal
from checkout.data.models import OrderStatus
from checkout.data.unit_of_work import UnitOfWork
from checkout.domain.checkout import AggregatedCart, CheckoutReport, LegOutcome, SellerGroup
from checkout.domain.errors import (
    GatewayError,
    GatewayTimeoutError,
    InvalidStateTransitionError,
    MissingPaymentMethodError,
)
from checkout.repos.cart_repo import CartRepo
from checkout.repos.user_repo import UserRepo
from checkout.services.cart_aggregator import CartAggregator
from checkout.services.catalog_client import CatalogClient
from checkout.services.fees import FeeCalculator
from checkout.services.notification_service import NotificationService
from checkout.services.order_ledger import OrderLedger, build_payment_metadata
from checkout.services.payment_gateway import GatewayStatus, PaymentGateway
from checkout.services.result_reporter import ResultReporter
from checkout.utils.settings import CHECKOUT_CURRENCY, CHECKOUT_MAX_WORKERS, PLATFORM_FEE_PERCENT
from checkout.utils.logging import get_logger

logger = get_logger(__name__)

TIMEOUT_MESSAGE = (
    "Payment gateway timed out. The charge may still complete; "
    "check your orders before retrying."
)


class CheckoutService:
    """
    Use Case: checkout koszyka z produktami wielu sprzedawców.

    1. Walidacja koszyka i podział na grupy po sprzedawcy (bez efektów ubocznych)
    2. Dla każdej grupy niezależnie: prowizja -> zamówienie pending (commit)
       -> obciążenie w bramce -> aktualizacja zamówienia
    3. Raport sukcesów / porażek
    4. Koszyk usuwany tylko gdy wszystkie nogi się udały

    Noga sprzedawcy B nie cofa sukcesów A i C - nie ma 2PC, każda noga
    to osobna transakcja w bazie i osobne wywołanie bramki.
    """

    def __init__(
        self,
        gateway: PaymentGateway,
        catalog: CatalogClient,
        session_factory: Callable[[], Session] = SessionLocal,
        notification_service: NotificationService | None = None,
        fee_calculator: FeeCalculator | None = None,
        currency: str | None = None,
        max_workers: int | None = None,
    ):
        self.gateway = gateway
        self.catalog = catalog
        self.session_factory = session_factory
        self.notification_service = notification_service or NotificationService()
        self.fee_calculator = fee_calculator or FeeCalculator(PLATFORM_FEE_PERCENT)
        self.currency = currency or CHECKOUT_CURRENCY
        self.max_workers = max_workers or CHECKOUT_MAX_WORKERS
        self.reporter = ResultReporter()

    def checkout(self, buyer_id: str, payment_method_ref: str, cart_id: str) -> CheckoutReport:
        # wszystkie warunki wstępne przed pierwszym zapisem; sesja zamknięta zanim pójdzie HTTP do katalogu
        with UnitOfWork(self.session_factory) as uow:
            buyer = UserRepo(uow.session).get_user(buyer_id)
            if not buyer or not buyer.payment_customer_ref:
                raise MissingPaymentMethodError()
            customer_ref = buyer.payment_customer_ref

            aggregator = CartAggregator(CartRepo(uow.session), self.catalog)
            snapshot = aggregator.read_cart(buyer_id, cart_id)

        cart = aggregator.group(snapshot)

        logger.info(
            f"Checkout started: buyer {buyer_id}, cart {cart_id}, {len(cart.groups)} sellers"
        )

        outcomes = self._run_legs(cart, customer_ref, payment_method_ref)
        report = self.reporter.build(outcomes)

        #koszyk tylko raz, po wszystkich nogach
        if report.all_succeeded:
            self._clear_cart(cart)
        else:
            logger.warning(
                f"Cart {cart_id} kept: {len(report.failed_payments)} of "
                f"{report.total_processed} seller payments failed"
            )

        paid_order_ids = [
            p.order_id for p in report.successful_payments if p.status == GatewayStatus.SUCCEEDED
        ]
        self.notification_service.send_checkout_notification(buyer_id, paid_order_ids)

        return report

    def _run_legs(
        self,
        cart: AggregatedCart,
        customer_ref: str,
        payment_method_ref: str,
    ) -> list[LegOutcome]:
        def run(group: SellerGroup) -> LegOutcome:
            return self._process_leg(cart, group, customer_ref, payment_method_ref)

        if self.max_workers <= 1 or len(cart.groups) <= 1:
            return [run(group) for group in cart.groups]

        #nogi nie dzielą stanu; każda ma własną sesję. map() zachowuje kolejność grup
        workers = min(self.max_workers, len(cart.groups))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="checkout-leg") as pool:
            return list(pool.map(run, cart.groups))

    def _process_leg(
        self,
        cart: AggregatedCart,
        group: SellerGroup,
        customer_ref: str,
        payment_method_ref: str,
    ) -> LegOutcome:
        fees = self.fee_calculator.calculate(group.subtotal_cents)

        if fees.subtotal_cents == 0:
            return self._process_free_leg(cart, group, fees)

        try:
            with UnitOfWork(self.session_factory) as uow:
                order = OrderLedger(uow).create_pending_order(
                    cart.buyer_id, cart.cart_id, group, fees, self.currency
                )
                order_id = order.id
                metadata = build_payment_metadata(order, cart.buyer_id)
        except SQLAlchemyError as e:
            logger.error(f"Could not record order for seller {group.seller_id}, leg skipped: {e}")
            return self._failed(group, "Could not create order, payment was not attempted")

        try:
            result = self.gateway.charge_seller_leg(
                customer_ref=customer_ref,
                payment_method_ref=payment_method_ref,
                payout_account_ref=group.payout_account_id,
                amount_cents=fees.subtotal_cents,
                currency=self.currency,
                platform_fee_cents=fees.platform_fee_cents,
                metadata=metadata,
            )
        except GatewayTimeoutError as e:
            # niejednoznaczne - zamówienie zostaje pending, rozstrzyga to rekoncyliacja poza checkoutem
            logger.warning(f"Payment timed out for seller {group.seller_id}, order {order_id} left pending: {e}")
            self._record_outcome(order_id, None, OrderStatus.PENDING, failure_reason=str(e))
            return self._failed(group, TIMEOUT_MESSAGE)
        except GatewayError as e:
            logger.warning(f"Payment failed for seller {group.seller_id}, order {order_id}: {e}")
            self._record_outcome(order_id, None, OrderStatus.FAILED, failure_reason=str(e))
            return self._failed(group, str(e))
        except Exception as e:
            logger.error(f"Unexpected gateway error for seller {group.seller_id}, order {order_id}: {e}")
            message = str(e) or "Unknown error"
            self._record_outcome(order_id, None, OrderStatus.FAILED, failure_reason=message)
            return self._failed(group, message)

        if result.status == GatewayStatus.FAILED:
            reason = result.decline_reason or "Payment declined"
            logger.warning(f"Payment declined for seller {group.seller_id}, order {order_id}: {reason}")
            self._record_outcome(
                order_id, result.external_transaction_id, OrderStatus.FAILED, failure_reason=reason
            )
            return self._failed(group, reason)

        settled = result.status == GatewayStatus.SUCCEEDED
        recorded = self._record_outcome(
            order_id,
            result.external_transaction_id,
            OrderStatus.PAID if settled else OrderStatus.PENDING,
            paid_at=datetime.now(timezone.utc) if settled else None,
        )
        if not recorded:
            logger.critical(
                f"MANUAL RECONCILIATION REQUIRED: gateway reported {result.status} "
                f"(transaction {result.external_transaction_id}) for order {order_id}, "
                f"seller {group.seller_id}, but the order could not be updated"
            )

        logger.info(
            f"Payment {result.status} for seller {group.seller_id}: order {order_id}, "
            f"transaction {result.external_transaction_id}, amount {fees.subtotal_cents}"
        )

        return LegOutcome(
            seller_id=group.seller_id,
            seller_name=group.seller_name,
            succeeded=True,
            order_id=order_id,
            amount_cents=fees.subtotal_cents,
            external_transaction_id=result.external_transaction_id,
            status=result.status,
        )

    def _process_free_leg(self, cart: AggregatedCart, group: SellerGroup, fees) -> LegOutcome:
        try:
            with UnitOfWork(self.session_factory) as uow:
                order = OrderLedger(uow).create_paid_order(
                    cart.buyer_id, cart.cart_id, group, fees, self.currency
                )
                order_id = order.id
        except SQLAlchemyError as e:
            logger.error(f"Could not record free order for seller {group.seller_id}: {e}")
            return self._failed(group, "Could not create order")

        return LegOutcome(
            seller_id=group.seller_id,
            seller_name=group.seller_name,
            succeeded=True,
            order_id=order_id,
            amount_cents=0,
            external_transaction_id=None,
            status=GatewayStatus.SUCCEEDED,
        )

    def _record_outcome(
        self,
        order_id: str,
        external_ref: str | None,
        status: str,
        paid_at: datetime | None = None,
        failure_reason: str | None = None,
    ) -> bool:
        try:
            with UnitOfWork(self.session_factory) as uow:
                OrderLedger(uow).update_order_outcome(
                    order_id,
                    external_ref,
                    status,
                    paid_at=paid_at,
                    failure_reason=failure_reason,
                )
            return True
        except (SQLAlchemyError, InvalidStateTransitionError, ValueError) as e:
            logger.error(f"Could not update order {order_id} to {status}: {e}")
            return False

    def _clear_cart(self, cart: AggregatedCart) -> bool:
        try:
            with UnitOfWork(self.session_factory) as uow:
                rowcount = CartRepo(uow.session).delete_cart(cart.cart_id, cart.version)
                if rowcount == 0:
                    uow.rollback()
                    logger.warning(f"Cart {cart.cart_id} changed during checkout, not cleared")
                    return False
                uow.commit()
        except SQLAlchemyError as e:
            logger.error(f"Could not clear cart {cart.cart_id} after successful checkout: {e}")
            return False

        logger.info(f"Cart {cart.cart_id} cleared")
        return True

    @staticmethod
    def _failed(group: SellerGroup, message: str) -> LegOutcome:
        return LegOutcome(
            seller_id=group.seller_id,
            seller_name=group.seller_name,
            succeeded=False,
            error_message=message,
        )

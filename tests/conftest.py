# tests/conftest.py
import os

# przed importem checkout.* - settings czytają env przy imporcie
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")

import threading

import pytest
import requests
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from checkout.data.database import Base
from checkout.data.models import CartModel, CartItemModel, OrderModel, UserModel
from checkout.domain.errors import GatewayError, GatewayTimeoutError
from checkout.services.checkout_service import CheckoutService
from checkout.services.fees import FeeCalculator
from checkout.services.payment_gateway import GatewayResult, GatewayStatus


# =====================================================
# DB
# =====================================================
@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


class Reader:
    """Świeża sesja do asercji - nie widzi identity map sesji seedującej."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def orders(self, **filters):
        with self.session_factory() as s:
            query = select(OrderModel).filter_by(**filters).order_by(OrderModel.created_at)
            return list(s.execute(query).scalars())

    def order(self, order_id):
        with self.session_factory() as s:
            return s.get(OrderModel, order_id)

    def cart(self, cart_id):
        with self.session_factory() as s:
            return s.get(CartModel, cart_id)

    def cart_items(self, cart_id):
        with self.session_factory() as s:
            return list(
                s.execute(
                    select(CartItemModel).where(CartItemModel.cart_id == cart_id).order_by(CartItemModel.id)
                ).scalars()
            )


@pytest.fixture
def reader(session_factory):
    return Reader(session_factory)


# =====================================================
# SEED
# =====================================================
@pytest.fixture
def make_user(db):
    def _make(user_id="buyer-1", name="Buyer", payment_customer_ref="cus_test_buyer"):
        user = UserModel(id=user_id, name=name, payment_customer_ref=payment_customer_ref)
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_cart(db):
    def _make(user_id, lines, cart_id=None):
        cart = CartModel(user_id=user_id, version=1)
        if cart_id:
            cart.id = cart_id
        cart.items = [CartItemModel(product_id=pid, quantity=qty) for pid, qty in lines]
        db.add(cart)
        db.commit()
        return cart

    return _make


# =====================================================
# FAKES
# =====================================================
def product(product_id, price_cents, seller_id, payout="default", status="published",
            title=None, store_name=None, display_name=None):
    if payout == "default":
        payout = f"acct_{seller_id}"
    return {
        "id": product_id,
        "title": title or f"Workflow {product_id}",
        "status": status,
        "price_cents": price_cents,
        "seller": {
            "id": seller_id,
            "display_name": display_name or f"{seller_id} display",
            "store_name": store_name,
            "payout_account_id": payout,
        },
    }


class FakeCatalog:
    def __init__(self, products=()):
        self.products = {p["id"]: p for p in products}
        self.unavailable = False
        self.calls = []

    def fetch_product(self, product_id):
        self.calls.append(product_id)
        if self.unavailable:
            raise requests.ConnectionError("catalog down")
        return self.products.get(product_id)


class FakeGateway:
    """
    Scenariusz per sprzedawca: succeed | decline | error | timeout | requires_action | boom
    """

    def __init__(self, behaviours=None, on_charge=None):
        self.behaviours = behaviours or {}
        self.on_charge = on_charge
        self.calls = []
        self._lock = threading.Lock()
        self._counter = 0

    def charge_seller_leg(self, *, customer_ref, payment_method_ref, payout_account_ref,
                          amount_cents, currency, platform_fee_cents, metadata):
        with self._lock:
            self._counter += 1
            intent_id = f"pi_test_{self._counter}"
            self.calls.append({
                "customer_ref": customer_ref,
                "payment_method_ref": payment_method_ref,
                "payout_account_ref": payout_account_ref,
                "amount_cents": amount_cents,
                "currency": currency,
                "platform_fee_cents": platform_fee_cents,
                "metadata": metadata,
            })

        if self.on_charge:
            self.on_charge(metadata)

        behaviour = self.behaviours.get(metadata.seller_id, "succeed")
        if behaviour == "decline":
            return GatewayResult(intent_id, GatewayStatus.FAILED, "Your card was declined. (insufficient_funds)")
        if behaviour == "requires_action":
            return GatewayResult(intent_id, GatewayStatus.REQUIRES_ACTION)
        if behaviour == "error":
            raise GatewayError("No such destination: 'acct_broken'")
        if behaviour == "timeout":
            raise GatewayTimeoutError("Read timed out")
        if behaviour == "boom":
            raise RuntimeError("connection pool exploded")
        return GatewayResult(intent_id, GatewayStatus.SUCCEEDED)

    def seller_ids(self):
        return [c["metadata"].seller_id for c in self.calls]


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send_checkout_notification(self, buyer_id, order_ids):
        self.sent.append((buyer_id, list(order_ids)))


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_service(session_factory, catalog, gateway, notifier):
    def _make(**overrides):
        kwargs = dict(
            gateway=gateway,
            catalog=catalog,
            session_factory=session_factory,
            notification_service=notifier,
            fee_calculator=FeeCalculator(15),
            currency="usd",
            max_workers=1,
        )
        kwargs.update(overrides)
        return CheckoutService(**kwargs)

    return _make


@pytest.fixture
def make_product():
    return product


@pytest.fixture
def gateway_factory():
    return FakeGateway

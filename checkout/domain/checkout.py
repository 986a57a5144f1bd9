# checkout/domain/checkout.py
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class CartLine:
    cart_item_id: int
    product_id: int
    quantity: int


@dataclass(frozen=True)
class CartSnapshot:
    """Koszyk odczytany z bazy; grupowanie po sprzedawcy dzieje się już bez sesji."""

    cart_id: str
    buyer_id: str
    version: int
    lines: Tuple[CartLine, ...]


@dataclass(frozen=True)
class LineItem:
    """Pozycja koszyka przeczytana na potrzeby jednej próby checkoutu."""

    cart_item_id: int
    product_id: int
    title: str
    unit_price_cents: int
    quantity: int

    @property
    def subtotal_cents(self) -> int:
        return self.unit_price_cents * self.quantity


@dataclass(frozen=True)
class SellerGroup:
    seller_id: str
    seller_name: str
    payout_account_id: str
    items: Tuple[LineItem, ...]

    @property
    def subtotal_cents(self) -> int:
        return sum(i.subtotal_cents for i in self.items)


@dataclass(frozen=True)
class AggregatedCart:
    cart_id: str
    buyer_id: str
    version: int
    groups: Tuple[SellerGroup, ...]


@dataclass(frozen=True)
class FeeBreakdown:
    subtotal_cents: int
    platform_fee_cents: int
    net_to_seller_cents: int


@dataclass(frozen=True)
class LegOutcome:
    """Wynik jednej nogi (jednego sprzedawcy)."""

    seller_id: str
    seller_name: str
    succeeded: bool
    order_id: Optional[str] = None
    amount_cents: int = 0
    external_transaction_id: Optional[str] = None
    status: Optional[str] = None
    error_message: Optional[str] = None


@dataclass(frozen=True)
class SuccessfulPayment:
    order_id: str
    seller_id: str
    seller_name: str
    amount_cents: int
    external_transaction_id: Optional[str]
    status: str


@dataclass(frozen=True)
class FailedPayment:
    seller_id: str
    seller_name: str
    error_message: str


@dataclass
class CheckoutReport:
    successful_payments: List[SuccessfulPayment] = field(default_factory=list)
    failed_payments: List[FailedPayment] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed_payments

    @property
    def total_processed(self) -> int:
        return len(self.successful_payments) + len(self.failed_payments)

# checkout/domain/schemas.py
from datetime import datetime
from typing import List, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Na zewnątrz camelCase, w kodzie snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# =====================================================
# CHECKOUT
# =====================================================
class CheckoutIn(CamelModel):
    """Schema dla checkoutu wielu sprzedawców."""

    payment_method_ref: str = Field(..., min_length=1, description="Zapisana metoda płatności kupującego (pm_...)")
    cart_id: UUID


class SuccessfulPaymentOut(CamelModel):
    order_id: str
    seller_id: str
    seller_name: str
    amount_cents: int
    payment_intent_id: Optional[str] = None
    status: str


class FailedPaymentOut(CamelModel):
    seller_id: str
    seller_name: str
    error: str


class CheckoutOut(CamelModel):
    success: bool = True
    successful_payments: List[SuccessfulPaymentOut]
    failed_payments: List[FailedPaymentOut]
    all_succeeded: bool
    total_processed: int


class PaymentMetadata(CamelModel):
    """
    Metadata wysyłane do bramki i odbijane z powrotem (webhooki, dashboard).
    Stały schemat - to co zapisujemy i to co czytamy musi się zgadzać.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    order_id: str
    buyer_id: str
    seller_id: str
    cart_id: str
    order_type: Literal["multi_vendor_cart"] = "multi_vendor_cart"

    def as_gateway_metadata(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_gateway_metadata(cls, data: dict) -> "PaymentMetadata":
        return cls.model_validate(data)


# =====================================================
# CATALOG (odpowiedź catalog-service)
# =====================================================
class CatalogSeller(BaseModel):
    id: Union[int, str]
    display_name: Optional[str] = None
    store_name: Optional[str] = None
    payout_account_id: Optional[str] = None

    @property
    def name(self) -> str:
        return self.store_name or self.display_name or str(self.id)


class CatalogProduct(BaseModel):
    id: int
    title: str
    status: str
    price_cents: int = Field(..., ge=0)
    seller: CatalogSeller


# =====================================================
# ORDERS
# =====================================================
class OrderItemOut(CamelModel):
    product_id: int
    title: str
    unit_price_cents: int
    quantity: int
    subtotal_cents: int


class OrderOut(CamelModel):
    """Schema dla zamówienia (response)."""

    id: str
    user_id: str
    seller_id: str
    cart_id: str
    status: str
    total_cents: int
    platform_fee_cents: int
    currency: str
    provider_intent: Optional[str] = None
    failure_reason: Optional[str] = None
    created_at: datetime
    paid_at: Optional[datetime] = None
    items: List[OrderItemOut]


class OrderListOut(CamelModel):
    orders: List[OrderOut]
    page: int
    limit: int
    total: int


class RelatedOrdersOut(CamelModel):
    orders: List[OrderOut]

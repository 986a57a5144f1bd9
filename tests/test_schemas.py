import pytest
from pydantic import ValidationError

from checkout.domain.schemas import CatalogProduct, CheckoutIn, PaymentMetadata


def test_metadata_echo_reads_back_the_same_fields():
    original = PaymentMetadata(order_id="o-1", buyer_id="b-1", seller_id="s-1", cart_id="c-1")

    echoed = PaymentMetadata.from_gateway_metadata(original.as_gateway_metadata())

    assert echoed == original
    assert echoed.order_type == "multi_vendor_cart"


def test_metadata_rejects_foreign_order_type():
    with pytest.raises(ValidationError):
        PaymentMetadata.from_gateway_metadata({
            "orderId": "o-1", "buyerId": "b-1", "sellerId": "s-1", "cartId": "c-1",
            "orderType": "subscription",
        })


def test_metadata_is_immutable():
    metadata = PaymentMetadata(order_id="o-1", buyer_id="b-1", seller_id="s-1", cart_id="c-1")

    with pytest.raises(ValidationError):
        metadata.seller_id = "s-2"


def test_checkout_payload_accepts_camel_case():
    payload = CheckoutIn.model_validate({
        "paymentMethodRef": "pm_1",
        "cartId": "4b0c8a56-61c0-4d8f-9d0e-2f1f7a7e3b11",
    })

    assert payload.payment_method_ref == "pm_1"
    assert str(payload.cart_id) == "4b0c8a56-61c0-4d8f-9d0e-2f1f7a7e3b11"


@pytest.mark.parametrize("body", [
    {"paymentMethodRef": "", "cartId": "4b0c8a56-61c0-4d8f-9d0e-2f1f7a7e3b11"},
    {"paymentMethodRef": "pm_1", "cartId": "not-a-uuid"},
    {"cartId": "4b0c8a56-61c0-4d8f-9d0e-2f1f7a7e3b11"},
])
def test_checkout_payload_validation(body):
    with pytest.raises(ValidationError):
        CheckoutIn.model_validate(body)


def test_seller_name_fallbacks():
    base = {"id": 1, "title": "OCR", "status": "published", "price_cents": 100}

    named = CatalogProduct.model_validate({**base, "seller": {"id": 7, "store_name": "Shop", "display_name": "Ann"}})
    display = CatalogProduct.model_validate({**base, "seller": {"id": 7, "display_name": "Ann"}})
    bare = CatalogProduct.model_validate({**base, "seller": {"id": 7}})

    assert named.seller.name == "Shop"
    assert display.seller.name == "Ann"
    assert bare.seller.name == "7"

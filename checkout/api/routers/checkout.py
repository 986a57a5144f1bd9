# checkout/api/routers/checkout.py
from fastapi import APIRouter, Depends, HTTPException

from checkout.api.deps import get_current_user_id
from checkout.domain.checkout import CheckoutReport
from checkout.domain.errors import CatalogUnavailableError
from checkout.domain.schemas import CheckoutIn, CheckoutOut
from checkout.services.catalog_client import CatalogClient
from checkout.services.checkout_service import CheckoutService
from checkout.services.payment_gateway import StripeGateway
from checkout.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/checkout", tags=["checkout"])


def get_checkout_service() -> CheckoutService:
    return CheckoutService(
        gateway=StripeGateway(),
        catalog=CatalogClient(),
    )


@router.post("/multi-vendor", response_model=CheckoutOut)
def multi_vendor_checkout(
    payload: CheckoutIn,
    user_id: str = Depends(get_current_user_id),
    svc: CheckoutService = Depends(get_checkout_service),
):
    """
    Checkout koszyka z produktami wielu sprzedawców - jedna płatność na sprzedawcę.
    Częściowy sukces to nadal 200; szczegóły w successfulPayments / failedPayments.
    """
    try:
        report = svc.checkout(
            buyer_id=user_id,
            payment_method_ref=payload.payment_method_ref,
            cart_id=str(payload.cart_id),
        )
    except CatalogUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _report_to_response(report)


def _report_to_response(report: CheckoutReport) -> dict:
    return {
        "success": True,
        "successful_payments": [
            {
                "order_id": p.order_id,
                "seller_id": p.seller_id,
                "seller_name": p.seller_name,
                "amount_cents": p.amount_cents,
                "payment_intent_id": p.external_transaction_id,
                "status": p.status,
            }
            for p in report.successful_payments
        ],
        "failed_payments": [
            {
                "seller_id": p.seller_id,
                "seller_name": p.seller_name,
                "error": p.error_message,
            }
            for p in report.failed_payments
        ],
        "all_succeeded": report.all_succeeded,
        "total_processed": report.total_processed,
    }

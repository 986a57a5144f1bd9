# checkout/services/payment_gateway.py
from dataclasses import dataclass
from typing import Optional, Protocol

import requests

from checkout.domain.errors import GatewayError, GatewayTimeoutError, GatewayValidationError
from checkout.domain.schemas import PaymentMetadata
from checkout.utils.settings import STRIPE_API_BASE, STRIPE_SECRET_KEY, GATEWAY_TIMEOUT_SECONDS
from checkout.utils.logging import get_logger

logger = get_logger(__name__)


class GatewayStatus:
    SUCCEEDED = "succeeded"
    REQUIRES_ACTION = "requires_action"
    FAILED = "failed"


@dataclass(frozen=True)
class GatewayResult:
    external_transaction_id: Optional[str]
    status: str
    decline_reason: Optional[str] = None


class PaymentGateway(Protocol):
    def charge_seller_leg(
        self,
        *,
        customer_ref: str,
        payment_method_ref: str,
        payout_account_ref: str,
        amount_cents: int,
        currency: str,
        platform_fee_cents: int,
        metadata: PaymentMetadata,
    ) -> GatewayResult: ...


# statusy PaymentIntent -> nasze trzy
_INTENT_STATUS = {
    "succeeded": GatewayStatus.SUCCEEDED,
    "requires_action": GatewayStatus.REQUIRES_ACTION,
    "requires_confirmation": GatewayStatus.REQUIRES_ACTION,
    "processing": GatewayStatus.REQUIRES_ACTION,
    "requires_capture": GatewayStatus.REQUIRES_ACTION,
    "requires_payment_method": GatewayStatus.FAILED,
    "canceled": GatewayStatus.FAILED,
}


class StripeGateway:
    """
    Jedno wywołanie = autoryzacja + capture + podział środków (Stripe Connect
    destination charge): kupujący płaci amount, platforma zatrzymuje
    application_fee_amount, reszta idzie na konto sprzedawcy.

    Bez retry i bez idempotency key - ponowienie tej samej nogi obciąży klienta
    drugi raz. Timeout jest twardy; po timeoucie nie wiemy czy pieniądze poszły.
    """

    def __init__(
        self,
        secret_key: str | None = None,
        api_base: str | None = None,
        timeout: float | None = None,
    ):
        self.secret_key = secret_key or STRIPE_SECRET_KEY
        self.api_base = (api_base or STRIPE_API_BASE).rstrip("/")
        self.timeout = timeout or GATEWAY_TIMEOUT_SECONDS

    def charge_seller_leg(
        self,
        *,
        customer_ref: str,
        payment_method_ref: str,
        payout_account_ref: str,
        amount_cents: int,
        currency: str,
        platform_fee_cents: int,
        metadata: PaymentMetadata,
    ) -> GatewayResult:
        url = f"{self.api_base}/v1/payment_intents"
        params = {
            "amount": amount_cents,
            "currency": currency.lower(),
            "customer": customer_ref,
            "payment_method": payment_method_ref,
            "confirm": "true",
            "off_session": "true",
            "application_fee_amount": platform_fee_cents,
            "transfer_data[destination]": payout_account_ref,
        }
        for key, value in metadata.as_gateway_metadata().items():
            params[f"metadata[{key}]"] = value

        logger.info(
            f"StripeGateway POST {url} order {metadata.order_id} "
            f"amount {amount_cents} fee {platform_fee_cents} -> {payout_account_ref}"
        )

        try:
            resp = requests.post(url, data=params, auth=(self.secret_key, ""), timeout=self.timeout)
        except (requests.Timeout, requests.ConnectionError) as e:
            raise GatewayTimeoutError(f"Payment gateway did not respond: {e}") from e
        except requests.RequestException as e:
            raise GatewayError(f"Payment gateway request failed: {e}") from e

        if resp.ok:
            return self._intent_result(resp.json())

        return self._error_result(resp)

    def _intent_result(self, intent: dict) -> GatewayResult:
        raw_status = intent.get("status")
        status = _INTENT_STATUS.get(raw_status, GatewayStatus.FAILED)

        decline_reason = None
        if status == GatewayStatus.FAILED:
            last_error = intent.get("last_payment_error") or {}
            decline_reason = last_error.get("message") or f"Payment {raw_status}"

        return GatewayResult(
            external_transaction_id=intent.get("id"),
            status=status,
            decline_reason=decline_reason,
        )

    def _error_result(self, resp: requests.Response) -> GatewayResult:
        try:
            error = resp.json().get("error") or {}
        except ValueError:
            error = {}

        message = error.get("message") or f"Payment gateway returned HTTP {resp.status_code}"
        error_type = error.get("type")

        # odmowa karty to normalny wynik nogi, nie wyjątek
        if error_type == "card_error" or resp.status_code == 402:
            intent = error.get("payment_intent") or {}
            reason = message
            if error.get("decline_code"):
                reason = f"{message} ({error['decline_code']})"
            return GatewayResult(
                external_transaction_id=intent.get("id"),
                status=GatewayStatus.FAILED,
                decline_reason=reason,
            )

        if error_type == "invalid_request_error" or resp.status_code == 400:
            raise GatewayValidationError(message)

        raise GatewayError(message)

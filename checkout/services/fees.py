# checkout/services/fees.py
from decimal import Decimal, ROUND_HALF_UP

from checkout.domain.checkout import FeeBreakdown

_HUNDRED = Decimal(100)
_WHOLE_CENT = Decimal(1)


class FeeCalculator:
    """
    Prowizja platformy liczona osobno dla każdego zamówienia.

    Cały czas int w centach; Decimal tylko do zaokrąglenia half-up,
    żeby wynik był identyczny przy każdym wywołaniu (audyt, rekoncyliacja).
    """

    def __init__(self, rate_percent):
        rate = Decimal(str(rate_percent))
        if rate < 0 or rate > _HUNDRED:
            raise ValueError(f"Platform fee rate must be between 0 and 100, got {rate_percent}")
        self.rate_percent = rate

    def calculate(self, subtotal_cents: int) -> FeeBreakdown:
        if isinstance(subtotal_cents, bool) or not isinstance(subtotal_cents, int):
            raise ValueError("Subtotal must be an integer amount of cents")
        if subtotal_cents < 0:
            raise ValueError("Subtotal cannot be negative")

        fee = (Decimal(subtotal_cents) * self.rate_percent / _HUNDRED).quantize(
            _WHOLE_CENT, rounding=ROUND_HALF_UP
        )
        platform_fee_cents = int(fee)

        return FeeBreakdown(
            subtotal_cents=subtotal_cents,
            platform_fee_cents=platform_fee_cents,
            net_to_seller_cents=subtotal_cents - platform_fee_cents,
        )

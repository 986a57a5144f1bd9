# checkout/domain/errors.py
"""
Wyjątki domeny checkoutu.

Dziedziczą po ValueError / RuntimeError, bo routery mapują
właśnie te typy na 400 / 503 (tak jak w pozostałych endpointach).
"""


class EmptyCartError(ValueError):
    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)


class ItemNotPurchasableError(ValueError):
    def __init__(self, product_id: int, title: str | None = None):
        self.product_id = product_id
        name = f'"{title}"' if title else f"Product {product_id}"
        super().__init__(f"{name} is not available for purchase")


class SellerNotPayoutReadyError(ValueError):
    def __init__(self, product_id: int, title: str | None = None):
        self.product_id = product_id
        name = f'"{title}"' if title else f"product {product_id}"
        super().__init__(f"Seller payment setup incomplete for {name}. Please contact the seller.")


class MissingPaymentMethodError(ValueError):
    def __init__(self, message: str = "No stored payment method for this buyer"):
        super().__init__(message)


class CatalogUnavailableError(RuntimeError):
    pass


class InvalidStateTransitionError(RuntimeError):
    def __init__(self, order_id: str, current: str, requested: str):
        self.order_id = order_id
        self.current = current
        self.requested = requested
        super().__init__(f"Order {order_id}: illegal transition {current} -> {requested}")


class GatewayError(Exception):
    """Błąd pojedynczej nogi płatności - nigdy nie przerywa pozostałych sprzedawców."""


class GatewayValidationError(GatewayError):
    pass


class GatewayTimeoutError(GatewayError):
    """Nie wiadomo czy obciążenie doszło do skutku."""

# checkout/services/catalog_client.py
import requests

from checkout.utils.retry import http_retry
from checkout.utils.settings import CATALOG_SERVICE_URL, CATALOG_TIMEOUT_SECONDS
from checkout.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogClient:
    """
    Klient catalog-service - właściciel produktów, cen i danych wypłat sprzedawców.
    Tylko odczyt, więc retry jest bezpieczny.
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or CATALOG_SERVICE_URL).rstrip("/")
        self.timeout = timeout or CATALOG_TIMEOUT_SECONDS

    @http_retry()
    def fetch_product(self, product_id: int) -> dict | None:
        url = f"{self.base_url}/products/{product_id}"
        logger.info(f"CatalogClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        #404 to odpowiedź, nie awaria - bez retry
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json()

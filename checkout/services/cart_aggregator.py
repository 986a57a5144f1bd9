# checkout/services/cart_aggregator.py
from pydantic import ValidationError
from requests import RequestException

from checkout.domain.checkout import AggregatedCart, CartLine, CartSnapshot, LineItem, SellerGroup
from checkout.domain.errors import (
    CatalogUnavailableError,
    EmptyCartError,
    ItemNotPurchasableError,
    SellerNotPayoutReadyError,
)
from checkout.domain.schemas import CatalogProduct
from checkout.repos.cart_repo import CartRepo
from checkout.services.catalog_client import CatalogClient
from checkout.utils.logging import get_logger

logger = get_logger(__name__)

PURCHASABLE_STATUS = "published"


class CartAggregator:
    """
    Czyta koszyk kupującego i dzieli go na grupy po sprzedawcy.

    Cała walidacja (produkt opublikowany, sprzedawca ma konto wypłat) dzieje się
    tutaj, zanim powstanie jakiekolwiek zamówienie czy wywołanie bramki.
    Odczyt z bazy (read_cart) i zapytania do katalogu (group) są rozdzielone,
    żeby sesja nie wisiała na HTTP.
    """

    def __init__(self, repo: CartRepo, catalog: CatalogClient):
        self.repo = repo
        self.catalog = catalog

    def aggregate(self, buyer_id: str, cart_id: str) -> AggregatedCart:
        return self.group(self.read_cart(buyer_id, cart_id))

    def read_cart(self, buyer_id: str, cart_id: str) -> CartSnapshot:
        cart = self.repo.get_cart(cart_id)

        # cudzy koszyk wygląda jak pusty - nie zdradzamy, że istnieje
        if not cart or cart.user_id != buyer_id:
            raise EmptyCartError()

        items = self.repo.get_cart_items(cart_id)
        if not items:
            raise EmptyCartError()

        return CartSnapshot(
            cart_id=cart.id,
            buyer_id=buyer_id,
            version=cart.version,
            lines=tuple(
                CartLine(cart_item_id=i.id, product_id=i.product_id, quantity=i.quantity)
                for i in items
            ),
        )

    def group(self, snapshot: CartSnapshot) -> AggregatedCart:
        products: dict[int, CatalogProduct] = {}
        groups: dict[str, SellerGroup] = {}

        for item in snapshot.lines:
            product = products.get(item.product_id)
            if product is None:
                product = self._load_product(item.product_id)
                products[item.product_id] = product

            if product.status != PURCHASABLE_STATUS:
                raise ItemNotPurchasableError(product.id, product.title)

            if not product.seller.payout_account_id:
                raise SellerNotPayoutReadyError(product.id, product.title)

            line = LineItem(
                cart_item_id=item.cart_item_id,
                product_id=product.id,
                title=product.title,
                unit_price_cents=product.price_cents,
                quantity=item.quantity,
            )

            #pierwsza napotkana grupa danego sprzedawcy wyznacza kolejność
            seller_id = str(product.seller.id)
            group = groups.get(seller_id)
            if group is None:
                groups[seller_id] = SellerGroup(
                    seller_id=seller_id,
                    seller_name=product.seller.name,
                    payout_account_id=product.seller.payout_account_id,
                    items=(line,),
                )
            else:
                groups[seller_id] = SellerGroup(
                    seller_id=group.seller_id,
                    seller_name=group.seller_name,
                    payout_account_id=group.payout_account_id,
                    items=group.items + (line,),
                )

        logger.info(
            f"Cart {snapshot.cart_id}: {len(snapshot.lines)} items grouped into {len(groups)} seller groups"
        )

        return AggregatedCart(
            cart_id=snapshot.cart_id,
            buyer_id=snapshot.buyer_id,
            version=snapshot.version,
            groups=tuple(groups.values()),
        )

    def _load_product(self, product_id: int) -> CatalogProduct:
        try:
            data = self.catalog.fetch_product(product_id)
        except RequestException as e:
            logger.error(f"Catalog lookup failed for product {product_id}: {e}")
            raise CatalogUnavailableError("Catalog service unavailable, try again later") from e

        if data is None:
            raise ItemNotPurchasableError(product_id)

        try:
            return CatalogProduct.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Catalog returned invalid product {product_id}: {e}")
            raise ItemNotPurchasableError(product_id) from e

# checkout/repos/cart_repo.py
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from checkout.data.models import CartModel, CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart(self, cart_id: str) -> CartModel | None:
        return self.db.get(CartModel, cart_id)

    def get_cart_items(self, cart_id: str) -> list[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.id)
            ).scalars()
        )

    def delete_cart(self, cart_id: str, expected_version: int) -> int:
        """
        Usuwa pozycje i koszyk w jednej transakcji (commit robi wołający).
        Warunek na wersję - jeśli ktoś zmodyfikował koszyk w trakcie checkoutu,
        rowcount == 0 i wołający robi rollback.
        """
        self.db.execute(delete(CartItemModel).where(CartItemModel.cart_id == cart_id))
        result = self.db.execute(
            delete(CartModel).where(
                CartModel.id == cart_id,
                CartModel.version == expected_version,
            )
        )
        return result.rowcount

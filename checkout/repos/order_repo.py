# checkout/repos/order_repo.py
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from checkout.data.models import OrderModel


class OrderRepo:
    """Tylko odczyt/zapis w sesji - commit należy do unit of work."""

    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: str) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_orders_for_user(
        self,
        user_id: str,
        status: str | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[OrderModel], int]:
        query = select(OrderModel).where(OrderModel.user_id == user_id)
        if status:
            query = query.where(OrderModel.status == status)

        total = self.db.execute(
            select(func.count()).select_from(query.subquery())
        ).scalar_one()

        orders = self.db.execute(
            query.order_by(OrderModel.created_at.desc()).offset(offset).limit(limit)
        ).scalars().all()

        return list(orders), total

    def list_checkout_orders(self, user_id: str, cart_id: str, status: str) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .where(
                    OrderModel.user_id == user_id,
                    OrderModel.cart_id == cart_id,
                    OrderModel.status == status,
                )
                .order_by(OrderModel.created_at.asc())
            ).scalars()
        )

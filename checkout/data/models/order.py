import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, JSON
from sqlalchemy.orm import relationship

from checkout.data.database import Base


class OrderStatus:
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"

    ALL = (PENDING, PAID, FAILED)
    TERMINAL = (PAID, FAILED)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    seller_id = Column(String, nullable=False, index=True)
    #bez FK - koszyk znika po udanym checkoucie, zamówienie zostaje
    cart_id = Column(String(36), nullable=False, index=True)

    status = Column(String, nullable=False, default=OrderStatus.PENDING)  # pending, paid, failed
    total_cents = Column(Integer, nullable=False)
    platform_fee_cents = Column(Integer, nullable=False, default=0)
    currency = Column(String(3), nullable=False)

    provider = Column(String, nullable=False, default="stripe")
    provider_intent = Column(String, nullable=True, index=True)
    failure_reason = Column(String, nullable=True)

    # "metadata" jest zarezerwowane przez declarative Base
    meta = Column("metadata", JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    paid_at = Column(DateTime(timezone=True), nullable=True)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
        lazy="selectin",
    )

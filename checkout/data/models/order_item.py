from sqlalchemy import Column, Integer, ForeignKey, String
from sqlalchemy.orm import relationship

from checkout.data.database import Base


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, nullable=False)
    title = Column(String, nullable=False)

    #snapshot ceny z chwili zakupu, nie referencja do katalogu
    unit_price_cents = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False)
    subtotal_cents = Column(Integer, nullable=False)

    order = relationship("OrderModel", back_populates="items")

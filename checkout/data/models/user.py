import uuid

from sqlalchemy import Column, String

from checkout.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)

    #id klienta w bramce płatności (np. cus_...), bez tego nie ma zapisanej metody płatności
    payment_customer_ref = Column(String, nullable=True)

# storefront/models/order.py

from sqlalchemy import Column, Float, String, JSON
from storefront.utils.database import Base

class Order(Base):
    __tablename__ = "orders"

    id       = Column(String, primary_key=True, index=True)  # генерируется при оформлении

    customer = Column(JSON, nullable=False)                  # данные покупателя
    items    = Column(JSON, nullable=False)                  # позиции [{product, quantity}]
    total    = Column(Float, nullable=False)                 # сумма
    date     = Column(String, nullable=False, index=True)    # ISO-8601
    status   = Column(String, nullable=False, default="pending")  # pending | completed

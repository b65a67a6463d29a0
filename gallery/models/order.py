# gallery/models/order.py
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.sql import func

from gallery.core.database import Base

ORDER_CONFIRMED = "CONFIRMED"
ORDER_SHIPPED = "SHIPPED"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(30), unique=True, index=True, nullable=False)

    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    status = Column(String(20), default=ORDER_CONFIRMED, nullable=False, index=True)
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="usd")
    shipping_address = Column(Text, nullable=True)

    # Payment processor reference
    stripe_session_id = Column(String(255), unique=True, nullable=True)

    # Fulfilment
    tracking_number = Column(String(100), nullable=True)
    carrier = Column(String(50), nullable=True)
    estimated_delivery = Column(String(100), nullable=True)
    shipped_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self):
        return f"<Order(order_number='{self.order_number}', status='{self.status}')>"


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(
        Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )

    type = Column(String(20), nullable=False, default="PRINT")
    title = Column(String(255), nullable=False)
    size = Column(String(50), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    price = Column(Numeric(10, 2), nullable=False)
    product_details = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<OrderItem(order_id={self.order_id}, title='{self.title}')>"

from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
import enum
from sebeta_mart.database import Base


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PAYMENT_CONFIRMED = "payment_confirmed"
    ASSIGNED_FOR_DELIVERY = "assigned_for_delivery"
    DELIVERED = "delivered"
    BUYER_CONFIRMED = "buyer_confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PAYMENT_CONFIRMED = "payment_confirmed"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    TELEBIRR = "telebirr"


# Orders that count towards a seller's revenue
FULFILLED_STATUSES = (OrderStatus.DELIVERED, OrderStatus.BUYER_CONFIRMED, OrderStatus.COMPLETED)


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)
    seller_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    quantity = Column(Integer, nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(SQLEnum(PaymentMethod, name="payment_method"), default=PaymentMethod.CASH, nullable=False)
    telebirr_txn_number = Column(String(100), nullable=True)
    payment_status = Column(SQLEnum(PaymentStatus, name="payment_status"), default=PaymentStatus.UNPAID, nullable=False)
    status = Column(SQLEnum(OrderStatus, name="order_status"), default=OrderStatus.PENDING, nullable=False, index=True)
    # Set once, by the assignment workflow
    delivery_person_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    buyer = relationship("User", foreign_keys=[user_id])
    seller = relationship("User", foreign_keys=[seller_id])
    delivery_person = relationship("User", foreign_keys=[delivery_person_id])
    product = relationship("Product")

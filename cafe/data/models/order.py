from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from cafe.data.database import Base
from cafe.data.ids import new_object_id

ORDER_STATUSES = ("pending", "confirmed", "preparing", "ready", "delivered", "cancelled")
PAYMENT_STATUSES = ("pending", "paid", "failed")


def _now():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String(24), primary_key=True, default=new_object_id)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    guest_id = Column(String, nullable=True, index=True)

    is_guest_order = Column(Boolean, nullable=False, default=False)
    guest_first_name = Column(String, nullable=True)
    guest_last_name = Column(String, nullable=True)
    guest_email = Column(String, nullable=True)
    guest_phone = Column(String, nullable=True)

    status = Column(String, nullable=False, default="pending")
    order_type = Column(String, nullable=False)  # delivery, pickup

    delivery_street = Column(String, nullable=True)
    delivery_city = Column(String, nullable=True)
    delivery_state = Column(String, nullable=True)
    delivery_zip_code = Column(String, nullable=True)
    pickup_time = Column(DateTime(timezone=True), nullable=True)

    payment_method = Column(String, nullable=False)  # cash, card, receipt_upload
    payment_status = Column(String, nullable=False, default="pending")

    subtotal = Column(Numeric(10, 2), nullable=False)
    tax = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )

#cafe/data/models/cart.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, CheckConstraint
from sqlalchemy.orm import relationship

from cafe.data.database import Base
from cafe.data.ids import new_object_id


def _now():
    return datetime.now(timezone.utc)


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(String(24), primary_key=True, default=new_object_id)

    #owner: registered user or guest session, never both
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, unique=True)
    guest_id = Column(String, nullable=True, unique=True)

    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.position",
    )

    __table_args__ = (
        CheckConstraint(
            "(user_id IS NULL) != (guest_id IS NULL)",
            name="ck_cart_single_owner",
        ),
    )

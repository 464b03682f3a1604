from sqlalchemy import Column, Integer, ForeignKey, Numeric, String, Boolean
from sqlalchemy.orm import relationship

from cafe.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    cart_id = Column(String(24), ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    menu_item_id = Column(String(24), nullable=False)
    name = Column(String, nullable=False)

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    special_instructions = Column(String, nullable=True)
    selected_size = Column(String, nullable=True)
    selected_milk = Column(String, nullable=True)
    add_cold_foam = Column(Boolean, nullable=False, default=False)

    cart = relationship("CartModel", back_populates="items")

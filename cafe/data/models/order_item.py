from sqlalchemy import Column, Integer, ForeignKey, Numeric, String, Boolean
from sqlalchemy.orm import relationship

from cafe.data.database import Base


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(String(24), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    menu_item_id = Column(String(24), nullable=False)
    name = Column(String, nullable=False)

    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    special_instructions = Column(String, nullable=True)
    selected_size = Column(String, nullable=True)
    selected_milk = Column(String, nullable=True)
    add_cold_foam = Column(Boolean, nullable=False, default=False)

    order = relationship("OrderModel", back_populates="items")

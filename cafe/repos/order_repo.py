# cafe/repos/order_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from cafe.data.models.order import OrderModel
from cafe.domain.owner import CartOwner


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def get_order(self, order_id: str) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_orders_for_owner(self, owner: CartOwner) -> list[OrderModel]:
        stmt = select(OrderModel)
        if owner.is_guest:
            stmt = stmt.where(OrderModel.guest_id == owner.guest_id)
        else:
            stmt = stmt.where(OrderModel.user_id == owner.user_id)
        stmt = stmt.order_by(OrderModel.created_at.desc(), OrderModel.id)
        return list(self.db.execute(stmt).scalars().all())

    def save(self, order: OrderModel) -> OrderModel:
        self.db.commit()
        self.db.refresh(order)
        return order

    def list_all_orders(self) -> list[OrderModel]:
        stmt = select(OrderModel).order_by(OrderModel.created_at.desc(), OrderModel.id)
        return list(self.db.execute(stmt).scalars().all())

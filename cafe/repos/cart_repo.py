# cafe/repos/cart_repo.py
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from cafe.data.models.cart import CartModel
from cafe.data.models.cart_item import CartItemModel
from cafe.domain.owner import CartOwner


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_owner(self, owner: CartOwner) -> CartModel | None:
        stmt = select(CartModel)
        if owner.is_guest:
            stmt = stmt.where(CartModel.guest_id == owner.guest_id)
        else:
            stmt = stmt.where(CartModel.user_id == owner.user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def create_cart(self, owner: CartOwner) -> CartModel:
        cart = CartModel(user_id=owner.user_id, guest_id=owner.guest_id, total_amount=0)
        self.db.add(cart)
        self.db.flush()
        return cart

    def find_line(
        self,
        cart: CartModel,
        menu_item_id: str,
        selected_size: str | None,
        selected_milk: str | None,
        add_cold_foam: bool,
    ) -> CartItemModel | None:
        #same item with the same modifiers merges into one line
        for line in cart.items:
            if (
                line.menu_item_id == menu_item_id
                and line.selected_size == selected_size
                and line.selected_milk == selected_milk
                and bool(line.add_cold_foam) == bool(add_cold_foam)
            ):
                return line
        return None

    def next_position(self, cart: CartModel) -> int:
        current = self.db.execute(
            select(func.max(CartItemModel.position)).where(CartItemModel.cart_id == cart.id)
        ).scalar()
        return 0 if current is None else current + 1

    def add_line(self, cart: CartModel, line: CartItemModel) -> CartItemModel:
        cart.items.append(line)
        self.db.flush()
        return line

    def get_line(self, cart: CartModel, item_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart.id,
                CartItemModel.id == item_id,
            )
        ).scalar_one_or_none()

    def delete_line(self, cart: CartModel, line: CartItemModel):
        cart.items.remove(line)
        self.db.flush()

    def clear_items(self, cart: CartModel):
        cart.items.clear()
        cart.total_amount = 0
        self.db.flush()

    def delete_cart(self, cart: CartModel):
        self.db.delete(cart)
        self.db.flush()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def refresh(self, cart: CartModel):
        self.db.refresh(cart)

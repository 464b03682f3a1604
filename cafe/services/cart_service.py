from typing import Dict, Any
from sqlalchemy.orm import Session
from cafe.data.ids import is_object_id
from cafe.data.models.cart import CartModel
from cafe.data.models.cart_item import CartItemModel
from cafe.domain.errors import CartNotFound, CartLineNotFound
from cafe.domain.owner import CartOwner
from cafe.domain.pricing import cart_total, unit_price
from cafe.repos.cart_repo import CartRepo
from cafe.services.menu_client import MenuClient
from cafe.utils.logging import get_logger

logger = get_logger(__name__)


def _check_quantity(quantity):
    #bool is an int subclass, True must not count as one coffee
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValueError("Quantity must be a whole number of at least 1")


class CartService:
    """
    Server cart store: one cart document per owner.
    commands (add, update, remove, clear, delete) modify state
    query (get) read only
    """

    def __init__(self, db: Session, menu_client: MenuClient):
        self.repo = CartRepo(db)
        self.menu_client = menu_client

    def _cart_to_dict(self, cart: CartModel) -> Dict[str, Any]:
        return {
            "cart_id": cart.id,
            "user_id": cart.user_id,
            "guest_id": cart.guest_id,
            "items": [
                {
                    "item_id": i.id,
                    "menu_item_id": i.menu_item_id,
                    "name": i.name,
                    "quantity": i.quantity,
                    "unit_price": i.unit_price,
                    "special_instructions": i.special_instructions,
                    "selected_size": i.selected_size,
                    "selected_milk": i.selected_milk,
                    "add_cold_foam": bool(i.add_cold_foam),
                }
                for i in cart.items
            ],
            "total_amount": cart.total_amount,
        }

    def _require_cart(self, owner: CartOwner) -> CartModel:
        cart = self.repo.get_cart_by_owner(owner)
        if not cart:
            raise CartNotFound(f"No cart for {owner}")
        return cart

    #query
    def get_cart(self, owner: CartOwner) -> Dict[str, Any]:
        cart = self._require_cart(owner)
        self.repo.refresh(cart)
        return self._cart_to_dict(cart)

    #commands
    def add_item(
        self,
        owner: CartOwner,
        menu_item_id: str,
        quantity: int,
        special_instructions: str | None = None,
        selected_size: str | None = None,
        selected_milk: str | None = None,
        add_cold_foam: bool = False,
    ) -> Dict[str, Any]:
        """
        Adds one line to the owner's cart, creating the cart on first use.
        A line with the same menu item and modifiers gets its quantity increased instead.
        """
        _check_quantity(quantity)

        if not is_object_id(menu_item_id):
            raise ValueError(f"Invalid menu item id {menu_item_id!r}")

        #strings such as "false" from a local cart count as no foam
        add_cold_foam = add_cold_foam is True

        logger.info(f"Fetching menu item {menu_item_id} for {owner}")
        menu_item = self.menu_client.fetch_menu_item(menu_item_id)

        if not menu_item.get("available", True):
            raise ValueError(f"{menu_item['name']} is currently unavailable")

        price = unit_price(menu_item, selected_size, selected_milk, add_cold_foam)

        try:
            cart = self.repo.get_cart_by_owner(owner)
            if not cart:
                cart = self.repo.create_cart(owner)
                logger.info(f"Created cart {cart.id} for {owner}")

            existing = self.repo.find_line(
                cart, menu_item_id, selected_size, selected_milk, add_cold_foam
            )

            if existing:
                logger.info(
                    f"Menu item {menu_item_id} already in cart {cart.id}, quantity "
                    f"{existing.quantity} -> {existing.quantity + quantity}"
                )
                existing.quantity += quantity
                existing.unit_price = price
            else:
                logger.info(f"Adding menu item {menu_item_id} to cart {cart.id}")
                self.repo.add_line(
                    cart,
                    CartItemModel(
                        menu_item_id=menu_item_id,
                        name=menu_item["name"],
                        quantity=quantity,
                        unit_price=price,
                        position=self.repo.next_position(cart),
                        special_instructions=special_instructions,
                        selected_size=selected_size,
                        selected_milk=selected_milk,
                        add_cold_foam=add_cold_foam,
                    ),
                )

            cart.total_amount = cart_total(cart.items)
            self.repo.commit()
        except Exception as e:
            logger.error(f"Failed to add menu item {menu_item_id} for {owner}: {e}")
            self.repo.rollback()
            raise

        return self.get_cart(owner)

    def update_item(self, owner: CartOwner, item_id: int, quantity: int) -> Dict[str, Any]:
        _check_quantity(quantity)
        cart = self._require_cart(owner)

        line = self.repo.get_line(cart, item_id)
        if not line:
            raise CartLineNotFound(f"Item {item_id} not found in cart")

        line.quantity = quantity
        cart.total_amount = cart_total(cart.items)
        self.repo.commit()

        logger.info(f"Cart {cart.id} item {item_id} quantity set to {quantity}")
        return self.get_cart(owner)

    def remove_item(self, owner: CartOwner, item_id: int) -> Dict[str, Any]:
        cart = self._require_cart(owner)

        line = self.repo.get_line(cart, item_id)
        if not line:
            raise CartLineNotFound(f"Item {item_id} not found in cart")

        self.repo.delete_line(cart, line)
        cart.total_amount = cart_total(cart.items)
        self.repo.commit()

        logger.info(f"Removed item {item_id} from cart {cart.id}")
        return self.get_cart(owner)

    def clear_cart(self, owner: CartOwner) -> Dict[str, Any]:
        cart = self._require_cart(owner)
        self.repo.clear_items(cart)
        self.repo.commit()

        logger.info(f"Cleared cart {cart.id}")
        return self.get_cart(owner)

    def delete_cart(self, owner: CartOwner) -> None:
        cart = self._require_cart(owner)
        cart_id = cart.id
        try:
            self.repo.delete_cart(cart)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Deleted cart {cart_id} of {owner}")

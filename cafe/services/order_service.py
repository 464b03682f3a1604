# cafe/services/order_service.py
from decimal import Decimal
from requests import RequestException
from sqlalchemy.orm import Session

from cafe.data.models.order import OrderModel, ORDER_STATUSES, PAYMENT_STATUSES
from cafe.data.models.order_item import OrderItemModel
from cafe.domain.errors import MenuItemNotFound, OrderNotFound
from cafe.domain.owner import CartOwner
from cafe.domain.pricing import line_total, tax_for, unit_price
from cafe.domain.schemas import (
    DeliveryAddress,
    GuestInfo,
    OrderDetails,
    OrderItemOut,
    OrderTrackOut,
)
from cafe.repos.cart_repo import CartRepo
from cafe.repos.order_repo import OrderRepo
from cafe.services.menu_client import MenuClient
from cafe.services.notification_service import NotificationService
from cafe.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Orders domain: turning the server cart into an order and order administration.
    The server cart is the only source of items here, never the client.
    """

    def __init__(
        self,
        db: Session,
        menu_client: MenuClient,
        notification_service: NotificationService | None = None,
    ):
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.menu_client = menu_client
        self.notification_service = notification_service or NotificationService()

    def create_order_from_cart(self, owner: CartOwner, details: OrderDetails) -> OrderModel:
        """
        1. Reads the owner's server cart
        2. Re-prices every line against the current menu
        3. Adds tax and persists the order
        4. Empties the cart and notifies the staff (async)
        """
        if owner.is_guest and details.guest_info is None:
            raise ValueError("Guest information is required. Please provide name, email, and phone.")

        cart = self.cart_repo.get_cart_by_owner(owner)

        if not cart:
            raise ValueError("Cart not found. Please add items to your cart and try again.")

        if not cart.items:
            raise ValueError("Cart is empty. Please add items to your cart and try again.")

        order_items = []
        for line in cart.items:
            try:
                menu_item = self.menu_client.fetch_menu_item(line.menu_item_id)
                price = unit_price(
                    menu_item, line.selected_size, line.selected_milk, line.add_cold_foam
                )
            except MenuItemNotFound:
                #removed from the menu after it was added, the cart price still holds
                logger.warning(f"Menu item {line.menu_item_id} gone, keeping cart price")
                price = line.unit_price
            except RequestException as e:
                #the line was priced by the menu service during sync moments ago
                logger.warning(
                    f"Menu service unavailable for {line.menu_item_id}, keeping cart price: {e}"
                )
                price = line.unit_price

            order_items.append(
                OrderItemModel(
                    menu_item_id=line.menu_item_id,
                    name=line.name,
                    quantity=line.quantity,
                    price=price,
                    special_instructions=line.special_instructions,
                    selected_size=line.selected_size,
                    selected_milk=line.selected_milk,
                    add_cold_foam=bool(line.add_cold_foam),
                )
            )

        subtotal = sum((line_total(i.price, i.quantity) for i in order_items), Decimal("0.00"))
        tax = tax_for(subtotal)

        order = OrderModel(
            user_id=owner.user_id,
            guest_id=owner.guest_id,
            is_guest_order=owner.is_guest,
            order_type=details.order_type,
            payment_method=details.payment_method,
            subtotal=subtotal,
            tax=tax,
            total_amount=subtotal + tax,
            items=[OrderItemOut.model_validate(i) for i in order.items],
        )

        if details.order_type == "delivery":
            address = details.delivery_address
            order.delivery_street = address.street
            order.delivery_city = address.city
            order.delivery_state = address.state
            order.delivery_zip_code = address.zip_code
        else:
            order.pickup_time = details.pickup_time

        if details.guest_info is not None:
            order.guest_first_name = details.guest_info.first_name
            order.guest_last_name = details.guest_info.last_name
            order.guest_email = details.guest_info.email
            order.guest_phone = details.guest_info.phone

        #cart is consumed together with the order insert
        self.cart_repo.clear_items(cart)
        created_order = self.repo.create_order(order)

        logger.info(f"Order {created_order.id} created from cart {cart.id} of {owner}")

        self._notify(
            self.notification_service.send_admin_notification,
            {
                "type": "newOrder",
                "orderId": created_order.id,
                "totalAmount": str(created_order.total_amount),
                "orderType": created_order.order_type,
            },
        )

        return created_order

    def _notify(self, send, *args):
        #the order is already committed, a dead broker must not turn it into an error
        try:
            send(*args)
        except Exception as e:
            logger.error(f"Notification dispatch failed ({getattr(send, '__name__', send)}): {e}")

    def _require_order(self, order_id: str) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound("Order not found")
        return order

    def get_order(self, order_id: str, owner: CartOwner) -> OrderModel:
        order = self._require_order(order_id)

        if (order.user_id, order.guest_id) != (owner.user_id, owner.guest_id):
            raise PermissionError("Not authorized to view this order")

        return order

    def list_orders(self, owner: CartOwner) -> list[OrderModel]:
        return self.repo.list_orders_for_owner(owner)

    def list_all_orders(self) -> list[OrderModel]:
        return self.repo.list_all_orders()

    def track_order(self, order_id: str, owner: CartOwner | None = None) -> OrderTrackOut:
        """
        Public status lookup by order id.
        Registered users only see their own orders, anonymous callers only guest orders.
        Guest contact details are included for guest orders only.
        """
        order = self._require_order(order_id)

        if owner is not None and not owner.is_guest:
            if order.user_id != owner.user_id:
                raise PermissionError("Not authorized to view this order")
        elif not order.is_guest_order:
            raise PermissionError("Please log in to view this order")

        address = None
        if order.order_type == "delivery" and order.delivery_street:
            address = DeliveryAddress(
                street=order.delivery_street,
                city=order.delivery_city,
                state=order.delivery_state,
                zip_code=order.delivery_zip_code,
            )

        guest_info = None
        if order.is_guest_order and order.guest_email:
            guest_info = GuestInfo(
                first_name=order.guest_first_name,
                last_name=order.guest_last_name,
                email=order.guest_email,
                phone=order.guest_phone,
            )

        return OrderTrackOut(
            id=order.id,
            status=order.status,
            order_type=order.order_type,
            payment_method=order.payment_method,
            payment_status=order.payment_status,
            items=[OrderItemOut.model_validate(i) for i in order.items],
            tax=order.tax,
            total_amount=order.total_amount,
            pickup_time=order.pickup_time,
            delivery_address=address,
            is_guest_order=order.is_guest_order,
            guest_info=guest_info,
            created_at=order.created_at,
        )

    def cancel_order(self, order_id: str, owner: CartOwner) -> OrderModel:
        order = self.get_order(order_id, owner)

        if order.status != "pending":
            raise ValueError("Cannot cancel order that is already in progress")

        order.status = "cancelled"
        order = self.repo.save(order)

        logger.info(f"Order {order.id} cancelled by {owner}")
        return order

    def update_order_status(self, order_id: str, status: str) -> OrderModel:
        if status not in ORDER_STATUSES:
            raise ValueError(f"Unknown order status {status!r}")

        order = self._require_order(order_id)

        order.status = status
        order = self.repo.save(order)

        logger.info(f"Order {order.id} status -> {status}")

        if order.user_id is not None:
            self._notify(
                self.notification_service.send_order_status_notification,
                order.user_id,
                order.id,
                status,
            )

        return order

    def update_payment_status(self, order_id: str, payment_status: str) -> OrderModel:
        if payment_status not in PAYMENT_STATUSES:
            raise ValueError(f"Unknown payment status {payment_status!r}")

        order = self._require_order(order_id)

        order.payment_status = payment_status
        order = self.repo.save(order)

        logger.info(f"Order {order.id} payment status -> {payment_status}")
        return order

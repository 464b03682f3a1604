# cafe/api/deps.py
from fastapi import Depends, HTTPException, Query
from sqlalchemy.orm import Session

from cafe.data.database import get_db
from cafe.domain.owner import CartOwner
from cafe.services.cart_service import CartService
from cafe.services.cart_sync import CartSynchronizer
from cafe.services.checkout_service import CheckoutService
from cafe.services.menu_client import MenuClient
from cafe.services.notification_service import NotificationService
from cafe.services.order_service import OrderService
from cafe.services.user_service import UserService


def get_owner(
    user_id: int | None = Query(None, gt=0),
    guest_id: str | None = Query(None, min_length=1),
) -> CartOwner:
    try:
        return CartOwner(user_id=user_id, guest_id=guest_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def get_menu_client() -> MenuClient:
    return MenuClient()


def get_notification_service() -> NotificationService:
    return NotificationService()


def get_cart_service(
    db: Session = Depends(get_db),
    menu_client: MenuClient = Depends(get_menu_client),
) -> CartService:
    return CartService(db=db, menu_client=menu_client)


def get_order_service(
    db: Session = Depends(get_db),
    menu_client: MenuClient = Depends(get_menu_client),
    notification_service: NotificationService = Depends(get_notification_service),
) -> OrderService:
    return OrderService(db, menu_client, notification_service)


def get_checkout_service(
    cart_service: CartService = Depends(get_cart_service),
    order_service: OrderService = Depends(get_order_service),
) -> CheckoutService:
    return CheckoutService(CartSynchronizer(cart_service), order_service)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)

# cafe/services/notification_service.py
from cafe.celery_worker import celery_app
from cafe.services.connection_registry import (
    ConnectionRegistry,
    ORDER_STATUS_UPDATED,
    NEW_ADMIN_NOTIFICATION,
)
from cafe.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Dispatches real-time notifications through Celery.
    Publishing to the broker is attempted once; an unreachable broker raises
    and callers decide whether that matters.
    """

    @staticmethod
    def send_order_status_notification(user_id: int, order_id: str, status: str):
        send_order_status_notification_task.apply_async((user_id, order_id, status), retry=False)

    @staticmethod
    def send_admin_notification(payload: dict):
        send_admin_notification_task.apply_async((payload,), retry=False)


def get_registry() -> ConnectionRegistry:
    return ConnectionRegistry()


@celery_app.task(name="cafe.services.notification_service.send_order_status_notification_task")
def send_order_status_notification_task(user_id: int, order_id: str, status: str):
    registry = get_registry()
    connection_id = registry.lookup(user_id)

    if not connection_id:
        logger.info(f"[NOTIFICATION] User {user_id} not connected, order {order_id} update skipped")
        return {"user_id": user_id, "order_id": order_id, "status": "skipped"}

    registry.publish(
        connection_id,
        ORDER_STATUS_UPDATED,
        {"userId": user_id, "orderId": order_id, "status": status},
    )
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} is {status}")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}


@celery_app.task(name="cafe.services.notification_service.send_admin_notification_task")
def send_admin_notification_task(payload: dict):
    get_registry().broadcast(NEW_ADMIN_NOTIFICATION, payload)
    logger.info(f"[NOTIFICATION] Admin broadcast: {payload.get('type')}")
    return {"status": "sent"}

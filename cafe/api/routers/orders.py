# cafe/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from cafe.api.deps import get_order_service, get_owner
from cafe.domain.errors import OrderNotFound
from cafe.domain.owner import CartOwner
from cafe.domain.schemas import OrderOut, OrderStatusUpdate, OrderTrackOut, PaymentStatusUpdate
from cafe.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("/", response_model=List[OrderOut])
def list_my_orders(
    owner: CartOwner = Depends(get_owner),
    svc: OrderService = Depends(get_order_service),
):
    return svc.list_orders(owner)


@router.get("/all", response_model=List[OrderOut])
def list_all_orders(svc: OrderService = Depends(get_order_service)):
    """Staff endpoint, newest first."""
    return svc.list_all_orders()


@router.get("/track/{order_id}", response_model=OrderTrackOut)
def track_order(
    order_id: str,
    user_id: int | None = Query(None, gt=0),
    svc: OrderService = Depends(get_order_service),
):
    owner = CartOwner(user_id=user_id) if user_id is not None else None
    try:
        return svc.track_order(order_id, owner)
    except OrderNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=401, detail=str(e))


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str,
    owner: CartOwner = Depends(get_owner),
    svc: OrderService = Depends(get_order_service),
):
    try:
        return svc.get_order(order_id, owner)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: str,
    owner: CartOwner = Depends(get_owner),
    svc: OrderService = Depends(get_order_service),
):
    """Only a pending order can be cancelled by its owner."""
    try:
        return svc.cancel_order(order_id, owner)
    except OrderNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    svc: OrderService = Depends(get_order_service),
):
    """
    Staff endpoint. Notifies the customer's live connection about the change.
    """
    try:
        return svc.update_order_status(order_id, payload.status)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{order_id}/payment", response_model=OrderOut)
def update_payment_status(
    order_id: str,
    payload: PaymentStatusUpdate,
    svc: OrderService = Depends(get_order_service),
):
    try:
        return svc.update_payment_status(order_id, payload.payment_status)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

# cafe/api/routers/checkout.py
from fastapi import APIRouter, Depends, HTTPException

from cafe.api.deps import get_checkout_service, get_owner
from cafe.domain.errors import CheckoutError
from cafe.domain.owner import CartOwner
from cafe.domain.schemas import CheckoutIn, OrderOut
from cafe.services.checkout_service import CheckoutService

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post("/", response_model=OrderOut, status_code=201)
def checkout(
    payload: CheckoutIn,
    owner: CartOwner = Depends(get_owner),
    svc: CheckoutService = Depends(get_checkout_service),
):
    """
    Syncs the local cart into the server cart, verifies it and places the order.
    A failed step comes back as a retryable error with messages for the shopper.
    """
    try:
        return svc.place_order(owner, payload.items, payload)
    except CheckoutError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

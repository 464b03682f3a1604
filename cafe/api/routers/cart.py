#cafe/api/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException
from requests import RequestException

from cafe.api.deps import get_cart_service, get_owner
from cafe.domain.owner import CartOwner
from cafe.domain.schemas import (
    CartItemIn,
    CartItemUpdate,
    CartOut,
    CartSyncIn,
    SyncOutcomeOut,
)
from cafe.services.cart_service import CartService
from cafe.services.cart_sync import CartSynchronizer, SyncOutcome

router = APIRouter(prefix="/cart", tags=["cart"])


def _outcome_out(outcome: SyncOutcome) -> SyncOutcomeOut:
    return SyncOutcomeOut(
        overall_success=outcome.overall_success,
        attempted_count=outcome.attempted_count,
        succeeded_count=outcome.succeeded_count,
        discarded_count=outcome.discarded_count,
        failure=outcome.failure.value if outcome.failure else None,
        clear_local_cart=outcome.clear_local_cart,
        outcomes=[
            {
                "product_ref": o.line["product_ref"],
                "display_name": o.line["display_name"],
                "succeeded": o.succeeded,
                "error": o.error,
            }
            for o in outcome.outcomes
        ],
    )


@router.get("/", response_model=CartOut)
def get_cart(
    owner: CartOwner = Depends(get_owner),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.get_cart(owner)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/items", response_model=CartOut)
def add_item(
    payload: CartItemIn,
    owner: CartOwner = Depends(get_owner),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.add_item(owner, **payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RequestException as e:
        raise HTTPException(status_code=503, detail=f"Menu service unavailable: {e}")


@router.put("/items/{item_id}", response_model=CartOut)
def update_item(
    item_id: int,
    payload: CartItemUpdate,
    owner: CartOwner = Depends(get_owner),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.update_item(owner, item_id, payload.quantity)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/items/{item_id}", response_model=CartOut)
def remove_item(
    item_id: int,
    owner: CartOwner = Depends(get_owner),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.remove_item(owner, item_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/clear", response_model=CartOut)
def clear_cart(
    owner: CartOwner = Depends(get_owner),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.clear_cart(owner)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/", status_code=204)
def delete_cart(
    owner: CartOwner = Depends(get_owner),
    svc: CartService = Depends(get_cart_service),
):
    try:
        svc.delete_cart(owner)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/sync", response_model=SyncOutcomeOut)
def sync_cart(
    payload: CartSyncIn,
    owner: CartOwner = Depends(get_owner),
    svc: CartService = Depends(get_cart_service),
):
    """
    Replaces the server cart with the storefront's local snapshot.
    Always 200, the outcome says whether the cart is usable for checkout.
    """
    outcome = CartSynchronizer(svc).synchronize(owner, payload.items)
    return _outcome_out(outcome)


@router.get("/verify")
def verify_cart(
    owner: CartOwner = Depends(get_owner),
    svc: CartService = Depends(get_cart_service),
):
    return {"verified": CartSynchronizer(svc).verify(owner)}

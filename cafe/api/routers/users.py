# cafe/api/routers/users.py
from fastapi import APIRouter, Depends, HTTPException

from cafe.api.deps import get_user_service
from cafe.domain.schemas import UserCreate, UserRead
from cafe.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=UserRead)
def register_user(payload: UserCreate, svc: UserService = Depends(get_user_service)):
    """
    Mirrors an account from the identity provider. Posting the same id again returns
    the stored user unchanged.
    """
    try:
        return svc.create_user(payload)
    except ValueError as e:
        #email taken by another id
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/{user_id}", response_model=UserRead)
def read_user(user_id: int, svc: UserService = Depends(get_user_service)):
    try:
        return svc.get_user(user_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))

from fastapi import APIRouter, Depends, HTTPException

from cafe.domain.schemas import ConnectionIn
from cafe.services.connection_registry import ConnectionRegistry

router = APIRouter(prefix="/connections", tags=["connections"])


def get_registry() -> ConnectionRegistry:
    return ConnectionRegistry()


@router.post("/", status_code=201)
def register_connection(payload: ConnectionIn, registry: ConnectionRegistry = Depends(get_registry)):
    registry.register(payload.user_id, payload.connection_id)
    return {"user_id": payload.user_id, "connection_id": payload.connection_id}


@router.delete("/{connection_id}")
def unregister_connection(connection_id: str, registry: ConnectionRegistry = Depends(get_registry)):
    user_id = registry.unregister(connection_id)
    if user_id is None:
        raise HTTPException(status_code=404, detail="Connection not registered")
    return {"user_id": user_id, "connection_id": connection_id}

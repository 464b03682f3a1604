# cafe/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn

from cafe.data.database import Base, engine
from cafe.api.routers import health, users, cart, checkout, orders, connections
from cafe.utils.logging import get_logger

#every model has to be imported before create_all
import cafe.data.models  # noqa: F401

logger = get_logger(__name__)


def init_db():
    logger.info(f"Creating tables: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Cafe Cart Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(cart.router)
    app.include_router(checkout.router)
    app.include_router(orders.router)
    app.include_router(connections.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)

import pytest
from fastapi.testclient import TestClient
from requests import ConnectionError as RequestsConnectionError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import cafe.data.models  # noqa: F401
from cafe.api.deps import get_menu_client, get_notification_service
from cafe.data.database import Base, get_db
from cafe.domain.errors import MenuItemNotFound
from cafe.main import create_app
from cafe.menu_service.main import MENU

LATTE = "64f1a2b3c4d5e6f708192a3b"
COLD_BREW = "64f1a2b3c4d5e6f708192a3c"
SCONE = "64f1a2b3c4d5e6f708192a3d"
PIE = "64f1a2b3c4d5e6f708192a3e"  # listed but unavailable
DELETED = "0123456789abcdef01234567"  # well formed, not on the menu


class FakeMenuClient:
    """
    Serves the dev menu in-process; ids in `offline` fail like a dead menu service.
    With `calls_left` set, the whole service goes down once that many fetches were served.
    """

    def __init__(self, menu=None):
        self.menu = dict(menu or MENU)
        self.offline = set()
        self.calls = []
        self.calls_left = None

    def fetch_menu_item(self, menu_item_id):
        self.calls.append(menu_item_id)
        if self.calls_left is not None:
            if self.calls_left <= 0:
                raise RequestsConnectionError("menu service down")
            self.calls_left -= 1
        if menu_item_id in self.offline:
            raise RequestsConnectionError("menu service down")
        item = self.menu.get(menu_item_id)
        if item is None:
            raise MenuItemNotFound(f"Menu item {menu_item_id} not found")
        return item


class BrokerDownNotifications:
    """Every dispatch fails like a publish to an unreachable broker."""

    def send_admin_notification(self, payload):
        raise ConnectionError("broker unreachable")

    def send_order_status_notification(self, user_id, order_id, status):
        raise ConnectionError("broker unreachable")


class RecordingNotifications:
    def __init__(self):
        self.admin = []
        self.status = []

    def send_admin_notification(self, payload):
        self.admin.append(payload)

    def send_order_status_notification(self, user_id, order_id, status):
        self.status.append((user_id, order_id, status))


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def menu_client():
    return FakeMenuClient()


@pytest.fixture()
def notifications():
    return RecordingNotifications()


@pytest.fixture()
def client(session_factory, menu_client, notifications):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_menu_client] = lambda: menu_client
    app.dependency_overrides[get_notification_service] = lambda: notifications
    return TestClient(app)


def local_line(product_ref=LATTE, display_name="Latte", quantity=1, **modifiers):
    line = {"product_ref": product_ref, "display_name": display_name, "quantity": quantity}
    line.update(modifiers)
    return line

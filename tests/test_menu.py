from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from conftest import LATTE
from cafe.domain.errors import MenuItemNotFound
from cafe.menu_service.main import app as menu_app
from cafe.services import menu_client as menu_client_module
from cafe.services.menu_client import MenuClient


def _response(status_code, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    return resp


class TestMenuClient:
    def test_fetch(self, monkeypatch):
        get = MagicMock(return_value=_response(200, {"id": LATTE, "name": "Latte"}))
        monkeypatch.setattr(menu_client_module.requests, "get", get)

        item = MenuClient(base_url="http://menu/").fetch_menu_item(LATTE)

        assert item["name"] == "Latte"
        get.assert_called_once_with(f"http://menu/menu/{LATTE}", timeout=2)

    def test_not_found_is_not_retried(self, monkeypatch):
        get = MagicMock(return_value=_response(404))
        monkeypatch.setattr(menu_client_module.requests, "get", get)

        with pytest.raises(MenuItemNotFound):
            MenuClient(base_url="http://menu").fetch_menu_item(LATTE)

        assert get.call_count == 1


class TestDevMenuService:
    @pytest.fixture()
    def client(self):
        return TestClient(menu_app)

    def test_get_item(self, client):
        response = client.get(f"/menu/{LATTE}")
        assert response.status_code == 200
        assert response.json()["name"] == "Latte"

    def test_missing_item(self, client):
        assert client.get("/menu/ffffffffffffffffffffffff").status_code == 404

    def test_filter_by_category(self, client):
        items = client.get("/menu", params={"category": "bakery"}).json()
        assert {i["category"] for i in items} == {"Bakery"}

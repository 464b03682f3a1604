# cafe/services/menu_client.py
import requests

from cafe.domain.errors import MenuItemNotFound
from cafe.utils.retry import http_retry
from cafe.utils.settings import MENU_SERVICE_URL, MENU_CLIENT_TIMEOUT
from cafe.utils.logging import get_logger

logger = get_logger(__name__)


class MenuClient:
    """
    Read-only access to the menu catalog.
    A missing item is a domain error, transport failures are retried.
    """

    def __init__(self, base_url: str | None = None, timeout: int = MENU_CLIENT_TIMEOUT):
        self.base_url = (base_url or MENU_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def fetch_menu_item(self, menu_item_id: str) -> dict:
        url = f"{self.base_url}/menu/{menu_item_id}"
        logger.info(f"MenuClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        #404 is an answer, not a transport failure, so it must not be retried
        if resp.status_code == 404:
            raise MenuItemNotFound(f"Menu item {menu_item_id} not found")
        resp.raise_for_status()
        return resp.json()

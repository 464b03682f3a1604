# cafe/services/cart_sync.py
"""
Reconciles the storefront's local cart snapshot into the server cart
right before an order is placed.

The snapshot is untrusted client state. Lines with a malformed menu
reference or no name are dropped, the owner's server cart is deleted and
every remaining line is replayed through the regular add-item command.

Deleting and re-adding is not atomic: a request that dies half way leaves
a partially filled server cart behind. Verification re-reads the store
before checkout continues, so such a cart can never be turned into an
order silently.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Mapping, Protocol

from cafe.data.ids import is_object_id
from cafe.domain.errors import CartNotFound
from cafe.domain.owner import CartOwner
from cafe.utils.logging import get_logger

logger = get_logger(__name__)

MODIFIER_FIELDS = ("special_instructions", "selected_size", "selected_milk", "add_cold_foam")


class CartStore(Protocol):
    def delete_cart(self, owner: CartOwner) -> None: ...

    def add_item(self, owner: CartOwner, menu_item_id: str, quantity: int, **modifiers) -> dict: ...

    def get_cart(self, owner: CartOwner) -> dict: ...


class SyncFailure(str, Enum):
    EMPTY_SNAPSHOT = "empty_snapshot"
    NO_VALID_LINES = "no_valid_lines"
    NO_ITEMS_ADDED = "no_items_added"


@dataclass
class ItemOutcome:
    line: Mapping[str, Any]
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class SyncOutcome:
    attempted_count: int = 0
    discarded_count: int = 0
    outcomes: List[ItemOutcome] = field(default_factory=list)
    failure: SyncFailure | None = None
    clear_local_cart: bool = False

    @property
    def succeeded_count(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def overall_success(self) -> bool:
        return self.failure is None and self.succeeded_count > 0

    @property
    def failed(self) -> List[ItemOutcome]:
        return [o for o in self.outcomes if not o.succeeded]


def is_valid_line(line: Any) -> bool:
    if not isinstance(line, Mapping):
        return False

    name = line.get("display_name")
    return is_object_id(line.get("product_ref")) and isinstance(name, str) and len(name) > 0


def validate_snapshot(snapshot: Iterable[Any]) -> list:
    """Lines eligible for replay, in their original order. Never raises."""
    return [line for line in snapshot if is_valid_line(line)]


class CartSynchronizer:
    def __init__(self, store: CartStore):
        self.store = store

    def synchronize(self, owner: CartOwner, snapshot: List[Mapping[str, Any]]) -> SyncOutcome:
        outcome = SyncOutcome()

        if not snapshot:
            logger.info(f"Nothing to sync for {owner}, local cart is empty")
            outcome.failure = SyncFailure.EMPTY_SNAPSHOT
            return outcome

        valid = validate_snapshot(snapshot)
        outcome.discarded_count = len(snapshot) - len(valid)
        logger.info(f"Cart sync for {owner}: {len(valid)} valid out of {len(snapshot)} lines")

        if not valid:
            #every line is stale or corrupt, the client has to drop its copy
            logger.warning(f"No valid lines in local cart of {owner}")
            outcome.failure = SyncFailure.NO_VALID_LINES
            outcome.clear_local_cart = True
            return outcome

        self._delete_existing(owner)

        for line in valid:
            outcome.attempted_count += 1
            modifiers = {k: line.get(k) for k in MODIFIER_FIELDS if line.get(k) is not None}
            try:
                self.store.add_item(owner, line["product_ref"], line.get("quantity"), **modifiers)
                outcome.outcomes.append(ItemOutcome(line=line))
            except Exception as e:
                #one stale menu reference must not block the rest of the cart
                logger.warning(
                    f"Failed to add {line['display_name']} ({line['product_ref']}) for {owner}: {e}"
                )
                outcome.outcomes.append(ItemOutcome(line=line, error=str(e)))

        logger.info(
            f"Cart sync completed for {owner}: "
            f"{outcome.succeeded_count}/{outcome.attempted_count} lines added"
        )

        if outcome.succeeded_count == 0:
            outcome.failure = SyncFailure.NO_ITEMS_ADDED
        elif outcome.failed:
            logger.warning(
                f"Server cart of {owner} is partial: {len(outcome.failed)} lines were not added"
            )

        return outcome

    def _delete_existing(self, owner: CartOwner):
        try:
            self.store.delete_cart(owner)
        except CartNotFound:
            pass
        except Exception as e:
            logger.warning(f"Could not clear existing cart of {owner}, continuing: {e}")

    def verify(self, owner: CartOwner) -> bool:
        """Re-reads the server cart, it must exist and hold at least one line."""
        try:
            cart = self.store.get_cart(owner)
        except Exception as e:
            logger.warning(f"Cart verification failed for {owner}: {e}")
            return False

        if not cart.get("items"):
            logger.warning(f"Cart of {owner} is empty after sync")
            return False

        return True

# cafe/services/checkout_service.py
from enum import Enum
from typing import Any, List, Mapping

from cafe.data.models.order import OrderModel
from cafe.domain.errors import CartSyncError, CartVerificationError, EmptyCartError
from cafe.domain.owner import CartOwner
from cafe.domain.schemas import OrderDetails
from cafe.services.cart_sync import CartSynchronizer, SyncFailure
from cafe.services.order_service import OrderService
from cafe.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutStage(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SYNCHRONIZING = "synchronizing"
    VERIFYING = "verifying"
    ORDER_CREATION = "order_creation"
    ABORTED = "aborted"


class CheckoutService:
    """
    Places an order from the storefront's local cart.
    Sync, then verify, then create the order; any failed step aborts with a
    retryable CheckoutError, nothing is retried automatically.
    """

    def __init__(self, synchronizer: CartSynchronizer, order_service: OrderService):
        self.synchronizer = synchronizer
        self.order_service = order_service
        self.stage = CheckoutStage.IDLE

    def _advance(self, stage: CheckoutStage, owner: CartOwner):
        logger.info(f"Checkout for {owner}: {self.stage.value} -> {stage.value}")
        self.stage = stage

    def _abort(self, owner: CartOwner, error_cls, failed_stage: CheckoutStage, clear_local_cart=False):
        self._advance(CheckoutStage.ABORTED, owner)
        raise error_cls(failed_stage, clear_local_cart=clear_local_cart)

    def place_order(
        self,
        owner: CartOwner,
        snapshot: List[Mapping[str, Any]],
        details: OrderDetails,
    ) -> OrderModel:
        #validation runs inside synchronize, the stage only marks it for the log
        self._advance(CheckoutStage.VALIDATING, owner)
        self._advance(CheckoutStage.SYNCHRONIZING, owner)
        outcome = self.synchronizer.synchronize(owner, snapshot)

        if outcome.failure in (SyncFailure.EMPTY_SNAPSHOT, SyncFailure.NO_VALID_LINES):
            self._abort(
                owner, EmptyCartError, CheckoutStage.SYNCHRONIZING, outcome.clear_local_cart
            )
        if not outcome.overall_success:
            self._abort(owner, CartSyncError, CheckoutStage.SYNCHRONIZING)

        self._advance(CheckoutStage.VERIFYING, owner)
        if not self.synchronizer.verify(owner):
            self._abort(owner, CartVerificationError, CheckoutStage.VERIFYING)

        self._advance(CheckoutStage.ORDER_CREATION, owner)
        return self.order_service.create_order_from_cart(owner, details)

# cafe/domain/errors.py


class CartNotFound(LookupError):
    pass


class CartLineNotFound(LookupError):
    pass


class MenuItemNotFound(ValueError):
    pass


class OrderNotFound(ValueError):
    pass


class CheckoutError(ValueError):
    """
    Checkout aborted before an order was created.
    Always retryable by the shopper; carries the messages shown to them.
    """

    status_code = 400
    messages: tuple[str, ...] = ("Checkout failed. Please try again.",)

    def __init__(self, stage, clear_local_cart: bool = False):
        super().__init__(self.messages[0])
        self.stage = stage
        self.clear_local_cart = clear_local_cart
        self.retryable = True

    def to_detail(self) -> dict:
        return {
            "stage": self.stage.value,
            "messages": list(self.messages),
            "retryable": self.retryable,
            "clear_local_cart": self.clear_local_cart,
        }


class EmptyCartError(CheckoutError):
    messages = (
        "Your cart is empty. Please add items to your cart again.",
    )


class CartSyncError(CheckoutError):
    messages = (
        "Unable to sync your cart. Please refresh the page and add items to your cart again.",
        "Make sure you are adding items from the current menu.",
    )


class CartVerificationError(CheckoutError):
    status_code = 409
    messages = (
        "Unable to verify your cart. Please try again.",
        "If the problem persists, please refresh the page.",
    )

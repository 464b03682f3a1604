# cafe/domain/owner.py
from dataclasses import dataclass


@dataclass(frozen=True)
class CartOwner:
    """
    Whoever a server cart belongs to: a registered user or a guest session.
    Exactly one of the two references is set.
    """

    user_id: int | None = None
    guest_id: str | None = None

    def __post_init__(self):
        if (self.user_id is None) == (self.guest_id is None):
            raise ValueError("Cart owner needs exactly one of user_id or guest_id")
        if self.guest_id is not None and not self.guest_id.strip():
            raise ValueError("guest_id cannot be blank")

    @property
    def is_guest(self) -> bool:
        return self.guest_id is not None

    def __str__(self):
        return f"guest:{self.guest_id}" if self.is_guest else f"user:{self.user_id}"

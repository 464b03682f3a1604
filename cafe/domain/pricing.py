# cafe/domain/pricing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Mapping

from cafe.utils.settings import TAX_RATE

COLD_FOAM_SURCHARGE = Decimal("1.00")
ALT_MILK_SURCHARGE = Decimal("0.75")
CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def unit_price(
    menu_item: Mapping[str, Any],
    selected_size: str | None = None,
    selected_milk: str | None = None,
    add_cold_foam: bool = False,
) -> Decimal:
    """
    Price of one unit with its modifiers.
    A selected size listed on the menu item replaces the base price,
    cold foam and alternative milk are flat surcharges.
    """
    price = Decimal(str(menu_item["price"]))

    if selected_size:
        for option in menu_item.get("sizes") or []:
            if option.get("size") == selected_size:
                price = Decimal(str(option["price"]))
                break

    if add_cold_foam:
        price += COLD_FOAM_SURCHARGE

    if selected_milk:
        price += ALT_MILK_SURCHARGE

    return to_money(price)


def line_total(price: Decimal, quantity: int) -> Decimal:
    return to_money(price * quantity)


def cart_total(lines: Iterable[Any]) -> Decimal:
    return sum((line_total(i.unit_price, i.quantity) for i in lines), Decimal("0.00"))


def tax_for(subtotal: Decimal) -> Decimal:
    return to_money(subtotal * TAX_RATE)

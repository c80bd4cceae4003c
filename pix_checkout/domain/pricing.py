"""Cart pricing engine - line totals, subtotal and grand total"""

from decimal import Decimal
from typing import List, Sequence

from pix_checkout.domain.exceptions import InvalidCartLine
from pix_checkout.domain.models import CartLine, CartTotals, PricedLine
from pix_checkout.utils.money import ZERO, quantize_brl, to_decimal


def validate_lines(lines: Sequence[CartLine]) -> None:
    """Reject ghost lines before anything gets priced"""
    for index, line in enumerate(lines):
        if isinstance(line.quantity, bool) or not isinstance(line.quantity, int):
            raise InvalidCartLine(
                f"Line {index} ({line.base_name}) has non-integer quantity {line.quantity!r}",
                line_index=index,
            )
        if line.quantity < 1:
            raise InvalidCartLine(
                f"Line {index} ({line.base_name}) has quantity {line.quantity}",
                line_index=index,
            )


def line_unit_price(line: CartLine) -> Decimal:
    """Base (or variation) price plus every selected add-on"""
    addons = sum((to_decimal(addon.unit_price) for addon in line.selected_addons), ZERO)
    return to_decimal(line.base_unit_price) + addons


def compute_totals(
    lines: Sequence[CartLine],
    delivery_fee: Decimal = ZERO,
    discount: Decimal = ZERO,
) -> CartTotals:
    """
    Price a cart.

    Rules, in order:
    1. unit price = base price + sum of add-on prices
    2. line total = unit price x quantity
    3. subtotal = sum of line totals
    4. total = max(0, subtotal + delivery fee - discount)

    Arithmetic runs at full precision; subtotal, fee and discount are each
    rounded to cents once, at the end, and the total is taken from those
    rounded fields so the breakdown shown to the shopper adds up. Delivery
    fee and discount arrive already resolved (pickup and free delivery are
    0 upstream). Negative fee or discount is treated as 0. A discount larger
    than subtotal + fee is absorbed silently, and the reported discount is
    the absorbed part, so total == subtotal + delivery_fee - discount.

    Raises:
        InvalidCartLine: any line has quantity < 1
    """
    validate_lines(lines)

    fee = max(to_decimal(delivery_fee), ZERO)
    requested_discount = max(to_decimal(discount), ZERO)

    priced: List[PricedLine] = []
    subtotal = ZERO
    for line in lines:
        unit_price = line_unit_price(line)
        line_total = unit_price * line.quantity
        subtotal += line_total
        priced.append(PricedLine(line=line, unit_price=unit_price, line_total=line_total))

    q_subtotal = quantize_brl(subtotal)
    q_fee = quantize_brl(fee)
    q_discount = quantize_brl(min(requested_discount, q_subtotal + q_fee))
    total = max(q_subtotal + q_fee - q_discount, ZERO)

    return CartTotals(
        lines=[
            PricedLine(
                line=p.line,
                unit_price=quantize_brl(p.unit_price),
                line_total=quantize_brl(p.line_total),
            )
            for p in priced
        ],
        subtotal=q_subtotal,
        delivery_fee=q_fee,
        discount=q_discount,
        total=total,
    )

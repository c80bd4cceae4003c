"""Shopping cart aggregate - merges identical selections, adjusts quantities"""

import uuid
from decimal import Decimal
from typing import List, Optional, Sequence

from pix_checkout.domain.exceptions import InvalidCartLine
from pix_checkout.domain.models import Addon, CartLine, CartTotals
from pix_checkout.domain.pricing import compute_totals
from pix_checkout.utils.money import ZERO, to_decimal


def _signature(
    product_id: Optional[str],
    base_name: str,
    variation_name: Optional[str],
    addons: Sequence[Addon],
    note: Optional[str],
) -> tuple:
    # Add-on order does not make two selections different
    return (
        product_id or base_name,
        variation_name or "",
        tuple(sorted(addon.name for addon in addons)),
        (note or "").strip(),
    )


class Cart:
    """In-memory cart for one shopper session"""

    def __init__(self, lines: Optional[List[CartLine]] = None):
        self.lines: List[CartLine] = list(lines or [])

    def add(
        self,
        base_name: str,
        base_unit_price: Decimal,
        quantity: int = 1,
        addons: Optional[Sequence[Addon]] = None,
        note: Optional[str] = None,
        product_id: Optional[str] = None,
        variation_name: Optional[str] = None,
    ) -> CartLine:
        """
        Add a confirmed product configuration.

        Same product, variation, add-on set and note as an existing line:
        quantities are summed and the line takes the latest prices.
        Otherwise a new line is appended. Quantity must be a positive
        integer; lowering a quantity goes through set_quantity.

        Raises:
            InvalidCartLine: quantity < 1
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidCartLine(f"Cannot add {quantity!r} of '{base_name}' to the cart")

        addons = list(addons or [])
        price = to_decimal(base_unit_price)
        wanted = _signature(product_id, base_name, variation_name, addons, note)

        existing = next(
            (
                line for line in self.lines
                if _signature(
                    line.product_id, line.base_name, line.variation_name, line.selected_addons, line.note
                ) == wanted
            ),
            None,
        )

        if existing:
            existing.quantity += quantity
            existing.base_unit_price = price
            existing.selected_addons = addons
            return existing

        line = CartLine(
            base_name=base_name,
            base_unit_price=price,
            quantity=quantity,
            selected_addons=addons,
            note=note.strip() if note else None,
            product_id=product_id,
            variation_name=variation_name,
            line_id=uuid.uuid4().hex,
        )
        self.lines.append(line)
        return line

    def get(self, line_id: str) -> Optional[CartLine]:
        return next((line for line in self.lines if line.line_id == line_id), None)

    def set_quantity(self, line_id: str, quantity: int) -> Optional[CartLine]:
        """Zero or negative quantity removes the line instead of keeping a ghost"""
        if quantity <= 0:
            self.remove(line_id)
            return None
        line = self.get(line_id)
        if line is not None:
            line.quantity = quantity
        return line

    def remove(self, line_id: str) -> None:
        self.lines = [line for line in self.lines if line.line_id != line_id]

    def clear(self) -> None:
        self.lines = []

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def totals(self, delivery_fee: Decimal = ZERO, discount: Decimal = ZERO) -> CartTotals:
        return compute_totals(self.lines, delivery_fee, discount)

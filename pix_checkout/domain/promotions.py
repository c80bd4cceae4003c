"""Coupon and delivery-fee resolution feeding the pricing engine"""

import unicodedata
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from pix_checkout.domain.exceptions import CouponNotApplicable, UnknownDeliveryZone
from pix_checkout.domain.models import (
    Coupon,
    CouponOutcome,
    DeliveryZone,
    DiscountType,
    FulfillmentMode,
)
from pix_checkout.utils.money import ZERO, to_decimal


def _normalize_neighborhood(name: str) -> str:
    decomposed = unicodedata.normalize("NFD", name or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(stripped.casefold().split())


def lookup_delivery_fee(zones: Iterable[DeliveryZone], neighborhood: str) -> Decimal:
    """
    Find the fee registered for a neighborhood.

    Matching ignores case, accents and repeated whitespace
    ("Jardim  América" == "jardim america").
    """
    wanted = _normalize_neighborhood(neighborhood)
    for zone in zones:
        if _normalize_neighborhood(zone.neighborhood) == wanted:
            return to_decimal(zone.fee)
    raise UnknownDeliveryZone(f"No delivery fee for neighborhood '{neighborhood}'")


def resolve_coupon(
    coupon: Coupon,
    subtotal: Decimal,
    establishment_id: str | None,
    now: datetime,
) -> CouponOutcome:
    """
    Work out what a coupon is worth for this order.

    Checks, in order: active flag, validity window, usage limit,
    establishment scope, minimum order. Percentage and fixed discounts are
    capped at the subtotal; free-delivery coupons carry no discount.

    Raises:
        CouponNotApplicable: with the failed check as reason
    """
    code = coupon.code.strip().upper()
    subtotal = to_decimal(subtotal)

    if not coupon.active:
        raise CouponNotApplicable(code, "inactive")
    if coupon.valid_from is not None and now < coupon.valid_from:
        raise CouponNotApplicable(code, "not_started")
    if coupon.valid_until is not None and now > coupon.valid_until:
        raise CouponNotApplicable(code, "expired")
    if coupon.max_uses is not None and coupon.uses >= coupon.max_uses:
        raise CouponNotApplicable(code, "usage_limit_reached")
    if coupon.establishment_ids and establishment_id not in coupon.establishment_ids:
        raise CouponNotApplicable(code, "wrong_establishment")
    if coupon.minimum_order is not None and subtotal < to_decimal(coupon.minimum_order):
        raise CouponNotApplicable(code, "below_minimum_order")

    if coupon.discount_type == DiscountType.FREE_DELIVERY:
        return CouponOutcome(code=code, discount=ZERO, free_delivery=True)

    value = max(to_decimal(coupon.value), ZERO)
    if coupon.discount_type == DiscountType.PERCENTAGE:
        discount = subtotal * min(value, Decimal("100")) / Decimal("100")
    else:
        discount = value

    return CouponOutcome(code=code, discount=min(discount, subtotal), free_delivery=False)


def resolve_delivery_fee(
    fulfillment: FulfillmentMode,
    zone_fee: Decimal | None,
    free_delivery: bool = False,
) -> Decimal:
    """
    Pickup and dine-in orders never carry a delivery fee.

    A delivery order without a free-delivery coupon needs a zone fee.
    """
    if fulfillment != FulfillmentMode.DELIVERY or free_delivery:
        return ZERO
    if zone_fee is None:
        raise UnknownDeliveryZone("Delivery order has no delivery zone")
    return max(to_decimal(zone_fee), ZERO)

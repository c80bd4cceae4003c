"""Checkout quote - promotions resolved upstream of the pricing engine"""

from datetime import datetime
from typing import Optional, Sequence

from pix_checkout.domain.models import (
    CartLine,
    CheckoutQuote,
    Coupon,
    DeliveryZone,
    FulfillmentMode,
)
from pix_checkout.domain.pricing import compute_totals, validate_lines
from pix_checkout.domain.promotions import (
    lookup_delivery_fee,
    resolve_coupon,
    resolve_delivery_fee,
)
from pix_checkout.utils.money import ZERO


def quote_order(
    lines: Sequence[CartLine],
    fulfillment: FulfillmentMode,
    now: datetime,
    zones: Sequence[DeliveryZone] = (),
    neighborhood: Optional[str] = None,
    coupon: Optional[Coupon] = None,
    establishment_id: Optional[str] = None,
) -> CheckoutQuote:
    """
    Main entry point: resolve fee and coupon, then price the cart.

    Flow:
    1. Validate lines (nothing is resolved for a broken cart)
    2. Price the bare cart to get the subtotal the coupon rules need
    3. Resolve the coupon (discount and/or free delivery)
    4. Look up the zone fee only for delivery orders; without a
       neighborhood only a free-delivery coupon avoids UnknownDeliveryZone
    5. Price again with the resolved fee and discount
    """
    validate_lines(lines)

    subtotal = compute_totals(lines).subtotal

    outcome = None
    if coupon is not None:
        outcome = resolve_coupon(coupon, subtotal, establishment_id, now)
    free_delivery = bool(outcome and outcome.free_delivery)

    zone_fee = None
    if fulfillment == FulfillmentMode.DELIVERY and neighborhood and neighborhood.strip():
        zone_fee = lookup_delivery_fee(zones, neighborhood)

    delivery_fee = resolve_delivery_fee(fulfillment, zone_fee, free_delivery)
    discount = outcome.discount if outcome else ZERO

    return CheckoutQuote(
        totals=compute_totals(lines, delivery_fee, discount),
        fulfillment=fulfillment,
        coupon_code=outcome.code if outcome else None,
        free_delivery=free_delivery,
    )

"""POST /v1/checkout/quote - price a cart with delivery fee and coupon"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Request

from pix_checkout.api.dependencies import get_request_id
from pix_checkout.api.v1.schemas import (
    CouponSchema,
    PricedLineSchema,
    QuoteRequest,
    QuoteResponse,
)
from pix_checkout.domain.checkout import quote_order
from pix_checkout.domain.exceptions import (
    CouponNotApplicable,
    InvalidCartLine,
    UnknownDeliveryZone,
)
from pix_checkout.domain.models import (
    Addon,
    CartLine,
    CheckoutQuote,
    Coupon,
    DeliveryZone,
)
from pix_checkout.infrastructure.observability.metrics import quote_counter
from pix_checkout.utils.money import format_brl

router = APIRouter()


def _as_utc(moment: Optional[datetime]) -> Optional[datetime]:
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def to_cart_lines(body: QuoteRequest) -> List[CartLine]:
    return [
        CartLine(
            base_name=line.name,
            base_unit_price=line.unit_price,
            quantity=line.quantity,
            selected_addons=[Addon(name=a.name, unit_price=a.unit_price) for a in line.addons],
            note=line.note,
            product_id=line.product_id,
            variation_name=line.variation_name,
        )
        for line in body.lines
    ]


def to_coupon(schema: Optional[CouponSchema]) -> Optional[Coupon]:
    if schema is None:
        return None
    return Coupon(
        code=schema.code,
        discount_type=schema.discount_type,
        value=schema.value,
        minimum_order=schema.minimum_order,
        valid_from=_as_utc(schema.valid_from),
        valid_until=_as_utc(schema.valid_until),
        max_uses=schema.max_uses,
        uses=schema.uses,
        active=schema.active,
        establishment_ids=list(schema.establishment_ids),
    )


def build_quote(body: QuoteRequest, request_id: str) -> CheckoutQuote:
    """
    Run the domain quote and translate domain errors to HTTP 422.

    Shared by the quote and charge endpoints.
    """
    try:
        quote = quote_order(
            lines=to_cart_lines(body),
            fulfillment=body.fulfillment,
            now=datetime.now(timezone.utc),
            zones=[DeliveryZone(neighborhood=z.neighborhood, fee=z.fee) for z in body.delivery_zones],
            neighborhood=body.neighborhood,
            coupon=to_coupon(body.coupon),
            establishment_id=body.establishment_id,
        )
    except InvalidCartLine as e:
        logging.warning(f"Invalid cart line: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail={"error": "invalid_cart_line", "message": str(e)})
    except UnknownDeliveryZone as e:
        logging.warning(f"Unknown delivery zone: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail={"error": "unknown_delivery_zone", "message": str(e)})
    except CouponNotApplicable as e:
        raise HTTPException(
            status_code=422,
            detail={"error": "coupon_not_applicable", "code": e.code, "reason": e.reason},
        )

    quote_counter.labels(fulfillment=quote.fulfillment.value).inc()
    return quote


def to_quote_response(quote: CheckoutQuote) -> QuoteResponse:
    totals = quote.totals
    return QuoteResponse(
        fulfillment=quote.fulfillment,
        lines=[
            PricedLineSchema(
                name=p.line.base_name,
                variation_name=p.line.variation_name,
                quantity=p.line.quantity,
                unit_price=p.unit_price,
                line_total=p.line_total,
                note=p.line.note,
            )
            for p in totals.lines
        ],
        subtotal=totals.subtotal,
        delivery_fee=totals.delivery_fee,
        discount=totals.discount,
        total=totals.total,
        total_display=format_brl(totals.total),
        coupon_code=quote.coupon_code,
        free_delivery=quote.free_delivery,
    )


@router.post("/checkout/quote", response_model=QuoteResponse)
def create_quote(body: QuoteRequest, request: Request):
    """
    Price a cart for display at checkout.

    Delivery fee comes from the neighborhood's zone unless the order is
    pickup/dine-in or a free-delivery coupon applies.
    """
    quote = build_quote(body, get_request_id(request))
    return to_quote_response(quote)

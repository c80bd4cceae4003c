"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from pix_checkout.domain.models import DiscountType, FulfillmentMode


class AddonSchema(BaseModel):
    """Add-on attached to a cart line"""

    name: str = Field(..., min_length=1)
    unit_price: Decimal = Field(..., ge=0)


class CartLineSchema(BaseModel):
    """One product selection as sent by the storefront"""

    product_id: Optional[str] = None
    name: str = Field(..., min_length=1, description="Product name")
    variation_name: Optional[str] = None
    unit_price: Decimal = Field(..., ge=0, description="Variation price when a variation is selected")
    # Not constrained here: the pricing engine reports bad quantities itself
    quantity: int
    addons: List[AddonSchema] = []
    note: Optional[str] = None


class DeliveryZoneSchema(BaseModel):
    neighborhood: str = Field(..., min_length=1)
    fee: Decimal = Field(..., ge=0)


class CouponSchema(BaseModel):
    """Coupon as configured by the establishment"""

    code: str = Field(..., min_length=1)
    discount_type: DiscountType
    value: Decimal = Decimal("0")
    minimum_order: Optional[Decimal] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    max_uses: Optional[int] = None
    uses: int = 0
    active: bool = True
    establishment_ids: List[str] = []


class QuoteRequest(BaseModel):
    """Request body for POST /v1/checkout/quote"""

    establishment_id: str = Field(..., min_length=1, description="Establishment identifier")
    fulfillment: FulfillmentMode = FulfillmentMode.DELIVERY
    neighborhood: Optional[str] = None
    delivery_zones: List[DeliveryZoneSchema] = []
    coupon: Optional[CouponSchema] = None
    lines: List[CartLineSchema] = Field(..., min_length=1)


class PricedLineSchema(BaseModel):
    name: str
    variation_name: Optional[str] = None
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    note: Optional[str] = None


class QuoteResponse(BaseModel):
    """Response for POST /v1/checkout/quote"""

    fulfillment: FulfillmentMode
    lines: List[PricedLineSchema]
    subtotal: Decimal
    delivery_fee: Decimal
    discount: Decimal
    total: Decimal
    total_display: str
    coupon_code: Optional[str] = None
    free_delivery: bool = False


class MerchantSchema(BaseModel):
    pix_key: str = ""
    display_name: str = ""
    city: str = ""


class ChargeRequest(QuoteRequest):
    """Request body for POST /v1/pix/charges"""

    order_id: str = Field(..., min_length=1, description="Order identifier, used as transaction id")
    merchant: MerchantSchema


class ChargeResponse(BaseModel):
    """Response for POST /v1/pix/charges and GET /v1/pix/charges/{charge_id}"""

    charge_id: str
    order_id: str
    transaction_id: str
    amount: Decimal
    amount_display: str
    subtotal: Decimal
    delivery_fee: Decimal
    discount: Decimal
    payload: str
    status: str
    created_at: Optional[str] = None

"""Domain models - pure Python dataclasses representing checkout entities"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class MerchantProfile:
    """PIX payment recipient, supplied from establishment configuration"""

    pix_key: str
    display_name: str
    city: str


@dataclass(frozen=True)
class PaymentRequest:
    """One checkout attempt to be encoded as a PIX payload"""

    amount: Decimal
    transaction_id: str = ""


@dataclass(frozen=True)
class Addon:
    """Add-on selected for a product (extra cheese, bacon...)"""

    name: str
    unit_price: Decimal


@dataclass
class CartLine:
    """One product selection in a cart"""

    base_name: str
    base_unit_price: Decimal  # variation price when a variation is selected
    quantity: int
    selected_addons: List[Addon] = field(default_factory=list)
    note: Optional[str] = None  # display only
    product_id: Optional[str] = None
    variation_name: Optional[str] = None
    line_id: Optional[str] = None


@dataclass
class PricedLine:
    """Per-line price breakdown"""

    line: CartLine
    unit_price: Decimal
    line_total: Decimal


@dataclass
class CartTotals:
    """Output of the pricing engine"""

    lines: List[PricedLine]
    subtotal: Decimal
    delivery_fee: Decimal
    discount: Decimal
    total: Decimal


class FulfillmentMode(str, Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"
    DINE_IN = "dine_in"


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    FREE_DELIVERY = "free_delivery"


@dataclass
class Coupon:
    """Promotional coupon as configured by the establishment"""

    code: str
    discount_type: DiscountType
    value: Decimal = Decimal("0")
    minimum_order: Optional[Decimal] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    max_uses: Optional[int] = None
    uses: int = 0
    active: bool = True
    establishment_ids: List[str] = field(default_factory=list)  # empty = every establishment


@dataclass(frozen=True)
class DeliveryZone:
    """Delivery fee for one neighborhood"""

    neighborhood: str
    fee: Decimal


@dataclass
class CouponOutcome:
    """What a coupon contributes to a specific order"""

    code: str
    discount: Decimal
    free_delivery: bool


@dataclass
class CheckoutQuote:
    """Priced order, ready to become a payment request"""

    totals: CartTotals
    fulfillment: FulfillmentMode
    coupon_code: Optional[str] = None
    free_delivery: bool = False

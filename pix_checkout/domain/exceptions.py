"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidCartLine(DomainException):
    """Cart line cannot be priced (quantity below 1)"""

    def __init__(self, message: str, line_index: int | None = None):
        super().__init__(message)
        self.line_index = line_index


class MissingMerchantKey(DomainException):
    """Merchant has no usable PIX key after sanitization"""

    pass


class InvalidPayloadError(DomainException):
    """BR Code string is not well-formed TLV"""

    pass


class CouponNotApplicable(DomainException):
    """Coupon exists but cannot be applied to this order"""

    def __init__(self, code: str, reason: str):
        super().__init__(f"Coupon {code} not applicable: {reason}")
        self.code = code
        self.reason = reason


class UnknownDeliveryZone(DomainException):
    """No delivery fee registered for the neighborhood"""

    pass

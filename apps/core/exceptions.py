"""
Custom exceptions for the Storeroom back office

Every error carries a stable machine-readable ``code`` and a human-readable
``message``; ``status_code`` is the HTTP status the API renders it with.
"""


class StoreException(Exception):
    """Base exception for all Storeroom errors"""
    status_code = 400

    def __init__(self, message: str, code: str = "STORE_ERROR", line: int = None):
        self.message = message
        self.code = code
        self.line = line
        super().__init__(self.message)

    def to_dict(self):
        details = {}
        if self.line is not None:
            details["line"] = self.line
        return details


class NotFound(StoreException):
    """A product, variation, coupon or order does not exist"""
    status_code = 404

    def __init__(self, resource: str, identifier=None, line: int = None, message: str = None):
        self.resource = resource
        self.identifier = identifier
        super().__init__(
            message=message or f"{resource} {identifier} not found",
            code="NOT_FOUND",
            line=line
        )


class NotAvailable(StoreException):
    """Record exists but is not purchasable (unpublished, hidden, inactive)"""
    def __init__(self, message: str, line: int = None):
        super().__init__(message=message, code="NOT_AVAILABLE", line=line)


class InsufficientStock(StoreException):
    """Requested quantity exceeds available stock"""
    status_code = 409

    def __init__(self, name: str, requested: int, available: int = None, line: int = None):
        self.name = name
        self.requested = requested
        self.available = available
        super().__init__(
            message=f"Insufficient stock for {name}",
            code="INSUFFICIENT_STOCK",
            line=line
        )

    def to_dict(self):
        details = super().to_dict()
        details["requested"] = self.requested
        if self.available is not None:
            details["available"] = self.available
        return details


class InvalidCoupon(StoreException):
    """Base class for coupon eligibility failures"""
    reason = "invalid"

    def __init__(self, message: str, coupon_code: str = None):
        self.coupon_code = coupon_code
        super().__init__(message=message, code=f"COUPON_{self.reason.upper()}")

    def to_dict(self):
        return {"coupon_code": self.coupon_code, "reason": self.reason}


class InvalidCouponCode(InvalidCoupon):
    reason = "invalid_code"

    def __init__(self, coupon_code: str = None):
        super().__init__("Invalid coupon code", coupon_code)


class CouponExpired(InvalidCoupon):
    reason = "expired"

    def __init__(self, coupon_code: str = None):
        super().__init__("Coupon has expired", coupon_code)


class CouponUsageLimitReached(InvalidCoupon):
    reason = "usage_limit_reached"

    def __init__(self, coupon_code: str = None):
        super().__init__("Coupon usage limit reached", coupon_code)


class CouponUsageLimitPerUserReached(InvalidCoupon):
    reason = "usage_limit_per_user_reached"

    def __init__(self, coupon_code: str = None):
        super().__init__("Coupon usage limit for this customer reached", coupon_code)


class CouponBelowMinSpend(InvalidCoupon):
    reason = "below_min_spend"

    def __init__(self, min_spend, coupon_code: str = None):
        self.min_spend = min_spend
        super().__init__(f"Minimum spend of {min_spend} required", coupon_code)


class CouponAboveMaxSpend(InvalidCoupon):
    reason = "above_max_spend"

    def __init__(self, max_spend, coupon_code: str = None):
        self.max_spend = max_spend
        super().__init__(f"Maximum spend of {max_spend} exceeded", coupon_code)


class CouponNotApplicable(InvalidCoupon):
    reason = "not_applicable"

    def __init__(self, coupon_code: str = None):
        super().__init__("Coupon does not apply to any product in the cart", coupon_code)


class EmptyCart(StoreException):
    def __init__(self):
        super().__init__(message="Cart is empty", code="EMPTY_CART")


class AddressRequired(StoreException):
    def __init__(self):
        super().__init__(
            message="Billing and shipping addresses are required",
            code="ADDRESS_REQUIRED"
        )


class InvalidStateTransition(StoreException):
    """Order status change not allowed by the lifecycle table"""
    status_code = 409

    def __init__(self, current: str, target: str, message: str = None):
        self.current = current
        self.target = target
        super().__init__(
            message=message or f"Cannot change order status from {current} to {target}",
            code="INVALID_STATE_TRANSITION"
        )

    def to_dict(self):
        return {"current": self.current, "target": self.target}


class NotPermitted(StoreException):
    status_code = 403

    def __init__(self, message: str = "Access denied"):
        super().__init__(message=message, code="NOT_PERMITTED")


class GenerationError(StoreException):
    """Variation generation cannot run for this product"""
    def __init__(self, message: str):
        super().__init__(message=message, code="GENERATION_ERROR")


class ValidationException(StoreException):
    """Exception raised for validation errors"""
    def __init__(self, message: str, field: str = None, line: int = None):
        self.field = field
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            line=line
        )

    def to_dict(self):
        details = super().to_dict()
        if self.field:
            details["field"] = self.field
        return details

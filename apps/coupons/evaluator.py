"""
Coupon Evaluator - eligibility checks and discount computation

Pure apart from the coupon lookup: nothing is mutated, so the evaluator is
safe to run at price preview and again at order creation. Usage is recorded
only by checkout.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from django.utils import timezone

from apps.core.exceptions import (
    CouponAboveMaxSpend,
    CouponBelowMinSpend,
    CouponExpired,
    CouponNotApplicable,
    CouponUsageLimitPerUserReached,
    CouponUsageLimitReached,
    InvalidCouponCode,
)
from apps.core.utils import to_money
from .models import Coupon

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CouponDiscount:
    coupon: Coupon
    amount_off: Decimal

    @property
    def code(self) -> str:
        return self.coupon.code


def normalize_code(code: str) -> str:
    return (code or '').strip().upper()


def find_coupon(code: str) -> Coupon:
    normalized = normalize_code(code)
    coupon = Coupon.objects.filter(code=normalized).first() if normalized else None
    if coupon is None:
        raise InvalidCouponCode(normalized or None)
    return coupon


def check_eligibility(coupon: Coupon, cart_subtotal: Decimal, customer_id=None, now=None):
    """
    Raise the first failing eligibility rule; spend thresholds use the whole
    cart subtotal.
    """
    now = now or timezone.now()

    if coupon.expiry_date and coupon.expiry_date < now:
        raise CouponExpired(coupon.code)

    if coupon.usage_limit is not None and coupon.usage_count >= coupon.usage_limit:
        raise CouponUsageLimitReached(coupon.code)

    if coupon.usage_limit_per_user is not None and customer_id:
        used = coupon.redemptions.filter(customer_id=customer_id).count()
        if used >= coupon.usage_limit_per_user:
            raise CouponUsageLimitPerUserReached(coupon.code)

    if coupon.min_spend is not None and cart_subtotal < coupon.min_spend:
        raise CouponBelowMinSpend(coupon.min_spend, coupon.code)

    if coupon.max_spend is not None and cart_subtotal > coupon.max_spend:
        raise CouponAboveMaxSpend(coupon.max_spend, coupon.code)


def eligible_subtotal(coupon: Coupon, cart_subtotal: Decimal, lines: Optional[Sequence] = None) -> Decimal:
    """
    Subtotal the discount applies to. Without product/category scoping (or
    without lines to check) this is the cart subtotal.
    """
    include_products = {str(pk) for pk in coupon.include_products.values_list('pk', flat=True)}
    exclude_products = {str(pk) for pk in coupon.exclude_products.values_list('pk', flat=True)}
    include_categories = set(coupon.include_categories.values_list('pk', flat=True))
    exclude_categories = set(coupon.exclude_categories.values_list('pk', flat=True))

    scoped = include_products or exclude_products or include_categories or exclude_categories
    if not scoped or lines is None:
        return cart_subtotal

    from apps.catalog.models import Product

    product_ids = {str(line.product_id) for line in lines}
    categories_by_product = {}
    through = Product.categories.through.objects.filter(product_id__in=product_ids)
    for product_id, category_id in through.values_list('product_id', 'category_id'):
        categories_by_product.setdefault(str(product_id), set()).add(category_id)

    base = Decimal('0')
    matched = False
    for line in lines:
        product_id = str(line.product_id)
        categories = categories_by_product.get(product_id, set())
        if include_products and product_id not in include_products:
            continue
        if include_categories and not categories & include_categories:
            continue
        if product_id in exclude_products or categories & exclude_categories:
            continue
        matched = True
        base += line.subtotal

    if not matched:
        raise CouponNotApplicable(coupon.code)
    return base


def compute_discount(coupon: Coupon, base: Decimal) -> Decimal:
    if coupon.type == 'percent':
        return to_money(min(base * coupon.amount / Decimal('100'), base))
    # fixed_cart never exceeds what it applies to
    return to_money(min(coupon.amount, base))


def evaluate(code: str, cart_subtotal, customer_id=None, lines: Optional[Sequence] = None, now=None) -> CouponDiscount:
    """
    Validate ``code`` against a cart subtotal and return the amount off.
    Raises an InvalidCoupon subtype on the first failed rule.
    """
    cart_subtotal = to_money(cart_subtotal)
    coupon = find_coupon(code)
    check_eligibility(coupon, cart_subtotal, customer_id=customer_id, now=now)
    base = eligible_subtotal(coupon, cart_subtotal, lines)
    amount_off = compute_discount(coupon, base)

    logger.debug(f"Coupon {coupon.code} evaluated: subtotal={cart_subtotal}, base={base}, off={amount_off}")
    return CouponDiscount(coupon=coupon, amount_off=amount_off)

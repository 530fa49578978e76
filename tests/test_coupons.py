"""Tests for coupon eligibility and discount computation."""

from datetime import timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
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
from apps.coupons import evaluator
from apps.coupons.models import Coupon, CouponRedemption
from apps.orders.models import Order

pytestmark = pytest.mark.django_db


def line(product, subtotal):
    return SimpleNamespace(product_id=str(product.id), subtotal=Decimal(subtotal))


def make_order(number, customer=None):
    return Order.objects.create(
        number=number,
        customer=customer,
        customer_email="buyer@example.com",
        customer_name="Buyer",
        billing_address={},
        shipping_address={},
        subtotal=Decimal("10.00"),
        grand_total=Decimal("10.00"),
        shipping_method="Standard Shipping",
        payment_provider="cod",
        payment_method_title="Cash on Delivery",
    )


class TestLookup:
    def test_code_is_case_insensitive(self, make_coupon):
        make_coupon(code="summer")
        assert Coupon.objects.get().code == "SUMMER"
        assert evaluator.evaluate("  Summer ", Decimal("100")).code == "SUMMER"

    @pytest.mark.parametrize("code", ["NOPE", "", None])
    def test_unknown_code(self, code):
        with pytest.raises(InvalidCouponCode) as exc_info:
            evaluator.evaluate(code, Decimal("100"))
        assert exc_info.value.code == "COUPON_INVALID_CODE"


class TestEligibility:
    def test_expired(self, make_coupon):
        make_coupon(code="OLD", expiry_date=timezone.now() - timedelta(minutes=1))
        with pytest.raises(CouponExpired):
            evaluator.evaluate("OLD", Decimal("100"))

    def test_future_expiry_is_fine(self, make_coupon):
        make_coupon(code="NEW", expiry_date=timezone.now() + timedelta(days=1))
        assert evaluator.evaluate("NEW", Decimal("100")).amount_off == Decimal("20.00")

    def test_global_usage_limit(self, make_coupon):
        make_coupon(code="LIMITED", usage_limit=2, usage_count=2)
        with pytest.raises(CouponUsageLimitReached):
            evaluator.evaluate("LIMITED", Decimal("100"))

    def test_under_usage_limit(self, make_coupon):
        make_coupon(code="LIMITED", usage_limit=2, usage_count=1)
        assert evaluator.evaluate("LIMITED", Decimal("100")).amount_off == Decimal("20.00")

    def test_per_user_limit(self, make_coupon, customer):
        coupon = make_coupon(code="ONCE", usage_limit_per_user=1)
        CouponRedemption.objects.create(coupon=coupon, customer=customer, order=make_order("#1"))

        with pytest.raises(CouponUsageLimitPerUserReached):
            evaluator.evaluate("ONCE", Decimal("100"), customer_id=customer.id)

        # Guests and other customers are unaffected
        assert evaluator.evaluate("ONCE", Decimal("100")).amount_off == Decimal("20.00")

    def test_min_spend_boundary(self, make_coupon):
        make_coupon(code="MIN", min_spend=Decimal("50"))
        assert evaluator.evaluate("MIN", Decimal("50.00")).amount_off == Decimal("10.00")
        with pytest.raises(CouponBelowMinSpend) as exc_info:
            evaluator.evaluate("MIN", Decimal("49.99"))
        assert exc_info.value.to_dict() == {"coupon_code": "MIN", "reason": "below_min_spend"}

    def test_max_spend_boundary(self, make_coupon):
        make_coupon(code="MAX", max_spend=Decimal("200"))
        assert evaluator.evaluate("MAX", Decimal("200")).amount_off == Decimal("40.00")
        with pytest.raises(CouponAboveMaxSpend):
            evaluator.evaluate("MAX", Decimal("200.01"))

    def test_expiry_is_checked_before_spend(self, make_coupon):
        make_coupon(code="BOTH", min_spend=Decimal("500"), expiry_date=timezone.now() - timedelta(days=1))
        with pytest.raises(CouponExpired):
            evaluator.evaluate("BOTH", Decimal("10"))


class TestDiscount:
    def test_percent_rounds_half_up(self, make_coupon):
        make_coupon(code="P15", type="percent", amount=Decimal("15"))
        assert evaluator.evaluate("P15", Decimal("33.30")).amount_off == Decimal("5.00")
        assert evaluator.evaluate("P15", Decimal("10.10")).amount_off == Decimal("1.52")

    def test_percent_capped_at_subtotal(self, make_coupon):
        make_coupon(code="P150", type="percent", amount=Decimal("150"))
        assert evaluator.evaluate("P150", Decimal("40")).amount_off == Decimal("40.00")

    @pytest.mark.parametrize("subtotal,expected", [
        ("100.00", "20.00"),
        ("20.00", "20.00"),
        ("12.34", "12.34"),
        ("0", "0.00"),
    ])
    def test_fixed_cart_bounded_by_subtotal(self, make_coupon, subtotal, expected):
        make_coupon(code="FIX20", type="fixed_cart", amount=Decimal("20"))
        assert evaluator.evaluate("FIX20", Decimal(subtotal)).amount_off == Decimal(expected)

    def test_evaluation_does_not_mutate(self, make_coupon):
        coupon = make_coupon(code="PURE", usage_limit=5)
        for _ in range(3):
            evaluator.evaluate("PURE", Decimal("100"))
        coupon.refresh_from_db()
        assert coupon.usage_count == 0
        assert not coupon.redemptions.exists()


class TestScoping:
    def test_include_products_limits_base(self, make_coupon, make_product):
        shirt = make_product()
        mug = make_product()
        coupon = make_coupon(code="SHIRTS", type="percent", amount=Decimal("50"))
        coupon.include_products.add(shirt)

        discount = evaluator.evaluate(
            "SHIRTS", Decimal("60"), lines=[line(shirt, "40.00"), line(mug, "20.00")]
        )
        assert discount.amount_off == Decimal("20.00")

    def test_exclude_category(self, make_coupon, make_product, category):
        shirt = make_product(categories=[category])
        mug = make_product()
        coupon = make_coupon(code="NOCLOTHES", type="fixed_cart", amount=Decimal("50"))
        coupon.exclude_categories.add(category)

        discount = evaluator.evaluate(
            "NOCLOTHES", Decimal("60"), lines=[line(shirt, "40.00"), line(mug, "20.00")]
        )
        assert discount.amount_off == Decimal("20.00")

    def test_include_category(self, make_coupon, make_product, category):
        shirt = make_product(categories=[category])
        mug = make_product()
        coupon = make_coupon(code="CLOTHES", type="percent", amount=Decimal("10"))
        coupon.include_categories.add(category)

        discount = evaluator.evaluate(
            "CLOTHES", Decimal("60"), lines=[line(shirt, "40.00"), line(mug, "20.00")]
        )
        assert discount.amount_off == Decimal("4.00")

    def test_no_eligible_lines(self, make_coupon, make_product):
        shirt = make_product()
        mug = make_product()
        coupon = make_coupon(code="SHIRTS")
        coupon.include_products.add(shirt)

        with pytest.raises(CouponNotApplicable):
            evaluator.evaluate("SHIRTS", Decimal("20"), lines=[line(mug, "20.00")])

    def test_unscoped_coupon_uses_cart_subtotal(self, make_coupon, make_product):
        make_coupon(code="ALL", type="percent", amount=Decimal("10"))
        mug = make_product()
        discount = evaluator.evaluate("ALL", Decimal("20"), lines=[line(mug, "20.00")])
        assert discount.amount_off == Decimal("2.00")


class TestUsedBy:
    def test_groups_orders_per_customer(self, make_coupon, customer):
        coupon = make_coupon(code="MULTI")
        first = make_order("#1", customer)
        second = make_order("#2", customer)
        guest = make_order("#3")
        for order in (first, second):
            CouponRedemption.objects.create(coupon=coupon, customer=customer, order=order)
        CouponRedemption.objects.create(coupon=coupon, order=guest)

        assert coupon.used_by == [
            {"customer_id": str(customer.id), "order_ids": [str(first.id), str(second.id)]}
        ]

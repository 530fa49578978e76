"""
Checkout / Order Creator

Converts a cart into a persisted Order. The cart is re-priced inside the
same transaction that writes the order, so the preview price is advisory.
Stock, coupon usage and customer aggregates are updated with conditional
UPDATE statements; if any of them fails the whole order is rolled back.
"""
import logging
from typing import Dict, Optional, Sequence

from django.conf import settings
from django.db import transaction
from django.db.models import F, Q

from apps.cart.pricing import Cart, PricedLine, price_cart
from apps.catalog.models import Product, Variation
from apps.core.exceptions import (
    AddressRequired,
    CouponUsageLimitPerUserReached,
    CouponUsageLimitReached,
    EmptyCart,
    InsufficientStock,
)
from apps.core.identity import Identity
from apps.core.utils import full_name, generate_order_number, to_money
from apps.coupons.models import Coupon, CouponRedemption
from apps.customers.models import Customer
from apps.orders.models import Order, OrderEvent, OrderItem, OrderNote

logger = logging.getLogger(__name__)

PAYMENT_TITLES = {
    'cod': 'Cash on Delivery',
}


def _unique_order_number(attempts: int = 5) -> str:
    for _ in range(attempts):
        number = generate_order_number()
        if not Order.objects.filter(number=number).exists():
            return number
    return generate_order_number()


def _resolve_customer(identity: Optional[Identity], billing_address: Dict):
    """
    Authenticated callers use their profile; everyone else checks out as a
    guest named after the billing address.
    """
    customer = None
    if identity is not None and identity.id:
        customer = Customer.objects.filter(pk=identity.id).first()

    if customer is not None:
        return customer, customer.email, customer.name

    email = billing_address.get('email') or settings.STORE_CONFIG['guest_email']
    return None, email, full_name(billing_address)


def _reserve_stock(index: int, item: PricedLine):
    """Decrement stock iff enough remains; flag out-of-stock at zero."""
    model = Variation if item.variation_id else Product
    pk = item.variation_id or item.product_id

    updated = (
        model.objects
        .filter(pk=pk, stock_qty__gte=item.qty)
        .update(stock_qty=F('stock_qty') - item.qty)
    )
    if not updated:
        available = model.objects.filter(pk=pk).values_list('stock_qty', flat=True).first()
        logger.warning(f"Stock conflict for {item.name}: wanted {item.qty}, have {available}")
        raise InsufficientStock(item.name, item.qty, available or 0, line=index)

    model.objects.filter(pk=pk, stock_qty=0).update(stock_status='out_of_stock')


def _redeem_coupon(cart: Cart, order: Order, customer: Optional[Customer]):
    """Count one use iff the coupon is still under its global and per-customer limits."""
    coupon = Coupon.objects.select_for_update().get(pk=cart.coupon.pk)

    if coupon.usage_limit_per_user is not None and customer is not None:
        used = coupon.redemptions.filter(customer=customer).count()
        if used >= coupon.usage_limit_per_user:
            logger.warning(f"Coupon {coupon.code} hit the per-customer limit for {customer.id} during checkout")
            raise CouponUsageLimitPerUserReached(coupon.code)

    updated = (
        Coupon.objects
        .filter(pk=coupon.pk)
        .filter(Q(usage_limit__isnull=True) | Q(usage_count__lt=F('usage_limit')))
        .update(usage_count=F('usage_count') + 1)
    )
    if not updated:
        logger.warning(f"Coupon {coupon.code} hit its usage limit during checkout")
        raise CouponUsageLimitReached(coupon.code)

    CouponRedemption.objects.create(
        coupon=coupon,
        customer=customer,
        order=order,
        discount_amount=cart.discount_total,
    )


def _update_customer_stats(customer: Customer, grand_total):
    Customer.objects.filter(pk=customer.pk).update(
        orders_count=F('orders_count') + 1,
        total_spend=F('total_spend') + grand_total,
    )
    locked = Customer.objects.select_for_update().get(pk=customer.pk)
    if locked.orders_count > 0:
        locked.avg_order_value = to_money(locked.total_spend / locked.orders_count)
        locked.save(update_fields=['avg_order_value', 'updated_at'])


def create_order(
    lines: Sequence,
    billing_address: Optional[Dict],
    shipping_address: Optional[Dict],
    shipping_method_id: Optional[str] = None,
    payment_method_id: Optional[str] = None,
    coupon_code: Optional[str] = None,
    customer_notes: Optional[str] = None,
    identity: Optional[Identity] = None,
    attribution: Optional[Dict] = None,
) -> Order:
    """
    Create an order from ``lines``. Either the order, its items, stock
    reservation, coupon usage and customer aggregates all commit, or nothing
    does.
    """
    if not lines:
        raise EmptyCart()
    if not billing_address or not shipping_address:
        raise AddressRequired()

    provider = payment_method_id or settings.STORE_CONFIG['default_payment_provider']

    with transaction.atomic():
        cart = price_cart(lines, coupon_code=coupon_code, identity=identity)
        customer, customer_email, customer_name = _resolve_customer(identity, billing_address)

        order = Order.objects.create(
            number=_unique_order_number(),
            status='pending_payment',
            customer=customer,
            customer_email=customer_email,
            customer_name=customer_name,
            billing_address=dict(billing_address),
            shipping_address=dict(shipping_address),
            subtotal=cart.subtotal,
            discount_total=cart.discount_total,
            shipping_total=cart.shipping_total,
            tax_total=cart.tax_total,
            grand_total=cart.grand_total,
            coupon_codes=[cart.coupon_code] if cart.coupon_code else [],
            discounts=(
                [{"coupon_code": cart.coupon_code, "amount": str(cart.discount_total)}]
                if cart.coupon_code else []
            ),
            shipping_method=settings.STORE_CONFIG['default_shipping_method'],
            shipping_method_id=shipping_method_id,
            shipping_cost=cart.shipping_total,
            payment_provider=provider,
            payment_method_title=PAYMENT_TITLES.get(provider, 'Online Payment'),
            payment_status='pending',
            attribution=attribution,
        )

        OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                product_id=item.product_id,
                variation_id=item.variation_id,
                position=position,
                name_snapshot=item.name,
                sku_snapshot=item.sku,
                price=item.price,
                qty=item.qty,
                subtotal=item.subtotal,
                total=item.subtotal,
            )
            for position, item in enumerate(cart.items)
        ])

        OrderEvent.objects.create(order=order, type='status_change', description='Order created')

        if customer_notes:
            OrderNote.objects.create(
                order=order,
                content=customer_notes,
                is_customer_note=True,
                created_by=customer,
            )
            OrderEvent.objects.create(order=order, type='note', description='Customer note added', actor=customer)

        if settings.STORE_CONFIG.get('decrement_stock_on_checkout', True):
            for index, item in enumerate(cart.items):
                if item.manages_stock:
                    _reserve_stock(index, item)

        if cart.coupon is not None:
            _redeem_coupon(cart, order, customer)

        if customer is not None:
            _update_customer_stats(customer, cart.grand_total)

    logger.info(
        f"Order {order.number} created: {len(cart.items)} items, grand_total={cart.grand_total}, "
        f"coupon={cart.coupon_code}, customer={'guest' if customer is None else customer.id}"
    )
    return order

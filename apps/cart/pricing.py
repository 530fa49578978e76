"""
Cart Pricing Engine

Turns (product, variation, qty) lines into priced line items and totals,
optionally folding in one coupon. Carts are never stored: every call
recomputes from the current catalog and coupon state, and any failing line
aborts the whole call with an error carrying that line's index.
"""
import logging
from dataclasses import dataclass, field, asdict
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from django.conf import settings
from django.utils import timezone

from apps.catalog.lookup import CatalogLookup, catalog
from apps.catalog.models import Product, Variation
from apps.core.exceptions import (
    InsufficientStock,
    NotAvailable,
    NotFound,
    StoreException,
    ValidationException,
)
from apps.core.identity import Identity
from apps.core.utils import ZERO, to_money
from apps.coupons import evaluator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartLineInput:
    """One line submitted for pricing."""
    product_id: Any
    qty: int = 1
    variation_id: Any = None

    @classmethod
    def from_dict(cls, data: Dict) -> "CartLineInput":
        return cls(
            product_id=data.get('product_id'),
            qty=data.get('qty', 1),
            variation_id=data.get('variation_id'),
        )


@dataclass(frozen=True)
class PricedLine:
    product_id: str
    variation_id: Optional[str]
    name: str
    sku: Optional[str]
    price: Decimal
    qty: int
    subtotal: Decimal
    image: Optional[str] = None
    # Stock bookkeeping for checkout, not part of the cart payload
    manages_stock: bool = field(default=False, repr=False, compare=False)


@dataclass(frozen=True)
class Cart:
    items: List[PricedLine]
    subtotal: Decimal
    discount_total: Decimal
    shipping_total: Decimal
    tax_total: Decimal
    grand_total: Decimal
    coupon_code: Optional[str] = None
    coupon: Any = field(default=None, repr=False, compare=False)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def to_dict(self) -> Dict[str, Any]:
        items = []
        for item in self.items:
            data = asdict(item)
            data.pop('manages_stock', None)
            items.append(data)
        return {
            "items": items,
            "subtotal": self.subtotal,
            "discount_total": self.discount_total,
            "shipping_total": self.shipping_total,
            "tax_total": self.tax_total,
            "grand_total": self.grand_total,
            "coupon_code": self.coupon_code,
        }


def empty_cart() -> Cart:
    return Cart(items=[], subtotal=ZERO, discount_total=ZERO, shipping_total=ZERO, tax_total=ZERO, grand_total=ZERO)


def _coerce_line(line) -> CartLineInput:
    return line if isinstance(line, CartLineInput) else CartLineInput.from_dict(line)


def _check_available(product: Product, identity: Optional[Identity], index: int):
    """
    Customers need published + visible products. Staff skip the visibility
    check and may buy private products; drafts are never purchasable.
    """
    if identity is not None and identity.is_staff:
        if product.status == 'draft':
            raise NotAvailable(f"Product {product.id} is not available", line=index)
        return
    if not product.is_visible_to_customers:
        raise NotAvailable(f"Product {product.id} is not available", line=index)


def _resolve_variation(product: Product, variation_id, lookup: CatalogLookup, index: int) -> Variation:
    if not product.is_variable:
        raise NotAvailable("Variation ID provided for non-variable product", line=index)

    try:
        variation = lookup.get_variation(variation_id, line=index)
    except NotFound:
        raise NotFound("Variation", variation_id, line=index, message="Variation not found for this product")
    if variation.product_id != product.pk:
        raise NotFound("Variation", variation_id, line=index, message="Variation not found for this product")
    if not variation.is_active:
        raise NotAvailable("Variation is not active", line=index)
    return variation


def price_line(
    index: int,
    line: CartLineInput,
    identity: Optional[Identity] = None,
    lookup: CatalogLookup = catalog,
    now=None,
    already_requested: int = 0,
) -> PricedLine:
    """
    Price one cart line. ``already_requested`` is the quantity of the same
    product or variation asked for by earlier lines of the cart.
    """
    qty = line.qty
    if not isinstance(qty, int) or isinstance(qty, bool) or qty < 1:
        raise ValidationException("Quantity must be a positive integer", field='qty', line=index)

    product = lookup.get_product(line.product_id, line=index)
    _check_available(product, identity, index)

    enforce_window = settings.STORE_CONFIG.get('enforce_sale_window', False)
    source = product
    name = product.title
    image = product.featured_image
    variation = None

    if line.variation_id:
        variation = _resolve_variation(product, line.variation_id, lookup, index)
        source = variation
        name = f"{product.title} - {variation.label}"
        image = variation.image or product.featured_image

    if product.manage_stock:
        available = source.stock_qty or 0
        if available < already_requested + qty:
            raise InsufficientStock(name, already_requested + qty, available, line=index)

    price = to_money(source.unit_price(enforce_sale_window=enforce_window, now=now))
    return PricedLine(
        product_id=str(product.pk),
        variation_id=str(variation.pk) if variation else None,
        name=name,
        sku=source.sku,
        price=price,
        qty=qty,
        subtotal=to_money(price * qty),
        image=image,
        manages_stock=product.manage_stock,
    )


def price_cart(
    lines: Sequence,
    coupon_code: Optional[str] = None,
    identity: Optional[Identity] = None,
    lookup: CatalogLookup = catalog,
    now=None,
) -> Cart:
    """
    Price ``lines`` and apply ``coupon_code`` if given.

    Shipping and tax are always zero; the grand total is
    ``subtotal - discount_total + shipping_total + tax_total``.
    """
    now = now or timezone.now()
    items = []
    subtotal = ZERO

    requested: Dict[Tuple[str, Optional[str]], int] = {}

    try:
        for index, line in enumerate(lines):
            line = _coerce_line(line)
            key = (str(line.product_id).lower(), str(line.variation_id).lower() if line.variation_id else None)
            priced = price_line(
                index, line, identity=identity, lookup=lookup, now=now,
                already_requested=requested.get(key, 0),
            )
            requested[key] = requested.get(key, 0) + priced.qty
            subtotal += priced.subtotal
            items.append(priced)
    except StoreException as e:
        logger.info(f"Pricing failed at line {e.line}: {e.message}")
        raise

    discount_total = ZERO
    applied_code = None
    coupon = None
    if coupon_code:
        customer_id = identity.id if identity else None
        discount = evaluator.evaluate(coupon_code, subtotal, customer_id=customer_id, lines=items, now=now)
        discount_total = discount.amount_off
        applied_code = discount.code
        coupon = discount.coupon

    shipping_total = ZERO
    tax_total = ZERO
    grand_total = to_money(subtotal - discount_total + shipping_total + tax_total)

    return Cart(
        items=items,
        subtotal=to_money(subtotal),
        discount_total=discount_total,
        shipping_total=shipping_total,
        tax_total=tax_total,
        grand_total=grand_total,
        coupon_code=applied_code,
        coupon=coupon,
    )


def validate_coupon(code: str, lines: Sequence, identity: Optional[Identity] = None, lookup: CatalogLookup = catalog) -> Dict[str, Any]:
    """
    Standalone coupon check against the priced subtotal of ``lines``.
    """
    cart = price_cart(lines, identity=identity, lookup=lookup) if lines else empty_cart()
    customer_id = identity.id if identity else None
    discount = evaluator.evaluate(code, cart.subtotal, customer_id=customer_id, lines=cart.items)
    coupon = discount.coupon
    return {
        "code": coupon.code,
        "type": coupon.type,
        "amount": coupon.amount,
        "description": coupon.description,
        "amount_off": discount.amount_off,
    }

"""
API Serializers for Request/Response handling
"""
from rest_framework import serializers

from apps.catalog.models import Variation
from apps.orders.lifecycle import TRANSITIONS
from apps.orders.models import Order, OrderEvent, OrderItem, OrderNote


class CartLineSerializer(serializers.Serializer):
    """
    One cart line: product, optional variation, quantity.
    """
    product_id = serializers.UUIDField(help_text="Product to buy")
    variation_id = serializers.UUIDField(
        required=False,
        allow_null=True,
        help_text="Variation of a variable product (optional)"
    )
    qty = serializers.IntegerField(min_value=1, default=1)


class PriceCartRequestSerializer(serializers.Serializer):
    """
    Request serializer for cart pricing.
    """
    lines = CartLineSerializer(many=True, required=False, default=list)
    coupon_code = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        max_length=50,
        help_text="Coupon code to apply (case-insensitive)"
    )


class ApplyCouponRequestSerializer(PriceCartRequestSerializer):
    coupon_code = serializers.CharField(max_length=50, help_text="Coupon code to apply")


class ValidateCouponRequestSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)
    lines = CartLineSerializer(many=True, required=False, default=list)


class PricedLineSerializer(serializers.Serializer):
    product_id = serializers.CharField()
    variation_id = serializers.CharField(allow_null=True)
    name = serializers.CharField()
    sku = serializers.CharField(allow_null=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    qty = serializers.IntegerField()
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    image = serializers.CharField(allow_null=True)


class CartSerializer(serializers.Serializer):
    """
    Response serializer for a priced cart.
    """
    items = PricedLineSerializer(many=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    discount_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    shipping_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    tax_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    grand_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    coupon_code = serializers.CharField(allow_null=True)


class CouponSummarySerializer(serializers.Serializer):
    code = serializers.CharField()
    type = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    description = serializers.CharField(allow_null=True)
    amount_off = serializers.DecimalField(max_digits=12, decimal_places=2)


class AddressSerializer(serializers.Serializer):
    """
    Billing/shipping address copied onto the order.
    """
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    company = serializers.CharField(max_length=255, required=False, allow_blank=True)
    address1 = serializers.CharField(max_length=255)
    address2 = serializers.CharField(max_length=255, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True)
    postcode = serializers.CharField(max_length=20)
    country = serializers.CharField(min_length=2, max_length=100)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    email = serializers.EmailField(required=False)


class CreateOrderRequestSerializer(serializers.Serializer):
    """
    Request serializer for order creation. Empty carts and missing addresses
    are reported by checkout itself.
    """
    lines = CartLineSerializer(many=True, required=False, default=list)
    billing_address = AddressSerializer(required=False, allow_null=True)
    shipping_address = AddressSerializer(required=False, allow_null=True)
    shipping_method_id = serializers.CharField(max_length=100)
    payment_method_id = serializers.CharField(max_length=100)
    coupon_code = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=50)
    customer_notes = serializers.CharField(required=False, allow_blank=True, max_length=2000)
    attribution = serializers.DictField(required=False, allow_null=True)


class UpdateOrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=list(TRANSITIONS))


class AddOrderNoteSerializer(serializers.Serializer):
    content = serializers.CharField(max_length=5000)
    is_customer_note = serializers.BooleanField(required=False, default=False)


class RefundRequestSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=500)


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = [
            'id', 'product', 'variation', 'name_snapshot', 'sku_snapshot',
            'price', 'qty', 'subtotal', 'total',
        ]


class OrderNoteSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderNote
        fields = ['id', 'content', 'is_customer_note', 'created_by', 'created_at']


class OrderEventSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderEvent
        fields = ['id', 'type', 'description', 'actor', 'created_at']


class OrderSerializer(serializers.ModelSerializer):
    """
    Full order with items, notes and audit events.
    """
    items = OrderItemSerializer(many=True, read_only=True)
    notes = OrderNoteSerializer(many=True, read_only=True)
    events = OrderEventSerializer(many=True, read_only=True)
    payment = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'number', 'status', 'customer', 'customer_email', 'customer_name',
            'billing_address', 'shipping_address', 'items',
            'subtotal', 'discount_total', 'shipping_total', 'tax_total', 'grand_total',
            'coupon_codes', 'discounts', 'shipping_method', 'shipping_method_id', 'shipping_cost',
            'payment', 'attribution', 'notes', 'events',
            'created_at', 'updated_at', 'completed_at',
        ]
        read_only_fields = fields

    def get_payment(self, obj):
        return {
            "provider": obj.payment_provider,
            "method_title": obj.payment_method_title,
            "transaction_id": obj.payment_transaction_id,
            "status": obj.payment_status,
            "paid_at": obj.paid_at,
        }


class OrderSummarySerializer(serializers.ModelSerializer):
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'number', 'status', 'customer', 'customer_email', 'customer_name',
            'grand_total', 'payment_status', 'item_count', 'created_at',
        ]
        read_only_fields = fields

    def get_item_count(self, obj):
        return sum(item.qty for item in obj.items.all())


class VariationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Variation
        fields = [
            'id', 'product', 'sku', 'image', 'regular_price', 'sale_price', 'sale_start', 'sale_end',
            'stock_qty', 'stock_status', 'description', 'attribute_selections', 'status',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'product', 'created_at', 'updated_at']
        extra_kwargs = {
            'regular_price': {'required': False},
        }

    def validate_attribute_selections(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Must be an object of attribute name to value")
        return {str(k): str(v) for k, v in value.items()}


class GenerateVariationsRequestSerializer(serializers.Serializer):
    strategy = serializers.ChoiceField(
        choices=['replace', 'sync'],
        required=False,
        allow_null=True,
        help_text="replace (delete all, recreate) or sync (keep surviving combinations)"
    )


class HealthCheckSerializer(serializers.Serializer):
    """
    Response serializer for health check.
    """
    status = serializers.CharField()
    version = serializers.CharField()
    database = serializers.CharField()

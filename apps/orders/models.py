"""
Order Models - durable record of a completed checkout
Tables: Orders, OrderItems, OrderNotes, OrderEvents

Items and totals are written once at checkout. Afterwards an order only
changes status or gains notes and events.
"""
from django.db import models
from apps.core.models import BaseModel, TimestampedModel


class Order(BaseModel):
    """
    Customer order. Addresses and item data are copies, not references.
    """
    STATUS_CHOICES = [
        ('pending_payment', 'Pending Payment'),
        ('processing', 'Processing'),
        ('on_hold', 'On Hold'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
        ('refunded', 'Refunded'),
        ('failed', 'Failed'),
    ]

    PAYMENT_STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('completed', 'Completed'),
        ('failed', 'Failed'),
        ('refunded', 'Refunded'),
    ]

    number = models.CharField(max_length=20, unique=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending_payment', db_index=True)
    customer = models.ForeignKey(
        'customers.Customer',
        on_delete=models.SET_NULL,
        related_name='orders',
        blank=True,
        null=True
    )
    customer_email = models.EmailField(db_index=True)
    customer_name = models.CharField(max_length=255)
    billing_address = models.JSONField()
    shipping_address = models.JSONField()

    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    discount_total = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    shipping_total = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    tax_total = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    grand_total = models.DecimalField(max_digits=12, decimal_places=2)
    coupon_codes = models.JSONField(default=list, blank=True)
    discounts = models.JSONField(default=list, blank=True)

    shipping_method = models.CharField(max_length=100)
    shipping_method_id = models.CharField(max_length=100, blank=True, null=True)
    shipping_cost = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    payment_provider = models.CharField(max_length=50)
    payment_method_title = models.CharField(max_length=100)
    payment_transaction_id = models.CharField(max_length=100, blank=True, null=True)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default='pending')
    paid_at = models.DateTimeField(blank=True, null=True)

    attribution = models.JSONField(blank=True, null=True)
    completed_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        db_table = 'orders'
        verbose_name = 'Order'
        verbose_name_plural = 'Orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['customer', 'created_at'], name='orders_custome_8d1b2e_idx'),
            models.Index(fields=['status', 'created_at'], name='orders_status_3a7c4f_idx'),
        ]

    def __str__(self):
        return f"Order {self.number} - {self.customer_name}"


class OrderItem(BaseModel):
    """
    Frozen snapshot of one priced cart line.
    """
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.SET_NULL,
        related_name='order_items',
        blank=True,
        null=True
    )
    variation = models.ForeignKey(
        'catalog.Variation',
        on_delete=models.SET_NULL,
        related_name='order_items',
        blank=True,
        null=True
    )
    position = models.PositiveIntegerField(default=0)
    name_snapshot = models.CharField(max_length=500)
    sku_snapshot = models.CharField(max_length=64, blank=True, null=True)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    qty = models.PositiveIntegerField()
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    total = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        db_table = 'order_items'
        ordering = ['position']

    def __str__(self):
        return f"{self.qty} x {self.name_snapshot}"


class OrderNote(TimestampedModel):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='notes')
    content = models.TextField()
    is_customer_note = models.BooleanField(default=False)
    created_by = models.ForeignKey(
        'customers.Customer',
        on_delete=models.SET_NULL,
        related_name='+',
        blank=True,
        null=True
    )

    class Meta:
        db_table = 'order_notes'
        ordering = ['id']

    def __str__(self):
        kind = 'customer' if self.is_customer_note else 'internal'
        return f"[{kind}] {self.content[:50]}"


class OrderEvent(TimestampedModel):
    """
    Audit trail entry: status changes, payments, notes, emails.
    """
    TYPE_CHOICES = [
        ('status_change', 'Status Change'),
        ('payment', 'Payment'),
        ('note', 'Note'),
        ('email_sent', 'Email Sent'),
    ]

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='events')
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    description = models.CharField(max_length=500)
    actor = models.ForeignKey(
        'customers.Customer',
        on_delete=models.SET_NULL,
        related_name='+',
        blank=True,
        null=True
    )

    class Meta:
        db_table = 'order_events'
        ordering = ['id']

    def __str__(self):
        return f"{self.type}: {self.description}"

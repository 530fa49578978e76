"""
Coupon Models - discount rules and their redemptions
"""
from collections import OrderedDict

from django.core.validators import MinValueValidator
from django.db import models
from apps.core.models import BaseModel


class Coupon(BaseModel):
    """
    Discount rule redeemed by code (stored upper case).
    """
    TYPE_CHOICES = [
        ('percent', 'Percentage discount'),
        ('fixed_cart', 'Fixed cart discount'),
    ]

    code = models.CharField(max_length=50, unique=True)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    description = models.CharField(max_length=255, blank=True, null=True)
    expiry_date = models.DateTimeField(blank=True, null=True, db_index=True)
    usage_limit = models.PositiveIntegerField(blank=True, null=True, validators=[MinValueValidator(1)])
    usage_limit_per_user = models.PositiveIntegerField(blank=True, null=True, validators=[MinValueValidator(1)])
    min_spend = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    max_spend = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    include_products = models.ManyToManyField('catalog.Product', related_name='+', blank=True)
    exclude_products = models.ManyToManyField('catalog.Product', related_name='+', blank=True)
    include_categories = models.ManyToManyField('catalog.Category', related_name='+', blank=True)
    exclude_categories = models.ManyToManyField('catalog.Category', related_name='+', blank=True)
    usage_count = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'coupons'
        verbose_name = 'Coupon'
        verbose_name_plural = 'Coupons'

    def __str__(self):
        return self.code

    def save(self, *args, **kwargs):
        self.code = self.code.strip().upper()
        super().save(*args, **kwargs)

    @property
    def used_by(self):
        """
        Customer redemptions grouped as ``[{customer_id, order_ids}]`` in
        first-redemption order.
        """
        grouped = OrderedDict()
        redemptions = self.redemptions.filter(customer__isnull=False).order_by('created_at')
        for customer_id, order_id in redemptions.values_list('customer_id', 'order_id'):
            grouped.setdefault(str(customer_id), []).append(str(order_id))
        return [
            {"customer_id": customer_id, "order_ids": order_ids}
            for customer_id, order_ids in grouped.items()
        ]


class CouponRedemption(BaseModel):
    """
    One use of a coupon, attributable to exactly one order.
    """
    coupon = models.ForeignKey(Coupon, on_delete=models.CASCADE, related_name='redemptions')
    customer = models.ForeignKey(
        'customers.Customer',
        on_delete=models.SET_NULL,
        related_name='coupon_redemptions',
        blank=True,
        null=True
    )
    order = models.ForeignKey('orders.Order', on_delete=models.CASCADE, related_name='coupon_redemptions')
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    class Meta:
        db_table = 'coupon_redemptions'
        verbose_name = 'Coupon Redemption'
        verbose_name_plural = 'Coupon Redemptions'
        constraints = [
            models.UniqueConstraint(fields=['coupon', 'order'], name='unique_redemption_per_order'),
        ]

    def __str__(self):
        return f"{self.coupon.code} on order {self.order_id}"

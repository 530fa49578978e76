"""
Customer Models - profiles and order aggregates
"""
from django.conf import settings
from django.db import models
from apps.core.models import BaseModel


class Customer(BaseModel):
    """
    Customer or staff profile attached to an auth user.
    Aggregates are maintained by checkout.
    """
    ROLE_CHOICES = [
        ('admin', 'Administrator'),
        ('shop_manager', 'Shop Manager'),
        ('staff', 'Staff'),
        ('customer', 'Customer'),
    ]

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name='customer',
        blank=True,
        null=True
    )
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='customer')
    phone = models.CharField(max_length=20, blank=True, null=True)
    orders_count = models.PositiveIntegerField(default=0)
    total_spend = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    avg_order_value = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    class Meta:
        db_table = 'customers'
        verbose_name = 'Customer'
        verbose_name_plural = 'Customers'
        indexes = [
            models.Index(fields=['role', 'total_spend'], name='customers_role_4f2a9c_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.email})"

    def save(self, *args, **kwargs):
        self.email = (self.email or '').strip().lower()
        super().save(*args, **kwargs)

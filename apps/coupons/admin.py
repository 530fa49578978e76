from django.contrib import admin

from .models import Coupon, CouponRedemption


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = ('code', 'type', 'amount', 'usage_count', 'usage_limit', 'expiry_date')
    search_fields = ('code',)
    readonly_fields = ('usage_count',)


@admin.register(CouponRedemption)
class CouponRedemptionAdmin(admin.ModelAdmin):
    list_display = ('coupon', 'customer', 'order', 'discount_amount', 'created_at')

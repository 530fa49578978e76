from django.contrib import admin

from .models import Order, OrderEvent, OrderItem, OrderNote


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = ('product', 'variation', 'name_snapshot', 'sku_snapshot', 'price', 'qty', 'subtotal', 'total')


class OrderEventInline(admin.TabularInline):
    model = OrderEvent
    extra = 0
    can_delete = False
    readonly_fields = ('type', 'description', 'actor', 'created_at')


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('number', 'status', 'customer_name', 'customer_email', 'grand_total', 'created_at')
    list_filter = ('status', 'payment_status')
    search_fields = ('number', 'customer_email', 'customer_name')
    readonly_fields = ('subtotal', 'discount_total', 'shipping_total', 'tax_total', 'grand_total')
    inlines = [OrderItemInline, OrderEventInline]


admin.site.register(OrderNote)

from django.contrib import admin

from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'role', 'orders_count', 'total_spend', 'avg_order_value')
    list_filter = ('role',)
    search_fields = ('name', 'email')
    readonly_fields = ('orders_count', 'total_spend', 'avg_order_value')

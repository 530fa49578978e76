"""
API URL Configuration
"""
from django.urls import path
from .views import (
    ApplyCouponView,
    CartPriceView,
    CheckoutCalculateView,
    CreateOrderView,
    GenerateVariationsView,
    HealthCheckView,
    OrderDetailView,
    OrderListView,
    OrderNoteView,
    OrderRefundView,
    OrderStatusView,
    ValidateCouponView,
    VariationDetailView,
    VariationListView,
)

app_name = 'api'

urlpatterns = [
    # Cart pricing
    path('cart/price/', CartPriceView.as_view(), name='cart-price'),
    path('cart/apply-coupon/', ApplyCouponView.as_view(), name='cart-apply-coupon'),

    # Checkout
    path('checkout/calculate/', CheckoutCalculateView.as_view(), name='checkout-calculate'),
    path('checkout/create-order/', CreateOrderView.as_view(), name='checkout-create-order'),

    # Coupons
    path('coupons/validate/', ValidateCouponView.as_view(), name='coupon-validate'),

    # Orders
    path('orders/', OrderListView.as_view(), name='order-list'),
    path('orders/<uuid:order_id>/', OrderDetailView.as_view(), name='order-detail'),
    path('orders/<uuid:order_id>/status/', OrderStatusView.as_view(), name='order-status'),
    path('orders/<uuid:order_id>/notes/', OrderNoteView.as_view(), name='order-notes'),
    path('orders/<uuid:order_id>/refund/', OrderRefundView.as_view(), name='order-refund'),

    # Variations
    path('products/<uuid:product_id>/variations/', VariationListView.as_view(), name='variation-list'),
    path(
        'products/<uuid:product_id>/variations/generate/',
        GenerateVariationsView.as_view(),
        name='variation-generate'
    ),
    path(
        'products/<uuid:product_id>/variations/<uuid:variation_id>/',
        VariationDetailView.as_view(),
        name='variation-detail'
    ),

    # Health check
    path('health/', HealthCheckView.as_view(), name='health'),
]

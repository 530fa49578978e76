"""
API Views for the Storeroom back office

This module provides REST API endpoints for:
- Cart: pricing and coupon application
- Checkout: totals preview and order creation
- Coupons: standalone validation
- Orders: detail, listing, status changes, notes and refunds
- Variations: listing, manual creation and editing, generation and deletion
- Health Check: System health and status
"""
import logging
from datetime import datetime, timezone as dt_timezone

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import AllowAny
from drf_spectacular.utils import extend_schema, OpenApiExample

from django.db import connection

from .permissions import HasIdentity, IsShopManager, IsStoreAdmin
from .serializers import (
    AddOrderNoteSerializer,
    ApplyCouponRequestSerializer,
    CartSerializer,
    CouponSummarySerializer,
    CreateOrderRequestSerializer,
    GenerateVariationsRequestSerializer,
    HealthCheckSerializer,
    OrderSerializer,
    OrderSummarySerializer,
    PriceCartRequestSerializer,
    RefundRequestSerializer,
    UpdateOrderStatusSerializer,
    ValidateCouponRequestSerializer,
    VariationSerializer,
)
from apps.cart.pricing import empty_cart, price_cart, validate_coupon
from apps.catalog import variations as variation_service
from apps.checkout.services import create_order
from apps.core.identity import identity_from_request
from apps.orders import lifecycle
from apps.orders.models import Order

logger = logging.getLogger(__name__)


def invalid_request(serializer):
    return Response(
        {
            "error": True,
            "code": "VALIDATION_ERROR",
            "message": "Invalid request",
            "details": serializer.errors,
            "status_code": status.HTTP_400_BAD_REQUEST
        },
        status=status.HTTP_400_BAD_REQUEST
    )


def order_detail(order_id):
    order = Order.objects.prefetch_related('items', 'notes', 'events').get(pk=order_id)
    return OrderSerializer(order).data


class CartPriceView(APIView):
    """
    Price a cart: line items, subtotal, discount and grand total.

    Nothing is stored; the same lines can be priced any number of times.
    """
    permission_classes = [AllowAny]
    request_serializer_class = PriceCartRequestSerializer
    
    @extend_schema(
        request=PriceCartRequestSerializer,
        responses={200: CartSerializer},
        description="Price a list of cart lines, optionally applying a coupon",
        examples=[
            OpenApiExample(
                "Cart with coupon",
                value={
                    "lines": [{"product_id": "7b1c2f7e-3f7b-4c55-9d59-2f4cbe0d1a11", "qty": 3}],
                    "coupon_code": "SAVE20"
                },
                request_only=True
            ),
        ]
    )
    def post(self, request):
        serializer = self.request_serializer_class(data=request.data)
        if not serializer.is_valid():
            return invalid_request(serializer)

        data = serializer.validated_data
        lines = data.get('lines', [])
        coupon_code = data.get('coupon_code') or None

        if not lines and not coupon_code:
            return Response(CartSerializer(empty_cart()).data, status=status.HTTP_200_OK)

        cart = price_cart(lines, coupon_code=coupon_code, identity=identity_from_request(request))
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)


class ApplyCouponView(CartPriceView):
    """
    Price a cart with a required coupon code.
    """
    request_serializer_class = ApplyCouponRequestSerializer

    @extend_schema(
        request=ApplyCouponRequestSerializer,
        responses={200: CartSerializer},
        description="Apply a coupon to a cart and return the re-priced cart"
    )
    def post(self, request):
        return super().post(request)


class CheckoutCalculateView(CartPriceView):
    """
    Checkout totals preview. Shipping and tax are currently always zero.
    """

    @extend_schema(
        request=PriceCartRequestSerializer,
        responses={200: CartSerializer},
        description="Calculate checkout totals (shipping, tax, discounts)"
    )
    def post(self, request):
        return super().post(request)


class CreateOrderView(APIView):
    """
    Convert a cart into an order.

    Lines are re-priced and stock and coupon usage are committed together
    with the order, so a stale preview never produces an oversold order.
    """
    permission_classes = [AllowAny]

    @extend_schema(
        request=CreateOrderRequestSerializer,
        responses={201: OrderSerializer},
        description="Create an order from cart lines and addresses"
    )
    def post(self, request):
        serializer = CreateOrderRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request(serializer)

        data = serializer.validated_data
        order = create_order(
            lines=data.get('lines', []),
            billing_address=data.get('billing_address'),
            shipping_address=data.get('shipping_address'),
            shipping_method_id=data['shipping_method_id'],
            payment_method_id=data['payment_method_id'],
            coupon_code=data.get('coupon_code') or None,
            customer_notes=data.get('customer_notes') or None,
            identity=identity_from_request(request),
            attribution=data.get('attribution'),
        )
        return Response(order_detail(order.pk), status=status.HTTP_201_CREATED)


class ValidateCouponView(APIView):
    """
    Check a coupon code against the given cart lines without applying it.
    """
    permission_classes = [AllowAny]

    @extend_schema(
        request=ValidateCouponRequestSerializer,
        responses={200: CouponSummarySerializer},
        description="Validate a coupon code for the storefront"
    )
    def post(self, request):
        serializer = ValidateCouponRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request(serializer)

        data = serializer.validated_data
        summary = validate_coupon(data['code'], data.get('lines', []), identity=identity_from_request(request))
        return Response(CouponSummarySerializer(summary).data, status=status.HTTP_200_OK)


class OrderListView(APIView):
    """
    Customers see their own orders; staff see all and may filter.
    """
    permission_classes = [HasIdentity]

    @extend_schema(responses={200: OrderSummarySerializer(many=True)}, description="List orders")
    def get(self, request):
        orders = lifecycle.list_orders(
            identity_from_request(request),
            status=request.query_params.get('status'),
            search=request.query_params.get('search'),
        )
        return Response(OrderSummarySerializer(orders, many=True).data, status=status.HTTP_200_OK)


class OrderDetailView(APIView):
    permission_classes = [HasIdentity]

    @extend_schema(responses={200: OrderSerializer}, description="Get order details")
    def get(self, request, order_id):
        order = lifecycle.get_order(order_id, identity_from_request(request))
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


class OrderStatusView(APIView):
    """
    Move an order through its lifecycle.
    """
    permission_classes = [IsStoreAdmin]

    @extend_schema(
        request=UpdateOrderStatusSerializer,
        responses={200: OrderSerializer},
        description="Update order status (transitions are validated)"
    )
    def patch(self, request, order_id):
        serializer = UpdateOrderStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request(serializer)

        order = lifecycle.update_status(
            order_id,
            serializer.validated_data['status'],
            identity=identity_from_request(request),
        )
        return Response(order_detail(order.pk), status=status.HTTP_200_OK)


class OrderNoteView(APIView):
    permission_classes = [IsStoreAdmin]

    @extend_schema(
        request=AddOrderNoteSerializer,
        responses={200: OrderSerializer},
        description="Add a customer-visible or internal note to an order"
    )
    def post(self, request, order_id):
        serializer = AddOrderNoteSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request(serializer)

        data = serializer.validated_data
        order = lifecycle.add_note(
            order_id,
            data['content'],
            is_customer_note=data.get('is_customer_note', False),
            identity=identity_from_request(request),
        )
        return Response(order_detail(order.pk), status=status.HTTP_200_OK)


class OrderRefundView(APIView):
    """
    Record a refund. No payment provider is contacted.
    """
    permission_classes = [IsStoreAdmin]

    @extend_schema(
        request=RefundRequestSerializer,
        responses={200: OrderSerializer},
        description="Refund a completed or processing order"
    )
    def post(self, request, order_id):
        serializer = RefundRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request(serializer)

        data = serializer.validated_data
        order = lifecycle.refund(
            order_id,
            amount=data.get('amount'),
            reason=data.get('reason') or None,
            identity=identity_from_request(request),
        )
        return Response(order_detail(order.pk), status=status.HTTP_200_OK)


class VariationListView(APIView):
    """
    List a variable product's variations, or add one by hand.
    """

    def get_permissions(self):
        if self.request.method == 'GET':
            return [AllowAny()]
        return [IsShopManager()]

    @extend_schema(responses={200: VariationSerializer(many=True)}, description="List product variations")
    def get(self, request, product_id):
        variations = variation_service.list_variations(product_id)
        return Response(VariationSerializer(variations, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        request=VariationSerializer,
        responses={201: VariationSerializer},
        description="Create a variation manually"
    )
    def post(self, request, product_id):
        serializer = VariationSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request(serializer)

        variation = variation_service.create_variation(product_id, serializer.validated_data)
        return Response(VariationSerializer(variation).data, status=status.HTTP_201_CREATED)


class GenerateVariationsView(APIView):
    """
    Regenerate all variations from the product's variation attributes.
    """
    permission_classes = [IsShopManager]

    @extend_schema(
        request=GenerateVariationsRequestSerializer,
        responses={200: VariationSerializer(many=True)},
        description="Generate variations from product attributes"
    )
    def post(self, request, product_id):
        serializer = GenerateVariationsRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request(serializer)

        variations = variation_service.generate_variations(
            product_id,
            strategy=serializer.validated_data.get('strategy'),
        )
        return Response(VariationSerializer(variations, many=True).data, status=status.HTTP_200_OK)


class VariationDetailView(APIView):
    permission_classes = [IsShopManager]

    @extend_schema(
        request=VariationSerializer,
        responses={200: VariationSerializer},
        description="Update a variation"
    )
    def patch(self, request, product_id, variation_id):
        serializer = VariationSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return invalid_request(serializer)

        variation = variation_service.update_variation(product_id, variation_id, serializer.validated_data)
        return Response(VariationSerializer(variation).data, status=status.HTTP_200_OK)

    @extend_schema(responses={204: None}, description="Delete a variation")
    def delete(self, request, product_id, variation_id):
        variation_service.delete_variation(product_id, variation_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class HealthCheckView(APIView):
    """
    System health check endpoint.
    
    Returns the status of the API and database connectivity.
    """
    permission_classes = [AllowAny]
    
    @extend_schema(
        responses={200: HealthCheckSerializer},
        description="Check system health status"
    )
    def get(self, request):
        """
        Check system health.
        """
        db_status = "healthy"
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
        except Exception as e:
            logger.error(f"Health check database error: {e}")
            db_status = f"unhealthy: {str(e)}"
        
        response_data = {
            "status": "healthy" if db_status == "healthy" else "degraded",
            "version": "1.0.0",
            "database": db_status,
            "timestamp": datetime.now(dt_timezone.utc).isoformat()
        }
        
        return Response(response_data, status=status.HTTP_200_OK)

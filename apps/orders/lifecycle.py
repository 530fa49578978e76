"""
Order Lifecycle Manager - status transitions, notes and refunds

Status changes follow an explicit transition table. Every change appends an
audit event; notes and events are append-only. Each operation locks the
order row for its duration.
"""
import logging
from decimal import Decimal
from typing import Dict, FrozenSet, List, Optional

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from apps.core.exceptions import (
    InvalidStateTransition,
    NotFound,
    NotPermitted,
    ValidationException,
)
from apps.core.identity import Identity
from apps.core.utils import to_money
from .models import Order, OrderEvent, OrderNote

logger = logging.getLogger(__name__)


TRANSITIONS: Dict[str, FrozenSet[str]] = {
    'pending_payment': frozenset({'processing', 'on_hold', 'cancelled', 'failed'}),
    'processing': frozenset({'on_hold', 'completed', 'cancelled', 'refunded', 'failed'}),
    'on_hold': frozenset({'processing', 'cancelled'}),
    'completed': frozenset({'refunded'}),
    'cancelled': frozenset(),
    'refunded': frozenset(),
    'failed': frozenset(),
}

REFUNDABLE_STATUSES = ('completed', 'processing')


def can_transition(current: str, target: str) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def _actor_id(identity: Optional[Identity]):
    return identity.id if identity else None


def _locked_order(order_id) -> Order:
    try:
        return Order.objects.select_for_update().get(pk=order_id)
    except (Order.DoesNotExist, ValueError):
        raise NotFound("Order", order_id)


def record_event(order: Order, event_type: str, description: str, identity: Optional[Identity] = None) -> OrderEvent:
    return OrderEvent.objects.create(
        order=order,
        type=event_type,
        description=description,
        actor_id=_actor_id(identity),
    )


def update_status(order_id, status: str, identity: Optional[Identity] = None) -> Order:
    """
    Move an order to ``status`` if the transition table allows it.
    Entering ``completed`` stamps ``completed_at`` the first time only.
    """
    if status not in TRANSITIONS:
        raise ValidationException(f"Unknown order status: {status}", field='status')

    with transaction.atomic():
        order = _locked_order(order_id)
        old_status = order.status
        if not can_transition(old_status, status):
            raise InvalidStateTransition(old_status, status)

        order.status = status
        update_fields = ['status', 'updated_at']
        if status == 'completed' and order.completed_at is None:
            order.completed_at = timezone.now()
            update_fields.append('completed_at')
        order.save(update_fields=update_fields)

        record_event(order, 'status_change', f"Order status changed from {old_status} to {status}", identity)

    logger.info(f"Order {order.number} status {old_status} -> {status}")
    return order


def add_note(order_id, content: str, is_customer_note: bool = False, identity: Optional[Identity] = None) -> Order:
    if not content or not content.strip():
        raise ValidationException("Note content is required", field='content')

    with transaction.atomic():
        order = _locked_order(order_id)
        OrderNote.objects.create(
            order=order,
            content=content,
            is_customer_note=bool(is_customer_note),
            created_by_id=_actor_id(identity),
        )
        description = 'Customer note added' if is_customer_note else 'Internal note added'
        record_event(order, 'note', description, identity)

    logger.info(f"Note added to order {order.number} (customer={bool(is_customer_note)})")
    return order


def refund(order_id, amount=None, reason: str = None, identity: Optional[Identity] = None) -> Order:
    """
    Mark a completed or processing order refunded. No payment provider is
    contacted; the refund is recorded as a note and a payment event.
    """
    with transaction.atomic():
        order = _locked_order(order_id)
        if order.status not in REFUNDABLE_STATUSES:
            raise InvalidStateTransition(
                order.status,
                'refunded',
                message="Only completed or processing orders can be refunded"
            )

        refund_amount = order.grand_total if amount is None else to_money(amount)
        if refund_amount <= Decimal('0') or refund_amount > order.grand_total:
            raise ValidationException(
                f"Refund amount must be between 0 and {order.grand_total}",
                field='amount'
            )

        old_status = order.status
        order.status = 'refunded'
        order.payment_status = 'refunded'
        order.save(update_fields=['status', 'payment_status', 'updated_at'])

        OrderNote.objects.create(
            order=order,
            content=f"Refund processed: {refund_amount}. Reason: {reason or 'No reason provided'}",
            is_customer_note=False,
            created_by_id=_actor_id(identity),
        )
        record_event(order, 'status_change', f"Order status changed from {old_status} to refunded", identity)
        record_event(order, 'payment', f"Refund of {refund_amount} processed", identity)

    logger.info(f"Order {order.number} refunded {refund_amount}")
    return order


def get_order(order_id, identity: Optional[Identity]) -> Order:
    """Customers may only read their own orders; staff read any."""
    if identity is None:
        raise NotPermitted("Authentication required")
    try:
        order = Order.objects.prefetch_related('items', 'notes', 'events').get(pk=order_id)
    except (Order.DoesNotExist, ValueError):
        raise NotFound("Order", order_id)

    if not identity.is_staff and str(order.customer_id) != str(identity.id):
        raise NotPermitted()
    return order


def list_orders(identity: Optional[Identity], status: str = None, search: str = None) -> List[Order]:
    if identity is None:
        raise NotPermitted("Authentication required")

    orders = Order.objects.prefetch_related('items').order_by('-created_at')
    if not identity.is_staff:
        return list(orders.filter(customer_id=identity.id)) if identity.id else []

    if status and status != 'all':
        orders = orders.filter(status=status)
    if search:
        orders = orders.filter(
            Q(number__icontains=search)
            | Q(customer_email__icontains=search)
            | Q(customer_name__icontains=search)
        )
    return list(orders)

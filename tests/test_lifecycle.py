"""Tests for order status transitions, notes and refunds."""

from decimal import Decimal

import pytest

from apps.checkout.services import create_order
from apps.core.exceptions import (
    InvalidStateTransition,
    NotFound,
    NotPermitted,
    ValidationException,
)
from apps.core.identity import Identity
from apps.orders import lifecycle
from apps.orders.lifecycle import TRANSITIONS, can_transition
from apps.orders.models import Order

pytestmark = pytest.mark.django_db

ALL_STATUSES = [choice for choice, _ in Order.STATUS_CHOICES]

ALLOWED = {
    ('pending_payment', 'processing'),
    ('pending_payment', 'on_hold'),
    ('pending_payment', 'cancelled'),
    ('pending_payment', 'failed'),
    ('processing', 'on_hold'),
    ('processing', 'completed'),
    ('processing', 'cancelled'),
    ('processing', 'refunded'),
    ('processing', 'failed'),
    ('on_hold', 'processing'),
    ('on_hold', 'cancelled'),
    ('completed', 'refunded'),
}


@pytest.fixture
def order(product, address, customer_identity):
    return create_order(
        [{"product_id": product.id, "qty": 2}],
        address,
        address,
        shipping_method_id="flat_rate",
        payment_method_id="cod",
        identity=customer_identity,
    )


def force_status(order, status):
    Order.objects.filter(pk=order.pk).update(status=status)


class TestTransitionTable:
    @pytest.mark.parametrize("current", ALL_STATUSES)
    @pytest.mark.parametrize("target", ALL_STATUSES)
    def test_table(self, current, target):
        assert can_transition(current, target) is ((current, target) in ALLOWED)

    def test_every_status_has_an_entry(self):
        assert set(TRANSITIONS) == set(ALL_STATUSES)


class TestUpdateStatus:
    def test_allowed_transition_appends_event(self, order, admin_identity, admin_customer):
        updated = lifecycle.update_status(order.id, "processing", admin_identity)

        assert updated.status == "processing"
        event = updated.events.last()
        assert event.type == "status_change"
        assert event.description == "Order status changed from pending_payment to processing"
        assert event.actor == admin_customer

    def test_disallowed_transition(self, order, admin_identity):
        with pytest.raises(InvalidStateTransition) as exc_info:
            lifecycle.update_status(order.id, "completed", admin_identity)

        assert exc_info.value.to_dict() == {"current": "pending_payment", "target": "completed"}
        order.refresh_from_db()
        assert order.status == "pending_payment"
        assert order.events.count() == 1

    def test_terminal_states(self, order, admin_identity):
        force_status(order, "cancelled")
        with pytest.raises(InvalidStateTransition):
            lifecycle.update_status(order.id, "processing", admin_identity)

    def test_unknown_status(self, order, admin_identity):
        with pytest.raises(ValidationException):
            lifecycle.update_status(order.id, "shipped", admin_identity)

    def test_missing_order(self, admin_identity):
        with pytest.raises(NotFound):
            lifecycle.update_status("00000000-0000-0000-0000-000000000000", "processing", admin_identity)

    def test_completed_at_is_set_once(self, order, admin_identity):
        lifecycle.update_status(order.id, "processing", admin_identity)
        completed = lifecycle.update_status(order.id, "completed", admin_identity)
        stamped = completed.completed_at
        assert stamped is not None

        # Leave and re-enter completed through a forced status
        force_status(order, "processing")
        again = lifecycle.update_status(order.id, "completed", admin_identity)
        assert again.completed_at == stamped

    def test_full_happy_path_events(self, order, admin_identity):
        for status in ("on_hold", "processing", "completed"):
            lifecycle.update_status(order.id, status, admin_identity)

        order.refresh_from_db()
        assert order.status == "completed"
        assert [e.type for e in order.events.all()] == ["status_change"] * 4


class TestNotes:
    def test_internal_note(self, order, admin_identity, admin_customer):
        updated = lifecycle.add_note(order.id, "Called the customer", False, admin_identity)

        note = updated.notes.get()
        assert note.is_customer_note is False
        assert note.created_by == admin_customer
        assert updated.events.last().description == "Internal note added"

    def test_customer_note(self, order, admin_identity):
        updated = lifecycle.add_note(order.id, "Your parcel is on its way", True, admin_identity)
        assert updated.notes.get().is_customer_note is True
        assert updated.events.last().description == "Customer note added"

    def test_notes_are_append_only(self, order, admin_identity):
        for text in ("one", "two", "three"):
            lifecycle.add_note(order.id, text, False, admin_identity)
        assert list(order.notes.values_list("content", flat=True)) == ["one", "two", "three"]

    def test_blank_note(self, order, admin_identity):
        with pytest.raises(ValidationException):
            lifecycle.add_note(order.id, "   ", False, admin_identity)


class TestRefund:
    def test_full_refund_from_processing(self, order, admin_identity):
        force_status(order, "processing")
        refunded = lifecycle.refund(order.id, reason="Damaged", identity=admin_identity)

        assert refunded.status == "refunded"
        assert refunded.payment_status == "refunded"
        note = refunded.notes.last()
        assert note.content == "Refund processed: 60.00. Reason: Damaged"
        assert note.is_customer_note is False
        assert [(e.type, e.description) for e in refunded.events.all()][-2:] == [
            ("status_change", "Order status changed from processing to refunded"),
            ("payment", "Refund of 60.00 processed"),
        ]

    def test_partial_refund_from_completed(self, order, admin_identity):
        force_status(order, "completed")
        refunded = lifecycle.refund(order.id, amount=Decimal("12.5"), identity=admin_identity)
        assert refunded.notes.last().content == "Refund processed: 12.50. Reason: No reason provided"
        # Totals are never recalculated
        assert refunded.grand_total == Decimal("60.00")

    @pytest.mark.parametrize("status", ["pending_payment", "on_hold", "cancelled", "refunded", "failed"])
    def test_not_refundable(self, order, admin_identity, status):
        force_status(order, status)
        with pytest.raises(InvalidStateTransition):
            lifecycle.refund(order.id, identity=admin_identity)

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1"), Decimal("60.01")])
    def test_amount_bounds(self, order, admin_identity, amount):
        force_status(order, "completed")
        with pytest.raises(ValidationException):
            lifecycle.refund(order.id, amount=amount, identity=admin_identity)
        order.refresh_from_db()
        assert order.status == "completed"


class TestReading:
    def test_owner_can_read(self, order, customer_identity):
        assert lifecycle.get_order(order.id, customer_identity) == order

    def test_other_customer_cannot_read(self, order, db):
        stranger = Identity(id="11111111-1111-1111-1111-111111111111", email="x@example.com")
        with pytest.raises(NotPermitted):
            lifecycle.get_order(order.id, stranger)

    def test_staff_can_read_any(self, order, admin_identity):
        assert lifecycle.get_order(order.id, admin_identity) == order

    def test_anonymous_cannot_read(self, order):
        with pytest.raises(NotPermitted):
            lifecycle.get_order(order.id, None)

    def test_list_scoped_to_customer(self, order, product, address, customer_identity, admin_identity):
        create_order([{"product_id": product.id, "qty": 1}], address, address)

        assert lifecycle.list_orders(customer_identity) == [order]
        assert len(lifecycle.list_orders(admin_identity)) == 2

    def test_staff_filters(self, order, admin_identity):
        force_status(order, "processing")
        assert lifecycle.list_orders(admin_identity, status="processing") == [order]
        assert lifecycle.list_orders(admin_identity, status="completed") == []
        assert lifecycle.list_orders(admin_identity, search=order.number[1:6]) == [order]
        assert lifecycle.list_orders(admin_identity, search="no-such-order") == []

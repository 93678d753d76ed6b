from datetime import date, time, timedelta
from decimal import Decimal

import pytest

from apps.bookings.models import Appointment
from apps.bookings.services.expiration import ExpirationSweeper
from apps.bookings.tasks import sweep_expired_appointments
from apps.core.utils.constants import (
    APPOINTMENT_STATUS_CONFIRMED,
    APPOINTMENT_STATUS_PENDING,
    APPOINTMENT_STATUS_REFUND_PENDING,
    INVOICE_STATUS_REFUND_PENDING,
)
from apps.payments.models import Invoice
from tests.conftest import TODAY

pytestmark = pytest.mark.django_db


def test_expired_unpaid_request_is_deleted(sweeper, make_slot, make_appointment):
    appointment = make_appointment(make_slot(day=TODAY - timedelta(days=1)), amount=None)

    result = sweeper.sweep()

    assert (result.refunded, result.deleted) == (0, 1)
    assert not Appointment.objects.filter(pk=appointment.pk).exists()


def test_expired_paid_request_is_refunded_in_full(sweeper, customer, make_slot, make_appointment, sink):
    appointment = make_appointment(make_slot(day=TODAY - timedelta(days=1)), amount='330.00')

    result = sweeper.sweep()

    assert (result.refunded, result.deleted) == (1, 0)
    appointment.refresh_from_db()
    invoice = Invoice.objects.get(appointment=appointment)
    assert appointment.status == APPOINTMENT_STATUS_REFUND_PENDING
    assert invoice.status == INVOICE_STATUS_REFUND_PENDING
    assert invoice.refund_amount == Decimal('330.00')
    [notice] = sink.for_user(customer)
    assert 'has expired' in notice['message']


def test_request_starting_earlier_today_is_expired(sweeper, make_slot, make_appointment):
    slot = make_slot(day=TODAY, start=time(9), end=time(12))
    started = make_appointment(slot, start=time(9, 30), amount=None)
    upcoming = make_appointment(slot, start=time(10, 30), amount=None)

    sweeper.sweep()

    assert not Appointment.objects.filter(pk=started.pk).exists()
    assert Appointment.objects.filter(pk=upcoming.pk).exists()


def test_only_pending_appointments_are_swept(sweeper, make_slot, make_appointment):
    slot = make_slot(day=TODAY - timedelta(days=1))
    confirmed = make_appointment(slot, status=APPOINTMENT_STATUS_CONFIRMED)
    future = make_appointment(make_slot(day=TODAY + timedelta(days=1)))

    result = sweeper.sweep()

    assert result.total == 0
    confirmed.refresh_from_db()
    future.refresh_from_db()
    assert confirmed.status == APPOINTMENT_STATUS_CONFIRMED
    assert future.status == APPOINTMENT_STATUS_PENDING


def test_sweep_is_idempotent(sweeper, make_slot, make_appointment, sink):
    slot = make_slot(day=TODAY - timedelta(days=1))
    make_appointment(slot, start=time(9), amount='330.00')
    make_appointment(slot, start=time(10), amount=None)

    first = sweeper.sweep()
    second = sweeper.sweep()

    assert (first.refunded, first.deleted) == (1, 1)
    assert (second.refunded, second.deleted) == (0, 0)
    assert len(sink.sent) == 1
    assert Invoice.objects.get().refund_amount == Decimal('330.00')


def test_request_approved_during_sweep_is_left_alone(sweeper, lifecycle, provider_actor, customer, make_slot, make_appointment, sink, monkeypatch):
    appointment = make_appointment(make_slot(day=TODAY - timedelta(days=1)), amount='330.00')
    resolve = ExpirationSweeper._resolve

    def approve_then_resolve(self, appointment_id, now, events):
        # The provider approves after the candidates were read but before the row lock
        assert lifecycle.approve(appointment_id, provider_actor).ok
        return resolve(self, appointment_id, now, events)

    monkeypatch.setattr(ExpirationSweeper, '_resolve', approve_then_resolve)

    result = sweeper.sweep()

    assert result.total == 0
    appointment.refresh_from_db()
    invoice = Invoice.objects.get(appointment=appointment)
    assert appointment.status == APPOINTMENT_STATUS_CONFIRMED
    assert invoice.refund_amount == Decimal('0')
    assert [item['notification_type'] for item in sink.for_user(customer)] == ['appointment_confirmation']


def test_sweep_scoped_to_provider_or_customer(sweeper, other_provider, other_customer, make_slot, make_appointment):
    mine = make_appointment(make_slot(day=TODAY - timedelta(days=1)), amount=None)
    theirs = make_appointment(
        make_slot(day=TODAY - timedelta(days=1), owner=other_provider),
        amount=None,
        owner=other_customer,
    )

    sweeper.sweep(provider_id=other_provider.pk)
    assert Appointment.objects.filter(pk=mine.pk).exists()
    assert not Appointment.objects.filter(pk=theirs.pk).exists()

    sweeper.sweep(customer_id=mine.customer_id)
    assert not Appointment.objects.filter(pk=mine.pk).exists()


def test_scheduled_task_sweeps_with_real_clock(make_slot, make_appointment):
    appointment = make_appointment(make_slot(day=date(2020, 1, 6)), amount='330.00')

    outcome = sweep_expired_appointments()

    assert outcome == {'refunded': 1, 'deleted': 0}
    appointment.refresh_from_db()
    assert appointment.status == APPOINTMENT_STATUS_REFUND_PENDING

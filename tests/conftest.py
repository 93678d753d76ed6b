from datetime import date, datetime, time, timedelta, timezone as dt_timezone
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.authentication.models import User
from apps.bookings.models import Appointment
from apps.bookings.services.booking_engine import BookingEngine
from apps.bookings.services.expiration import ExpirationSweeper
from apps.bookings.services.lifecycle import AppointmentLifecycle
from apps.core.results import Actor
from apps.core.utils.constants import (
    APPOINTMENT_STATUS_PENDING,
    INVOICE_STATUS_SUCCESS,
    USER_ROLE_CUSTOMER,
    USER_ROLE_PROVIDER,
)
from apps.payments.models import Invoice
from apps.providers.models import ProviderSpecialty, Specialization
from apps.schedules.models import AvailabilitySlot
from apps.schedules.services.slot_registry import SlotRegistry

# Test settings run in UTC
FIXED_NOW = datetime(2030, 1, 1, 10, 0, tzinfo=dt_timezone.utc)
TODAY = FIXED_NOW.date()


class FixedClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class RecordingSink:
    """Collects notifications instead of persisting them"""

    def __init__(self):
        self.sent = []

    def notify(self, user_id, message, link=None, notification_type='system'):
        self.sent.append({
            'user_id': user_id,
            'message': message,
            'link': link,
            'notification_type': notification_type,
        })

    def for_user(self, user):
        return [item for item in self.sent if item['user_id'] == user.pk]


class FailingSink:
    def notify(self, user_id, message, link=None, notification_type='system'):
        raise RuntimeError('mail server down')


@pytest.fixture
def clock():
    return FixedClock(FIXED_NOW)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def provider(db):
    return User.objects.create_user(
        email='provider@example.com',
        password='secret-pass',
        first_name='Dana',
        last_name='Reyes',
        role=USER_ROLE_PROVIDER,
    )


@pytest.fixture
def other_provider(db):
    return User.objects.create_user(email='other-provider@example.com', role=USER_ROLE_PROVIDER)


@pytest.fixture
def customer(db):
    return User.objects.create_user(
        email='customer@example.com',
        password='secret-pass',
        first_name='Sam',
        last_name='Lee',
        role=USER_ROLE_CUSTOMER,
    )


@pytest.fixture
def other_customer(db):
    return User.objects.create_user(email='other-customer@example.com', role=USER_ROLE_CUSTOMER)


@pytest.fixture
def provider_actor(provider):
    return Actor.from_user(provider)


@pytest.fixture
def customer_actor(customer):
    return Actor.from_user(customer)


@pytest.fixture
def specialty(provider):
    """Provider charges 300 per hour"""
    specialization = Specialization.objects.create(name='Tax advice')
    return ProviderSpecialty.objects.create(
        provider=provider,
        specialization=specialization,
        min_price=Decimal('300.00'),
    )


@pytest.fixture
def make_slot(provider):
    def _make_slot(day=None, start=time(9, 0), end=time(12, 0), owner=None, **extra):
        return AvailabilitySlot.objects.create(
            provider=owner or provider,
            date=day or TODAY + timedelta(days=5),
            start_time=start,
            end_time=end,
            **extra
        )
    return _make_slot


@pytest.fixture
def make_appointment(customer):
    def _make_appointment(slot, start=None, duration=60, status=APPOINTMENT_STATUS_PENDING,
                          amount='330.00', invoice_status=INVOICE_STATUS_SUCCESS, owner=None):
        appointment = Appointment.objects.create(
            customer=owner or customer,
            provider=slot.provider,
            slot=slot,
            package_name='Video call',
            duration_minutes=duration,
            start_time=start or slot.start_time,
            note='Need help with my yearly return.',
            status=status,
        )
        if amount is not None:
            Invoice.objects.create(
                user=appointment.customer,
                appointment=appointment,
                amount=Decimal(amount),
                status=invoice_status,
                payment_method='card',
            )
        return appointment
    return _make_appointment


@pytest.fixture
def registry(clock):
    return SlotRegistry(clock=clock)


@pytest.fixture
def engine(clock, sink):
    return BookingEngine(clock=clock, sink=sink)


@pytest.fixture
def lifecycle(clock, sink):
    return AppointmentLifecycle(clock=clock, sink=sink)


@pytest.fixture
def sweeper(clock, sink):
    return ExpirationSweeper(clock=clock, sink=sink)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def far_future():
    """A date far enough ahead for API tests that run on the real clock"""
    return date(2099, 6, 1)

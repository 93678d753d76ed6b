"""
Booking engine: reserve part of a provider's slot for a customer.

The slot row is locked for the whole reservation so overlap checks and the
insert are serialized per slot; two customers asking for overlapping times
can never both succeed.
"""
import logging
from datetime import datetime, time, timedelta
from typing import Callable, Optional

from django.db import DatabaseError, transaction
from django.utils import timezone

from apps.bookings.models import Appointment
from apps.core.messages import APPOINTMENTS, NOTIFICATIONS, LINKS
from apps.core.results import Actor, ErrorKind, ServiceResult
from apps.core.utils.constants import (
    ALLOWED_DURATION_MINUTES,
    APPOINTMENT_STATUS_PENDING,
    INVOICE_STATUS_SUCCESS,
    MIN_NOTE_LENGTH,
)
from apps.core.utils.helpers import local_datetime
from apps.notifications.models import NotificationType
from apps.notifications.services.sink import (
    NotificationEvent,
    NotificationSink,
    deliver,
    get_notification_sink,
)
from apps.payments import settlement
from apps.payments.models import Invoice
from apps.providers.pricing import provider_base_rate
from apps.schedules.models import AvailabilitySlot

logger = logging.getLogger(__name__)


def intervals_overlap(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """Half-open intervals [start, end) share at least one instant"""
    return start_a < end_b and end_a > start_b


class BookingEngine:
    """
    Create appointment requests together with their invoice.
    """

    def __init__(self, clock: Optional[Callable] = None, sink: Optional[NotificationSink] = None):
        self.clock = clock or timezone.now
        self.sink = sink

    def _validate(self, package_name, duration_minutes, note, payment_method) -> Optional[ServiceResult]:
        if duration_minutes not in ALLOWED_DURATION_MINUTES:
            allowed = ', '.join(str(minutes) for minutes in ALLOWED_DURATION_MINUTES)
            return ServiceResult.failure(
                ErrorKind.VALIDATION,
                APPOINTMENTS['invalid_duration'].format(allowed=allowed),
            )
        if len((note or '').strip()) < MIN_NOTE_LENGTH:
            return ServiceResult.failure(
                ErrorKind.VALIDATION,
                APPOINTMENTS['note_too_short'].format(min_length=MIN_NOTE_LENGTH),
            )
        if not (package_name or '').strip():
            return ServiceResult.failure(
                ErrorKind.VALIDATION,
                APPOINTMENTS['missing_field'].format(field='package_name'),
            )
        if not (payment_method or '').strip():
            return ServiceResult.failure(
                ErrorKind.VALIDATION,
                APPOINTMENTS['missing_field'].format(field='payment_method'),
            )
        return None

    def reserve(
        self,
        actor: Actor,
        slot_id,
        package_name: str,
        start_time: time,
        duration_minutes: int,
        note: str,
        payment_method: str,
    ) -> ServiceResult:
        """
        Reserve [start_time, start_time + duration) inside a slot.

        On success the result carries the appointment, its invoice and the
        charged total.
        """
        invalid = self._validate(package_name, duration_minutes, note, payment_method)
        if invalid is not None:
            return invalid

        if not actor.is_customer:
            return ServiceResult.failure(ErrorKind.FORBIDDEN, APPOINTMENTS['customers_only'])

        now = self.clock()

        try:
            with transaction.atomic():
                slot = AvailabilitySlot.objects.select_for_update().filter(pk=slot_id).first()
                if slot is None:
                    return ServiceResult.failure(ErrorKind.NOT_FOUND, APPOINTMENTS['slot_not_found'])

                if not slot.provider.is_active:
                    return ServiceResult.failure(ErrorKind.FORBIDDEN, APPOINTMENTS['provider_inactive'])

                if local_datetime(slot.date, start_time) < now:
                    return ServiceResult.failure(ErrorKind.PRECONDITION, APPOINTMENTS['slot_expired'])

                request_start = datetime.combine(slot.date, start_time)
                request_end = request_start + timedelta(minutes=duration_minutes)

                fits = (
                    request_start >= datetime.combine(slot.date, slot.start_time)
                    and request_end <= datetime.combine(slot.date, slot.end_time)
                )
                if not fits:
                    return ServiceResult.failure(ErrorKind.PRECONDITION, APPOINTMENTS['outside_slot'])

                for existing in slot.appointments.occupying():
                    existing_start = datetime.combine(slot.date, existing.start_time)
                    existing_end = existing_start + timedelta(minutes=existing.duration_minutes)
                    if intervals_overlap(existing_start, existing_end, request_start, request_end):
                        return ServiceResult.failure(ErrorKind.CONFLICT, APPOINTMENTS['already_booked'])

                rate = provider_base_rate(slot.provider_id)
                total = settlement.price_for_duration(rate, duration_minutes)

                appointment = Appointment.objects.create(
                    customer_id=actor.user_id,
                    provider_id=slot.provider_id,
                    slot=slot,
                    package_name=package_name.strip(),
                    duration_minutes=duration_minutes,
                    start_time=start_time,
                    note=note.strip(),
                    status=APPOINTMENT_STATUS_PENDING,
                )
                invoice = Invoice.objects.create(
                    user_id=actor.user_id,
                    appointment=appointment,
                    amount=settlement.to_money(total),
                    refund_amount=0,
                    status=INVOICE_STATUS_SUCCESS,
                    payment_method=payment_method.strip(),
                )
        except DatabaseError as e:
            logger.error(f"Failed to reserve slot {slot_id} for customer {actor.user_id}: {e}")
            return ServiceResult.failure(ErrorKind.INFRASTRUCTURE, APPOINTMENTS['storage_failed'])

        logger.info(
            f"Appointment {appointment.pk} requested on slot {slot_id} "
            f"({duration_minutes} min at {start_time}, invoice {invoice.transaction_ref})"
        )

        deliver(self.sink or get_notification_sink(), [
            NotificationEvent(
                user_id=appointment.provider_id,
                message=NOTIFICATIONS['new_request'].format(appointment_id=appointment.pk),
                link=LINKS['provider_appointments'],
                notification_type=NotificationType.APPOINTMENT_REQUEST,
            ),
            NotificationEvent(
                user_id=appointment.customer_id,
                message=NOTIFICATIONS['request_received'].format(appointment_id=appointment.pk),
                link=LINKS['customer_appointment'].format(appointment_id=appointment.pk),
                notification_type=NotificationType.PAYMENT,
            ),
        ])

        return ServiceResult.success(
            APPOINTMENTS['booked'],
            appointment=appointment,
            invoice=invoice,
            total_amount=invoice.amount,
        )

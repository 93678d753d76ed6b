"""
Slot registry: a provider's availability windows.

Slots are created in bulk for a list of dates, edited while nothing is booked
in them, and deleted while no pending or confirmed appointment depends on
them. Listing first retires unbooked slots whose end time has passed.
"""
import logging
from dataclasses import dataclass
from datetime import date, time
from typing import Callable, Iterable, Optional

from django.contrib.auth import get_user_model
from django.db import DatabaseError, transaction
from django.db.models import Exists, OuterRef
from django.utils import timezone

from apps.bookings.models import Appointment
from apps.core.messages import SLOTS, APPOINTMENTS
from apps.core.results import Actor, ErrorKind, ServiceResult
from apps.core.utils.constants import (
    ACTIVE_APPOINTMENT_STATUSES,
    ALLOWED_DURATION_MINUTES,
    OCCUPYING_APPOINTMENT_STATUSES,
    SLOT_LIST_HISTORY,
    SLOT_LIST_UPCOMING,
    USER_ROLE_PROVIDER,
)
from apps.core.utils.helpers import local_datetime
from apps.payments import settlement
from apps.providers.pricing import provider_base_rate
from apps.schedules.models import AvailabilitySlot

logger = logging.getLogger(__name__)


@dataclass
class SlotCreationCounts:
    created: int = 0
    skipped: int = 0
    past_skipped: int = 0

    def message(self) -> str:
        text = SLOTS['created'].format(created=self.created)
        if self.skipped:
            text += SLOTS['skipped_duplicates'].format(skipped=self.skipped)
        if self.past_skipped:
            text += SLOTS['skipped_past'].format(past=self.past_skipped)
        return text


def _with_booking_flag(queryset):
    return queryset.annotate(
        is_booked=Exists(
            Appointment.objects.filter(
                slot=OuterRef('pk'),
                status__in=OCCUPYING_APPOINTMENT_STATUSES,
            )
        )
    )


class SlotRegistry:
    """
    Manage availability slots on behalf of a provider.

    Example usage:
        registry = SlotRegistry()
        result = registry.create_slots(actor, [date(2030, 1, 7)], time(9), time(12))
    """

    def __init__(self, clock: Optional[Callable] = None):
        self.clock = clock or timezone.now

    def create_slots(self, actor: Actor, dates: Iterable[date], start: time, end: time) -> ServiceResult:
        """
        Create one slot per date. Dates already in the past and dates with an
        overlapping slot are skipped and counted.
        """
        if not actor.is_provider:
            return ServiceResult.failure(ErrorKind.FORBIDDEN, SLOTS['providers_only'])
        if end <= start:
            return ServiceResult.failure(ErrorKind.VALIDATION, SLOTS['end_before_start'])

        now = self.clock()
        counts = SlotCreationCounts()

        try:
            with transaction.atomic():
                # Serializes concurrent creation for the same provider
                get_user_model().objects.select_for_update().filter(pk=actor.user_id).first()

                for day in dates:
                    if local_datetime(day, start) < now:
                        counts.past_skipped += 1
                        continue

                    if AvailabilitySlot.objects.overlapping(actor.user_id, day, start, end).exists():
                        counts.skipped += 1
                        continue

                    AvailabilitySlot.objects.create(
                        provider_id=actor.user_id,
                        date=day,
                        start_time=start,
                        end_time=end,
                        is_available=True,
                    )
                    counts.created += 1
        except DatabaseError as e:
            logger.error(f"Failed to create slots for provider {actor.user_id}: {e}")
            return ServiceResult.failure(ErrorKind.INFRASTRUCTURE, APPOINTMENTS['storage_failed'])

        logger.info(
            f"Provider {actor.user_id} created {counts.created} slots "
            f"(skipped {counts.skipped} duplicates, {counts.past_skipped} past)"
        )
        return ServiceResult.success(
            counts.message(),
            created=counts.created,
            skipped=counts.skipped,
            past_skipped=counts.past_skipped,
        )

    def update_slot(self, actor: Actor, slot_id, start: time, end: time) -> ServiceResult:
        """Move a slot that nothing is booked in yet"""
        if not AvailabilitySlot.objects.filter(pk=slot_id, provider_id=actor.user_id).exists():
            return ServiceResult.failure(ErrorKind.NOT_FOUND, SLOTS['not_found'])

        now = self.clock()

        try:
            with transaction.atomic():
                slot = AvailabilitySlot.objects.select_for_update().filter(
                    pk=slot_id, provider_id=actor.user_id
                ).first()
                if slot is None:
                    return ServiceResult.failure(ErrorKind.NOT_FOUND, SLOTS['not_found'])

                if slot.appointments.occupying().exists():
                    return ServiceResult.failure(ErrorKind.PRECONDITION, SLOTS['has_bookings'])

                if local_datetime(slot.date, start) < now:
                    return ServiceResult.failure(ErrorKind.PRECONDITION, SLOTS['start_in_past'])

                if end <= start:
                    return ServiceResult.failure(ErrorKind.PRECONDITION, SLOTS['end_before_start'])

                overlaps = AvailabilitySlot.objects.overlapping(
                    actor.user_id, slot.date, start, end
                ).exclude(pk=slot.pk).exists()
                if overlaps:
                    return ServiceResult.failure(ErrorKind.CONFLICT, SLOTS['overlaps_existing'])

                slot.start_time = start
                slot.end_time = end
                slot.is_available = True
                slot.save(update_fields=['start_time', 'end_time', 'is_available', 'updated_at'])
        except DatabaseError as e:
            logger.error(f"Failed to update slot {slot_id}: {e}")
            return ServiceResult.failure(ErrorKind.INFRASTRUCTURE, APPOINTMENTS['storage_failed'])

        logger.info(f"Slot {slot_id} moved to {start}-{end} by provider {actor.user_id}")
        return ServiceResult.success(SLOTS['updated'], slot=slot)

    def delete_slot(self, actor: Actor, slot_id) -> ServiceResult:
        """
        Delete a slot. Pending or confirmed appointments block deletion;
        completed ones do not.
        """
        if not AvailabilitySlot.objects.filter(pk=slot_id, provider_id=actor.user_id).exists():
            return ServiceResult.failure(ErrorKind.NOT_FOUND, SLOTS['not_found'])

        try:
            with transaction.atomic():
                slot = AvailabilitySlot.objects.select_for_update().filter(
                    pk=slot_id, provider_id=actor.user_id
                ).first()
                if slot is None:
                    return ServiceResult.failure(ErrorKind.NOT_FOUND, SLOTS['not_found'])

                if slot.appointments.filter(status__in=ACTIVE_APPOINTMENT_STATUSES).exists():
                    return ServiceResult.failure(ErrorKind.PRECONDITION, SLOTS['has_active_appointments'])

                slot.delete()
        except DatabaseError as e:
            logger.error(f"Failed to delete slot {slot_id}: {e}")
            return ServiceResult.failure(ErrorKind.INFRASTRUCTURE, APPOINTMENTS['storage_failed'])

        logger.info(f"Slot {slot_id} deleted by provider {actor.user_id}")
        return ServiceResult.success(SLOTS['deleted'])

    def retire_past_slots(self, provider_id) -> int:
        """Mark unbooked slots whose end time has passed as unavailable"""
        now = self.clock()
        retired = (
            AvailabilitySlot.objects
            .filter(provider_id=provider_id, is_available=True)
            .past(now)
            .exclude(appointments__status__in=OCCUPYING_APPOINTMENT_STATUSES)
            .update(is_available=False)
        )
        if retired:
            logger.info(f"Retired {retired} past slots of provider {provider_id}")
        return retired

    def list_slots(self, actor: Actor, mode: str = SLOT_LIST_UPCOMING) -> ServiceResult:
        """
        Slots of the provider, annotated with is_booked.

        upcoming: not yet ended, soonest first
        history: already ended, most recent first
        """
        if not actor.is_provider:
            return ServiceResult.failure(ErrorKind.FORBIDDEN, SLOTS['providers_only'])

        self.retire_past_slots(actor.user_id)

        now = self.clock()
        queryset = _with_booking_flag(AvailabilitySlot.objects.filter(provider_id=actor.user_id))

        if mode == SLOT_LIST_HISTORY:
            slots = queryset.past(now).order_by('-date', '-start_time')
        else:
            slots = queryset.not_past(now).order_by('date', 'start_time')

        return ServiceResult.success(slots=slots)

    def provider_schedule(self, provider_id) -> ServiceResult:
        """
        Public booking page data for a provider: open slots, occupied
        intervals and prices per package.
        """
        provider = get_user_model().objects.filter(pk=provider_id, role=USER_ROLE_PROVIDER).first()
        if provider is None or not provider.is_active:
            return ServiceResult.failure(ErrorKind.FORBIDDEN, APPOINTMENTS['provider_inactive'])

        self.retire_past_slots(provider.pk)

        now = self.clock()
        slots = list(
            AvailabilitySlot.objects
            .filter(provider=provider, is_available=True)
            .not_past(now)
            .order_by('date', 'start_time')
        )

        occupied = (
            Appointment.objects
            .occupying()
            .filter(slot__in=slots)
            .select_related('slot')
            .order_by('slot__date', 'start_time')
        )

        rate = provider_base_rate(provider.pk)
        price_list = [
            {
                'duration_minutes': minutes,
                'price': settlement.to_money(settlement.price_for_duration(rate, minutes)),
            }
            for minutes in ALLOWED_DURATION_MINUTES
        ]

        return ServiceResult.success(
            provider=provider,
            slots=slots,
            occupied=[
                {
                    'slot_id': appointment.slot_id,
                    'date': appointment.slot.date,
                    'start_time': appointment.start_time,
                    'end_time': appointment.end_time,
                    'status': appointment.status,
                }
                for appointment in occupied
            ],
            price_list=price_list,
            service_fee_rate=settlement.SERVICE_FEE_RATE_PERCENT,
            server_time=now,
        )

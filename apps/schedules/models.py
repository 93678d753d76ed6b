"""
Provider availability slots
"""
from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from apps.core.models import BaseModel
from apps.core.utils.helpers import local_datetime


def _local_today_and_time(now):
    local_now = timezone.localtime(now, timezone.get_default_timezone())
    return local_now.date(), local_now.time()


class AvailabilitySlotQuerySet(models.QuerySet):

    def past(self, now):
        """Slots whose end time has already passed"""
        today, current_time = _local_today_and_time(now)
        return self.filter(Q(date__lt=today) | Q(date=today, end_time__lt=current_time))

    def not_past(self, now):
        today, current_time = _local_today_and_time(now)
        return self.exclude(Q(date__lt=today) | Q(date=today, end_time__lt=current_time))

    def overlapping(self, provider_id, day, start_time, end_time):
        """Slots of a provider on `day` whose [start, end) range meets the given one"""
        return self.filter(
            provider_id=provider_id,
            date=day,
            start_time__lt=end_time,
            end_time__gt=start_time,
        )


class AvailabilitySlot(BaseModel):
    """
    A window of time on one date during which a provider accepts bookings.

    Several appointments can share a slot as long as their intervals do not
    overlap. A provider never has two overlapping slots on the same date.
    """
    provider = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='availability_slots'
    )

    date = models.DateField(db_index=True)
    start_time = models.TimeField()
    end_time = models.TimeField()

    is_available = models.BooleanField(default=True)

    objects = AvailabilitySlotQuerySet.as_manager()

    class Meta:
        db_table = 'availability_slots'
        verbose_name = 'Availability Slot'
        verbose_name_plural = 'Availability Slots'
        ordering = ['date', 'start_time']
        indexes = [
            models.Index(fields=['provider', 'date', 'start_time'], name='avail_slot_provider_date_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(start_time__lt=models.F('end_time')),
                name='availability_slot_start_before_end',
            ),
        ]

    def __str__(self):
        return f"{self.provider} {self.date} {self.start_time}-{self.end_time}"

    @property
    def starts_at(self):
        return local_datetime(self.date, self.start_time)

    @property
    def ends_at(self):
        return local_datetime(self.date, self.end_time)

"""
Appointment model
"""
from datetime import datetime, timedelta

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from apps.core.models import BaseModel
from apps.core.utils.constants import (
    APPOINTMENT_STATUSES,
    APPOINTMENT_STATUS_PENDING,
    APPOINTMENT_STATUS_REFUND_PENDING,
    APPOINTMENT_DURATIONS,
    OCCUPYING_APPOINTMENT_STATUSES,
)
from apps.core.utils.helpers import local_datetime
from apps.core.validators import validate_appointment_duration, validate_non_negative_decimal


class AppointmentQuerySet(models.QuerySet):

    def occupying(self):
        """Appointments whose interval blocks the slot"""
        return self.filter(status__in=OCCUPYING_APPOINTMENT_STATUSES)

    def expired(self, now):
        """Appointments whose start time has already passed"""
        local_now = timezone.localtime(now, timezone.get_default_timezone())
        return self.filter(
            Q(slot__date__lt=local_now.date()) |
            Q(slot__date=local_now.date(), start_time__lt=local_now.time())
        )

    def for_user(self, user):
        """Appointments where the user is the customer or the provider"""
        return self.filter(Q(customer=user) | Q(provider=user))


class Appointment(BaseModel):
    """
    A booked interval inside a provider's availability slot.
    """
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='customer_appointments'
    )

    provider = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='provider_appointments'
    )

    slot = models.ForeignKey(
        'schedules.AvailabilitySlot',
        on_delete=models.CASCADE,
        related_name='appointments'
    )

    # Booking details
    package_name = models.CharField(max_length=100)
    duration_minutes = models.PositiveIntegerField(
        choices=APPOINTMENT_DURATIONS,
        validators=[validate_appointment_duration]
    )
    start_time = models.TimeField(help_text='Time of day within the slot')
    note = models.TextField()

    status = models.CharField(
        max_length=20,
        choices=APPOINTMENT_STATUSES,
        default=APPOINTMENT_STATUS_PENDING,
        db_index=True
    )

    # Platform commission, set on completion
    commission_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[validate_non_negative_decimal]
    )

    objects = AppointmentQuerySet.as_manager()

    class Meta:
        db_table = 'appointments'
        verbose_name = 'Appointment'
        verbose_name_plural = 'Appointments'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['customer', 'status'], name='appt_customer_status_idx'),
            models.Index(fields=['provider', 'status'], name='appt_provider_status_idx'),
            models.Index(fields=['slot', 'status'], name='appt_slot_status_idx'),
        ]

    def __str__(self):
        return f"{self.package_name} #{self.pk} ({self.status})"

    @property
    def starts_at(self):
        return local_datetime(self.slot.date, self.start_time)

    @property
    def ends_at(self):
        return self.starts_at + timedelta(minutes=self.duration_minutes)

    @property
    def end_time(self):
        return (datetime.combine(self.slot.date, self.start_time) + timedelta(minutes=self.duration_minutes)).time()

    @property
    def is_refund_case(self):
        return self.status == APPOINTMENT_STATUS_REFUND_PENDING

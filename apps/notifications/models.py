"""
In-app notification model.
"""
from django.conf import settings
from django.db import models

from apps.core.models import BaseModel


class NotificationType(models.TextChoices):
    """Types of notifications"""
    APPOINTMENT_REQUEST = 'appointment_request', 'New Appointment Request'
    APPOINTMENT_CONFIRMATION = 'appointment_confirmation', 'Appointment Confirmed'
    APPOINTMENT_DECLINED = 'appointment_declined', 'Appointment Declined'
    APPOINTMENT_CANCELLATION = 'appointment_cancellation', 'Appointment Cancelled'
    APPOINTMENT_EXPIRED = 'appointment_expired', 'Appointment Expired'
    APPOINTMENT_COMPLETED = 'appointment_completed', 'Appointment Completed'
    PAYMENT = 'payment', 'Payment Notification'
    SYSTEM = 'system', 'System Notification'


class Notification(BaseModel):
    """
    In-app notification shown in the user's notification center.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications'
    )

    message = models.TextField()
    link = models.CharField(max_length=255, blank=True)

    # Type
    notification_type = models.CharField(
        max_length=50,
        choices=NotificationType.choices,
        default=NotificationType.SYSTEM
    )

    # Status
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    is_sent_email = models.BooleanField(default=False)

    class Meta:
        db_table = 'notifications'
        verbose_name = 'Notification'
        verbose_name_plural = 'Notifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notif_user_is_read_idx'),
            models.Index(fields=['notification_type'], name='notif_type_idx'),
        ]

    def __str__(self):
        return f"{self.user.email} - {self.message[:50]}"

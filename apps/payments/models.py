"""
Payment models.

This module contains:
- Invoice: the payment recorded for an appointment
- ProviderEarnings: running totals of what each provider has been paid
"""
from django.conf import settings
from django.db import models

from apps.core.models import BaseModel
from apps.core.utils.constants import (
    INVOICE_STATUSES,
    INVOICE_STATUS_SUCCESS,
    INVOICE_STATUS_REFUND_PENDING,
)
from apps.core.utils.helpers import generate_transaction_ref
from apps.core.validators import validate_non_negative_decimal


class Invoice(BaseModel):
    """
    Payment for an appointment.

    The amount is fixed when the invoice is created. Afterwards only the
    refund amount and the status change, so updates always pass update_fields.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='invoices',
        help_text="Customer who paid"
    )
    appointment = models.OneToOneField(
        'bookings.Appointment',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='invoice'
    )

    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[validate_non_negative_decimal]
    )
    refund_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0,
        validators=[validate_non_negative_decimal]
    )

    status = models.CharField(
        max_length=20,
        choices=INVOICE_STATUSES,
        default=INVOICE_STATUS_SUCCESS,
        db_index=True
    )
    transaction_ref = models.CharField(
        max_length=32,
        unique=True,
        default=generate_transaction_ref,
        help_text="Payment reference (PAY_XXXXXXXX)"
    )
    payment_method = models.CharField(max_length=50)

    class Meta:
        db_table = 'invoices'
        verbose_name = 'Invoice'
        verbose_name_plural = 'Invoices'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status'], name='invoice_user_status_idx'),
        ]

    def __str__(self):
        return f"{self.transaction_ref} - {self.amount} ({self.status})"

    @property
    def is_paid(self):
        return self.status == INVOICE_STATUS_SUCCESS

    def mark_refund_pending(self, refund_amount):
        """Record that a refund of `refund_amount` is owed to the customer."""
        self.status = INVOICE_STATUS_REFUND_PENDING
        self.refund_amount = refund_amount
        self.save(update_fields=['status', 'refund_amount', 'updated_at'])


class ProviderEarnings(BaseModel):
    """
    Aggregate earnings of a provider.

    Only ever increased, once per completed appointment.
    """
    provider = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='earnings'
    )
    total_completed_matches = models.PositiveIntegerField(default=0)
    total_net_paid = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0
    )

    class Meta:
        db_table = 'provider_earnings'
        verbose_name = 'Provider Earnings'
        verbose_name_plural = 'Provider Earnings'

    def __str__(self):
        return f"{self.provider} - {self.total_completed_matches} sessions, {self.total_net_paid}"

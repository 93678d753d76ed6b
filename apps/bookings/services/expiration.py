"""
Expiration sweeper for stale appointment requests.

A pending appointment whose start time has passed can no longer be approved.
If the customer paid, the invoice is moved to refund pending with a full
refund; unpaid requests are removed. Each appointment is handled in its own
short transaction under a row lock, so running the sweep concurrently or
repeatedly never changes an appointment twice.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from django.db import transaction
from django.utils import timezone

from apps.bookings.models import Appointment
from apps.core.messages import NOTIFICATIONS, LINKS
from apps.core.utils.constants import (
    APPOINTMENT_STATUS_PENDING,
    APPOINTMENT_STATUS_REFUND_PENDING,
)
from apps.notifications.models import NotificationType
from apps.notifications.services.sink import (
    NotificationEvent,
    NotificationSink,
    deliver,
    get_notification_sink,
)
from apps.payments import settlement
from apps.payments.models import Invoice

logger = logging.getLogger(__name__)

REFUNDED = 'refunded'
DELETED = 'deleted'


@dataclass
class SweepResult:
    refunded: int = 0
    deleted: int = 0

    @property
    def total(self) -> int:
        return self.refunded + self.deleted


class ExpirationSweeper:
    """
    Resolve pending appointments that started without being approved.
    """

    def __init__(self, clock: Optional[Callable] = None, sink: Optional[NotificationSink] = None):
        self.clock = clock or timezone.now
        self.sink = sink

    def sweep(self, provider_id=None, customer_id=None) -> SweepResult:
        """
        Run one pass, optionally limited to one provider or one customer.
        """
        now = self.clock()
        candidates = Appointment.objects.filter(status=APPOINTMENT_STATUS_PENDING).expired(now)
        if provider_id is not None:
            candidates = candidates.filter(provider_id=provider_id)
        if customer_id is not None:
            candidates = candidates.filter(customer_id=customer_id)

        result = SweepResult()
        events: List[NotificationEvent] = []

        for appointment_id in candidates.values_list('pk', flat=True):
            outcome = self._resolve(appointment_id, now, events)
            if outcome == REFUNDED:
                result.refunded += 1
            elif outcome == DELETED:
                result.deleted += 1

        if result.total:
            logger.info(f"Expiration sweep: {result.refunded} refund pending, {result.deleted} deleted")

        if events:
            deliver(self.sink or get_notification_sink(), events)

        return result

    def _resolve(self, appointment_id, now, events: List[NotificationEvent]) -> Optional[str]:
        with transaction.atomic():
            appointment = (
                Appointment.objects
                .select_for_update()
                .filter(pk=appointment_id)
                .select_related('slot')
                .first()
            )
            # Already handled by someone else
            if appointment is None or appointment.status != APPOINTMENT_STATUS_PENDING:
                return None
            if appointment.starts_at >= now:
                return None

            invoice = Invoice.objects.select_for_update().filter(appointment=appointment).first()

            if invoice is not None and invoice.is_paid:
                appointment.status = APPOINTMENT_STATUS_REFUND_PENDING
                appointment.save(update_fields=['status', 'updated_at'])
                invoice.mark_refund_pending(settlement.full_refund(invoice.amount))

                events.append(NotificationEvent(
                    user_id=appointment.customer_id,
                    message=NOTIFICATIONS['expired_refund'].format(appointment_id=appointment.pk),
                    link=LINKS['customer_appointment'].format(appointment_id=appointment.pk),
                    notification_type=NotificationType.APPOINTMENT_EXPIRED,
                ))
                logger.info(f"Appointment {appointment.pk} expired unconfirmed; refund pending")
                return REFUNDED

            appointment.delete()
            logger.info(f"Appointment {appointment_id} expired unpaid; deleted")
            return DELETED

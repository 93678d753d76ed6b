"""
Appointment lifecycle transitions.

    pending   -> confirmed | cancelled | refund_pending
    confirmed -> completed | refund_pending

Every transition looks the appointment up without a lock, checks that the
actor is the right party, then locks the row and re-checks the status, since
another request or the expiration sweep may have moved it in between.
"""
import logging
from typing import Callable, List, Optional

from django.db import DatabaseError, transaction
from django.db.models import F
from django.utils import timezone

from apps.bookings.models import Appointment
from apps.core.messages import APPOINTMENTS, NOTIFICATIONS, LINKS
from apps.core.results import Actor, ErrorKind, ServiceResult
from apps.core.utils.constants import (
    ACTIVE_APPOINTMENT_STATUSES,
    APPOINTMENT_STATUS_CANCELLED,
    APPOINTMENT_STATUS_COMPLETED,
    APPOINTMENT_STATUS_CONFIRMED,
    APPOINTMENT_STATUS_PENDING,
    APPOINTMENT_STATUS_REFUND_PENDING,
    CUSTOMER_CANCEL_WINDOW_MINUTES,
    DECISION_APPROVE,
    DECISION_REJECT,
    MAX_CANCEL_REASON_LENGTH,
    MIN_CANCEL_REASON_LENGTH,
)
from apps.core.utils.helpers import minutes_between
from apps.notifications.models import NotificationType
from apps.notifications.services.sink import (
    NotificationEvent,
    NotificationSink,
    deliver,
    get_notification_sink,
)
from apps.payments import settlement
from apps.payments.models import Invoice, ProviderEarnings

logger = logging.getLogger(__name__)


# Read helpers

def can_cancel(appointment: Appointment, now) -> bool:
    """Customer may still cancel: active and at least 24 hours ahead"""
    return (
        appointment.status in ACTIVE_APPOINTMENT_STATUSES
        and minutes_between(now, appointment.starts_at) >= CUSTOMER_CANCEL_WINDOW_MINUTES
    )


def can_complete(appointment: Appointment, now) -> bool:
    return appointment.status == APPOINTMENT_STATUS_CONFIRMED and now > appointment.ends_at


def display_fees(appointment: Appointment):
    """Fee breakdown of the appointment's invoice, or None without one"""
    invoice = Invoice.objects.filter(appointment=appointment).first()
    if invoice is None:
        return None
    return settlement.fee_breakdown(invoice.amount, invoice.refund_amount)


class AppointmentLifecycle:
    """
    State machine for provider decisions, customer cancellation and completion.
    """

    def __init__(self, clock: Optional[Callable] = None, sink: Optional[NotificationSink] = None):
        self.clock = clock or timezone.now
        self.sink = sink

    # Helpers

    def _deliver(self, events: List[NotificationEvent]):
        if events:
            deliver(self.sink or get_notification_sink(), events)

    def _lock(self, appointment_id) -> Optional[Appointment]:
        return (
            Appointment.objects
            .select_for_update(of=('self',))
            .select_related('slot', 'provider')
            .filter(pk=appointment_id)
            .first()
        )

    def _lookup(self, appointment_id):
        return Appointment.objects.filter(pk=appointment_id).first()

    def _already_resolved(self, appointment: Appointment) -> ServiceResult:
        return ServiceResult.failure(
            ErrorKind.CONFLICT,
            APPOINTMENTS['already_resolved'].format(status=appointment.get_status_display().lower()),
            status=appointment.status,
        )

    def _check_provider(self, appointment_id, actor: Actor) -> Optional[ServiceResult]:
        appointment = self._lookup(appointment_id)
        if appointment is None:
            return ServiceResult.failure(ErrorKind.NOT_FOUND, APPOINTMENTS['not_found'])
        if appointment.provider_id != actor.user_id:
            return ServiceResult.failure(ErrorKind.FORBIDDEN, APPOINTMENTS['not_your_appointment'])
        return None

    def _storage_failure(self, appointment_id, action, error) -> ServiceResult:
        logger.error(f"Failed to {action} appointment {appointment_id}: {error}")
        return ServiceResult.failure(ErrorKind.INFRASTRUCTURE, APPOINTMENTS['storage_failed'])

    # Provider decisions

    def decide(self, appointment_id, actor: Actor, action: str) -> ServiceResult:
        if action == DECISION_APPROVE:
            return self.approve(appointment_id, actor)
        if action == DECISION_REJECT:
            return self.reject(appointment_id, actor)
        return ServiceResult.failure(ErrorKind.VALIDATION, APPOINTMENTS['invalid_action'])

    def approve(self, appointment_id, actor: Actor) -> ServiceResult:
        denied = self._check_provider(appointment_id, actor)
        if denied is not None:
            return denied

        try:
            with transaction.atomic():
                appointment = self._lock(appointment_id)
                if appointment is None:
                    return ServiceResult.failure(ErrorKind.NOT_FOUND, APPOINTMENTS['not_found'])
                if appointment.status != APPOINTMENT_STATUS_PENDING:
                    return self._already_resolved(appointment)

                appointment.status = APPOINTMENT_STATUS_CONFIRMED
                appointment.save(update_fields=['status', 'updated_at'])
        except DatabaseError as e:
            return self._storage_failure(appointment_id, 'approve', e)

        logger.info(f"Appointment {appointment.pk} confirmed by provider {actor.user_id}")
        self._deliver([NotificationEvent(
            user_id=appointment.customer_id,
            message=NOTIFICATIONS['confirmed'].format(appointment_id=appointment.pk),
            link=LINKS['customer_appointment'].format(appointment_id=appointment.pk),
            notification_type=NotificationType.APPOINTMENT_CONFIRMATION,
        )])
        return ServiceResult.success(APPOINTMENTS['confirmed'], appointment=appointment)

    def reject(self, appointment_id, actor: Actor) -> ServiceResult:
        """
        Decline a pending request. A paid request is refunded in full;
        an unpaid one is cancelled and its invoice removed.
        """
        denied = self._check_provider(appointment_id, actor)
        if denied is not None:
            return denied

        try:
            with transaction.atomic():
                appointment = self._lock(appointment_id)
                if appointment is None:
                    return ServiceResult.failure(ErrorKind.NOT_FOUND, APPOINTMENTS['not_found'])
                if appointment.status != APPOINTMENT_STATUS_PENDING:
                    return self._already_resolved(appointment)

                appointment.note = f"{appointment.note}{APPOINTMENTS['decline_note']}"
                invoice = Invoice.objects.select_for_update().filter(appointment=appointment).first()

                if invoice is not None and invoice.is_paid:
                    appointment.status = APPOINTMENT_STATUS_REFUND_PENDING
                    invoice.mark_refund_pending(settlement.full_refund(invoice.amount))
                    message = APPOINTMENTS['declined_refund']
                    notification = NOTIFICATIONS['declined_refund']
                else:
                    appointment.status = APPOINTMENT_STATUS_CANCELLED
                    if invoice is not None:
                        invoice.delete()
                    message = APPOINTMENTS['declined']
                    notification = NOTIFICATIONS['declined']

                appointment.save(update_fields=['status', 'note', 'updated_at'])
        except DatabaseError as e:
            return self._storage_failure(appointment_id, 'reject', e)

        logger.info(f"Appointment {appointment.pk} declined by provider {actor.user_id} ({appointment.status})")
        self._deliver([NotificationEvent(
            user_id=appointment.customer_id,
            message=notification.format(appointment_id=appointment.pk),
            link=LINKS['customer_appointment'].format(appointment_id=appointment.pk),
            notification_type=NotificationType.APPOINTMENT_DECLINED,
        )])
        return ServiceResult.success(message, appointment=appointment)

    # Customer cancellation

    def cancel_by_customer(self, appointment_id, actor: Actor, reason: str) -> ServiceResult:
        """
        Cancel at least 24 hours before the start. A paid appointment is
        refunded without the service fee.
        """
        reason = (reason or '').strip()
        if len(reason) < MIN_CANCEL_REASON_LENGTH:
            return ServiceResult.failure(
                ErrorKind.VALIDATION,
                APPOINTMENTS['reason_too_short'].format(min_length=MIN_CANCEL_REASON_LENGTH),
            )
        if len(reason) > MAX_CANCEL_REASON_LENGTH:
            return ServiceResult.failure(
                ErrorKind.VALIDATION,
                APPOINTMENTS['reason_too_long'].format(max_length=MAX_CANCEL_REASON_LENGTH),
            )

        appointment = self._lookup(appointment_id)
        if appointment is None:
            return ServiceResult.failure(ErrorKind.NOT_FOUND, APPOINTMENTS['not_found'])
        if appointment.customer_id != actor.user_id:
            return ServiceResult.failure(ErrorKind.FORBIDDEN, APPOINTMENTS['not_your_appointment'])

        now = self.clock()

        try:
            with transaction.atomic():
                appointment = self._lock(appointment_id)
                if appointment is None:
                    return ServiceResult.failure(ErrorKind.NOT_FOUND, APPOINTMENTS['not_found'])
                if appointment.status not in ACTIVE_APPOINTMENT_STATUSES:
                    return ServiceResult.failure(ErrorKind.PRECONDITION, APPOINTMENTS['not_cancellable'])
                if minutes_between(now, appointment.starts_at) < CUSTOMER_CANCEL_WINDOW_MINUTES:
                    return ServiceResult.failure(ErrorKind.PRECONDITION, APPOINTMENTS['cancel_deadline_passed'])

                invoice = Invoice.objects.select_for_update().filter(appointment=appointment).first()

                if invoice is not None and invoice.is_paid:
                    appointment.status = APPOINTMENT_STATUS_REFUND_PENDING
                    invoice.mark_refund_pending(settlement.customer_cancel_refund(invoice.amount))
                    message = APPOINTMENTS['cancelled_refund']
                else:
                    appointment.status = APPOINTMENT_STATUS_CANCELLED
                    if invoice is not None:
                        invoice.delete()
                    message = APPOINTMENTS['cancelled']

                timestamp = timezone.localtime(now, timezone.get_default_timezone()).strftime('%Y-%m-%d %H:%M')
                appointment.note = appointment.note + APPOINTMENTS['cancel_note'].format(
                    timestamp=timestamp,
                    reason=reason,
                )
                appointment.save(update_fields=['status', 'note', 'updated_at'])
        except DatabaseError as e:
            return self._storage_failure(appointment_id, 'cancel', e)

        logger.info(f"Appointment {appointment.pk} cancelled by customer {actor.user_id} ({appointment.status})")
        self._deliver([
            NotificationEvent(
                user_id=appointment.provider_id,
                message=NOTIFICATIONS['cancelled_by_customer'].format(appointment_id=appointment.pk),
                link=LINKS['provider_appointments'],
                notification_type=NotificationType.APPOINTMENT_CANCELLATION,
            ),
            NotificationEvent(
                user_id=appointment.customer_id,
                message=NOTIFICATIONS['cancel_acknowledged'].format(appointment_id=appointment.pk),
                link=LINKS['customer_appointment'].format(appointment_id=appointment.pk),
                notification_type=NotificationType.APPOINTMENT_CANCELLATION,
            ),
        ])
        return ServiceResult.success(message, appointment=appointment)

    # Completion

    def complete(self, appointment_id, actor: Actor) -> ServiceResult:
        """
        Close a confirmed session after it ended and pay the provider.
        """
        denied = self._check_provider(appointment_id, actor)
        if denied is not None:
            return denied

        now = self.clock()

        try:
            with transaction.atomic():
                appointment = self._lock(appointment_id)
                if appointment is None:
                    return ServiceResult.failure(ErrorKind.NOT_FOUND, APPOINTMENTS['not_found'])
                if appointment.status != APPOINTMENT_STATUS_CONFIRMED:
                    return ServiceResult.failure(ErrorKind.PRECONDITION, APPOINTMENTS['not_confirmed'])
                if now < appointment.ends_at:
                    return ServiceResult.failure(ErrorKind.PRECONDITION, APPOINTMENTS['not_ended'])

                invoice = Invoice.objects.filter(appointment=appointment).first()
                total = invoice.amount if invoice is not None else 0

                consultation_fee = settlement.consultation_fee_from_total(total)
                commission = settlement.to_money(settlement.commission(consultation_fee))
                provider_net = settlement.to_money(settlement.provider_net(consultation_fee))

                appointment.status = APPOINTMENT_STATUS_COMPLETED
                appointment.commission_fee = commission
                appointment.save(update_fields=['status', 'commission_fee', 'updated_at'])

                earnings, _ = ProviderEarnings.objects.get_or_create(provider_id=appointment.provider_id)
                ProviderEarnings.objects.filter(pk=earnings.pk).update(
                    total_completed_matches=F('total_completed_matches') + 1,
                    total_net_paid=F('total_net_paid') + provider_net,
                )
        except DatabaseError as e:
            return self._storage_failure(appointment_id, 'complete', e)

        logger.info(
            f"Appointment {appointment.pk} completed: commission {commission}, "
            f"provider {appointment.provider_id} net {provider_net}"
        )
        self._deliver([NotificationEvent(
            user_id=appointment.customer_id,
            message=NOTIFICATIONS['completed_review'].format(
                appointment_id=appointment.pk,
                provider_name=appointment.provider.full_name,
            ),
            link=LINKS['provider_review'].format(provider_id=appointment.provider_id),
            notification_type=NotificationType.APPOINTMENT_COMPLETED,
        )])
        return ServiceResult.success(
            APPOINTMENTS['completed'],
            appointment=appointment,
            commission=commission,
            provider_net=provider_net,
        )

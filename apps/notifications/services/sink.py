"""
Notification sink used by the booking services.

Services collect NotificationEvent values while they work and hand them to
deliver() once their transaction has committed. Delivery is best-effort: a
failing sink is logged and never affects the booking operation.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional
from uuid import UUID

from django.conf import settings
from django.utils.module_loading import import_string

from apps.notifications.models import Notification, NotificationType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationEvent:
    """A message for one user"""
    user_id: UUID
    message: str
    link: Optional[str] = None
    notification_type: str = NotificationType.SYSTEM


class NotificationSink:
    """
    Interface for notification delivery.
    """

    def notify(self, user_id, message: str, link: Optional[str] = None,
               notification_type: str = NotificationType.SYSTEM) -> None:
        raise NotImplementedError


class DatabaseNotificationSink(NotificationSink):
    """Persists notifications for the in-app notification center"""

    def notify(self, user_id, message: str, link: Optional[str] = None,
               notification_type: str = NotificationType.SYSTEM) -> None:
        Notification.objects.create(
            user_id=user_id,
            message=message,
            link=link or '',
            notification_type=notification_type,
        )


def get_notification_sink() -> NotificationSink:
    """Instantiate the sink configured in NOTIFICATION_SINK_CLASS"""
    sink_class = import_string(settings.NOTIFICATION_SINK_CLASS)
    return sink_class()


def deliver(sink: NotificationSink, events: Iterable[NotificationEvent]) -> int:
    """
    Send events through the sink. Returns the number delivered.
    """
    delivered = 0
    for event in events:
        try:
            sink.notify(
                event.user_id,
                event.message,
                link=event.link,
                notification_type=event.notification_type,
            )
            delivered += 1
        except Exception as e:
            logger.warning(f"Failed to deliver notification to user {event.user_id}: {e}")
    return delivered

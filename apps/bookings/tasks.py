"""
Celery tasks for bookings app.
"""
import logging
from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(name='bookings.sweep_expired_appointments')
def sweep_expired_appointments():
    """
    Resolve pending appointments whose start time has passed.

    Scheduled by celery beat; the same sweep also runs whenever an
    appointment or availability endpoint is hit.
    """
    from apps.bookings.services.expiration import ExpirationSweeper

    result = ExpirationSweeper().sweep()
    logger.info(f"Scheduled sweep finished: {result.refunded} refund pending, {result.deleted} deleted")
    return {'refunded': result.refunded, 'deleted': result.deleted}

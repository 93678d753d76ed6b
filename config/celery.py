"""
Celery application configuration for the consultation booking API.
"""
import os
from datetime import timedelta

from celery import Celery

# Set the default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

app = Celery('consultations')

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Load task modules from all registered Django app configs.
app.autodiscover_tasks()


@app.on_after_finalize.connect
def setup_periodic_tasks(sender, **kwargs):
    """Register the beat schedule once settings are available."""
    from django.conf import settings

    sender.conf.beat_schedule = {
        # Resolve pending appointments whose start time has passed
        'sweep-expired-appointments': {
            'task': 'bookings.sweep_expired_appointments',
            'schedule': timedelta(minutes=settings.APPOINTMENT_SWEEP_INTERVAL_MINUTES),
        },
    }

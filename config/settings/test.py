"""
Test settings
"""
from .base import *

DEBUG = False

ALLOWED_HOSTS = ['testserver', 'localhost']

# Run against PostgreSQL by setting TEST_DATABASE_URL, e.g. for the
# concurrent booking test
DATABASES = {
    'default': env.db('TEST_DATABASE_URL', default=f"sqlite:///{BASE_DIR / 'test.sqlite3'}"),
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}
SESSION_ENGINE = 'django.contrib.sessions.backends.db'

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}

TIME_ZONE = 'UTC'

DEFAULT_PROVIDER_BASE_RATE = 300
NOTIFICATION_SINK_CLASS = 'apps.notifications.services.sink.DatabaseNotificationSink'

CELERY_TASK_ALWAYS_EAGER = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

LOGGING['root']['level'] = 'WARNING'
LOGGING['loggers']['apps']['level'] = 'WARNING'
# Let pytest's caplog see application log records
LOGGING['loggers']['apps']['propagate'] = True

# services/quotation-service/src/config/settings/testing.py
"""
Testing settings for Quotation Service.
"""

from .base import *

# Testing mode
DEBUG = True
TESTING = True

# Use in-memory SQLite for tests
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}


# Disable migrations for faster tests
class DisableMigrations:
    def __contains__(self, item):
        return True

    def __getitem__(self, item):
        return None


MIGRATION_MODULES = DisableMigrations()

# Celery
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'

# Email
EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'
QUOTATION_MANAGER_EMAIL = 'manager@example.com'

# Events
EVENT_BACKEND = 'log'

# Fixed business rules regardless of the environment running the suite
QUOTATION_TIME_ZONE = 'America/Bogota'
QUOTATION_MIN_DURATION_HOURS = 4
QUOTATION_MAX_DURATION_HOURS = 8
QUOTATION_DEFAULT_SETUP_HOURS = 2
QUOTATION_DEFAULT_TEARDOWN_HOURS = 2
QUOTATION_NIGHT_SURCHARGE_CUTOFF = '22:00'
QUOTATION_NIGHT_SURCHARGE_PERCENT = 15
QUOTATION_DEPOSIT_PERCENT = 50
QUOTATION_CURRENCY = 'COP'
QUOTATION_CURRENCY_DECIMALS = 2
QUOTATION_NUMBER_PREFIX = 'COT'
QUOTATION_ALLOW_SAME_DAY = False
QUOTATION_MAX_DAYS_AHEAD = 365
QUOTATION_NOTIFIER = 'apps.core.notifications.CeleryQuoteNotifier'

# Logging - minimal for tests
LOGGING = {
    'version': 1,
    'disable_existing_loggers': True,
    'handlers': {
        'null': {
            'class': 'logging.NullHandler',
        },
    },
    'root': {
        'handlers': ['null'],
        'level': 'CRITICAL',
    },
}

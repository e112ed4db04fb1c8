"""Base settings for Quotation Service."""
import os
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(BASE_DIR.parent.parent.parent))

SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key')
DEBUG = os.environ.get('DEBUG', 'True').lower() == 'true'
ALLOWED_HOSTS = os.environ.get('ALLOWED_HOSTS', '*').split(',')

INSTALLED_APPS = [
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'apps.core',
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.environ.get('DB_NAME', 'quotation_service_db'),
        'USER': os.environ.get('DB_USER', 'quotation_service_user'),
        'PASSWORD': os.environ.get('DB_PASSWORD', 'quotation_service_password'),
        'HOST': os.environ.get('DB_HOST', 'pgbouncer'),
        'PORT': os.environ.get('DB_PORT', '6432'),
    }
}

REDIS_URL = os.environ.get('REDIS_URL', 'redis://redis:6379/6')
CELERY_BROKER_URL = os.environ.get('CELERY_BROKER_URL', REDIS_URL)
CELERY_TASK_SERIALIZER = 'json'
CELERY_ACCEPT_CONTENT = ['json']

# Notification tasks are single best-effort attempts with bounded runtime
NOTIFICATION_TASK_SOFT_TIME_LIMIT = int(os.environ.get('NOTIFICATION_TASK_SOFT_TIME_LIMIT', '30'))
NOTIFICATION_TASK_TIME_LIMIT = int(os.environ.get('NOTIFICATION_TASK_TIME_LIMIT', '45'))

# Email
EMAIL_BACKEND = os.environ.get('EMAIL_BACKEND', 'django.core.mail.backends.smtp.EmailBackend')
EMAIL_HOST = os.environ.get('EMAIL_HOST', 'localhost')
EMAIL_PORT = int(os.environ.get('EMAIL_PORT', '587'))
EMAIL_HOST_USER = os.environ.get('EMAIL_HOST_USER', '')
EMAIL_HOST_PASSWORD = os.environ.get('EMAIL_HOST_PASSWORD', '')
EMAIL_USE_TLS = os.environ.get('EMAIL_USE_TLS', 'True').lower() == 'true'
EMAIL_TIMEOUT = int(os.environ.get('EMAIL_TIMEOUT', '20'))
DEFAULT_FROM_EMAIL = os.environ.get('DEFAULT_FROM_EMAIL', 'reservas@example.com')
QUOTATION_MANAGER_EMAIL = os.environ.get('QUOTATION_MANAGER_EMAIL', '')

# Events
EVENT_PUBLISHING_ENABLED = os.environ.get('EVENT_PUBLISHING_ENABLED', 'True').lower() == 'true'
EVENT_BACKEND = os.environ.get('EVENT_BACKEND', 'log')
EVENT_CHANNEL_PREFIX = os.environ.get('EVENT_CHANNEL_PREFIX', 'events')

SERVICE_NAME = 'quotation-service'

# Quotation rules
QUOTATION_TIME_ZONE = os.environ.get('QUOTATION_TIME_ZONE', 'America/Bogota')
QUOTATION_MIN_DURATION_HOURS = int(os.environ.get('QUOTATION_MIN_DURATION_HOURS', '4'))
QUOTATION_MAX_DURATION_HOURS = int(os.environ.get('QUOTATION_MAX_DURATION_HOURS', '8'))
QUOTATION_DEFAULT_SETUP_HOURS = int(os.environ.get('QUOTATION_DEFAULT_SETUP_HOURS', '2'))
QUOTATION_DEFAULT_TEARDOWN_HOURS = int(os.environ.get('QUOTATION_DEFAULT_TEARDOWN_HOURS', '2'))
QUOTATION_NIGHT_SURCHARGE_CUTOFF = os.environ.get('QUOTATION_NIGHT_SURCHARGE_CUTOFF', '22:00')
QUOTATION_NIGHT_SURCHARGE_PERCENT = int(os.environ.get('QUOTATION_NIGHT_SURCHARGE_PERCENT', '15'))
QUOTATION_DEPOSIT_PERCENT = int(os.environ.get('QUOTATION_DEPOSIT_PERCENT', '50'))
QUOTATION_CURRENCY = os.environ.get('QUOTATION_CURRENCY', 'COP')
QUOTATION_CURRENCY_DECIMALS = int(os.environ.get('QUOTATION_CURRENCY_DECIMALS', '2'))
QUOTATION_NUMBER_PREFIX = os.environ.get('QUOTATION_NUMBER_PREFIX', 'COT')
QUOTATION_ALLOW_SAME_DAY = os.environ.get('QUOTATION_ALLOW_SAME_DAY', 'False').lower() == 'true'
QUOTATION_MAX_DAYS_AHEAD = int(os.environ.get('QUOTATION_MAX_DAYS_AHEAD', '365'))
QUOTATION_NOTIFIER = os.environ.get('QUOTATION_NOTIFIER', 'apps.core.notifications.CeleryQuoteNotifier')

LOGGING = {'version': 1, 'disable_existing_loggers': False, 'formatters': {'json': {'()': 'pythonjsonlogger.jsonlogger.JsonFormatter', 'format': '%(asctime)s %(levelname)s %(name)s %(message)s'}}, 'handlers': {'console': {'class': 'logging.StreamHandler', 'formatter': 'json'}}, 'root': {'handlers': ['console'], 'level': os.environ.get('LOG_LEVEL', 'INFO')}}

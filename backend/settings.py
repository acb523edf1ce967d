from pathlib import Path
from decouple import config, Csv
import os
import environ

BASE_DIR = Path(__file__).resolve().parent.parent

env = environ.Env(
    DEBUG=(bool, False),
)
environ.Env.read_env(os.path.join(BASE_DIR, '.env'))

SECRET_KEY = env("SECRET_KEY", default="django-insecure-clinic-flow-local-key")
DEBUG = env("DEBUG")
ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="localhost,127.0.0.1,testserver", cast=Csv())

# Database: PostgreSQL in production through DATABASE_URL, SQLite locally
DATABASES = {
    "default": env.db("DATABASE_URL", default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}"),
}

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "django_filters",
    "drf_spectacular",
    "core",
    "doctor",
    "queue_management",
    "appointments",
    "analytics",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "backend.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "backend.wsgi.application"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

LANGUAGE_CODE = "en-us"
# "Today" and doctors' working hours are evaluated in the clinic's zone
TIME_ZONE = config("CLINIC_TIME_ZONE", default="UTC")
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "rest_framework.authentication.SessionAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_FILTER_BACKENDS": [
        "django_filters.rest_framework.DjangoFilterBackend",
    ],
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
        "rest_framework.renderers.BrowsableAPIRenderer",
    ],
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Clinic Flow API",
    "DESCRIPTION": "Walk-in queue, appointment booking and doctor assignment for a clinic front desk",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api/v1/",
}

# ============================================================================
# SCHEDULING ENGINE SETTINGS
# ============================================================================

# Queue number allocation: total attempts and backoff unit (delay = unit * attempt)
QUEUE_ALLOCATION_MAX_ATTEMPTS = config("QUEUE_ALLOCATION_MAX_ATTEMPTS", default=3, cast=int)
QUEUE_ALLOCATION_BACKOFF_MS = config("QUEUE_ALLOCATION_BACKOFF_MS", default=100, cast=int)

# Wait-time escalation thresholds in minutes
QUEUE_ESCALATION_NORMAL_MINUTES = config("QUEUE_ESCALATION_NORMAL_MINUTES", default=30, cast=int)
QUEUE_ESCALATION_HIGH_MINUTES = config("QUEUE_ESCALATION_HIGH_MINUTES", default=60, cast=int)
QUEUE_ESCALATION_URGENT_MINUTES = config("QUEUE_ESCALATION_URGENT_MINUTES", default=90, cast=int)

DOCTOR_DEFAULT_CONSULTATION_MINUTES = config("DOCTOR_DEFAULT_CONSULTATION_MINUTES", default=30, cast=int)
DOCTOR_STATUS_SYNC_MINUTES = config("DOCTOR_STATUS_SYNC_MINUTES", default=5, cast=int)

CELERY_BROKER_URL = config("CELERY_BROKER_URL", default="memory://localhost/")
CELERY_RESULT_BACKEND = config("CELERY_RESULT_BACKEND", default="cache+memory://")
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"
CELERY_TIMEZONE = TIME_ZONE
CELERY_ENABLE_UTC = True
CELERY_TASK_TRACK_STARTED = True
CELERY_TASK_TIME_LIMIT = 30 * 60
CELERY_RESULT_EXPIRES = 3600
CELERY_BEAT_SCHEDULE = {
    "sync-doctor-schedule-statuses": {
        "task": "doctor.tasks.sync_doctor_schedule_statuses",
        "schedule": DOCTOR_STATUS_SYNC_MINUTES * 60.0,
    },
}

# Import centralized logging configuration
from core.logging_config import get_logging_config

LOG_LEVEL = config("LOG_LEVEL", default="INFO")
LOG_FORMAT = config("LOG_FORMAT", default="verbose")

LOGGING = get_logging_config(LOG_LEVEL, LOG_FORMAT)

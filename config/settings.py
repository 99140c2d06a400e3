import os
from pathlib import Path

from .logging import configure_logging

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-only-insecure-secret-key")
DEBUG = os.environ.get("DJANGO_DEBUG", "true").lower() in ("1", "true", "yes")
ALLOWED_HOSTS = [h for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "127.0.0.1,localhost,testserver").split(",") if h]

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "rest_framework",
    "accounts",
    "catalog",
    "spaced_repetition",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "accounts.middleware.MockLoginUserMiddleware",
]

ROOT_URLCONF = "config.urls"
WSGI_APPLICATION = "config.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("DATABASE_PATH", str(BASE_DIR / "db.sqlite3")),
        # SQLite ignores SELECT ... FOR UPDATE; writers lock at BEGIN instead
        "OPTIONS": {"transaction_mode": "IMMEDIATE", "timeout": 20},
        # File-backed so tests can share the database across threads
        "TEST": {
            "NAME": os.environ.get("TEST_DATABASE_PATH", str(BASE_DIR / "test_db.sqlite3")),
        },
    }
}

AUTH_USER_MODEL = "accounts.User"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
USE_TZ = True
# Day, week and month boundaries for review buckets are taken in this zone
TIME_ZONE = os.environ.get("TIME_ZONE", "Asia/Tokyo")

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "accounts.authentication.MiddlewareUserAuthentication",
    ],
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "EXCEPTION_HANDLER": "spaced_repetition.api.exceptions.scheduling_exception_handler",
}

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
configure_logging(LOG_LEVEL)

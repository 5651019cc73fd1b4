from __future__ import annotations

from pathlib import Path

from apps.core.config.env import SESSION_ENGINES, get_runtime_settings

BASE_DIR = Path(__file__).resolve().parent.parent
RUNTIME = get_runtime_settings()

SECRET_KEY = RUNTIME.secret_key
DEBUG = RUNTIME.debug
ALLOWED_HOSTS = list(RUNTIME.allowed_hosts)

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "rest_framework",
    "apps.core",
    "apps.identity",
    "apps.records",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "apps.core.middleware.RequestIdMiddleware",
    "apps.core.middleware.StructuredRequestLogMiddleware",
    "apps.core.error_handlers.UnifiedErrorMiddleware",
]

ROOT_URLCONF = "contractportal.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
            ],
        },
    }
]

WSGI_APPLICATION = "contractportal.wsgi.application"
ASGI_APPLICATION = "contractportal.asgi.application"

# Only the db session engine touches this database; the default signed-cookie engine keeps sessions client side.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "_django_control.db",
    }
}

SESSION_ENGINE = SESSION_ENGINES[RUNTIME.session_engine]
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SECURE = RUNTIME.env == "prod"
SESSION_SERIALIZER = "django.contrib.sessions.serializers.JSONSerializer"

PORTAL_SESSION_KEY = RUNTIME.session_key
PORTAL_DEFAULT_DEALERSHIP = RUNTIME.default_dealership
PORTAL_OWNER_PLACEHOLDER_ID = RUNTIME.owner_placeholder_id
PORTAL_IDENTITY_BACKFILL = RUNTIME.identity_backfill

REST_FRAMEWORK = {
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        }
    },
    "loggers": {
        "contractportal": {
            "handlers": ["console"],
            "level": RUNTIME.log_level,
            "propagate": True,
        }
    },
}

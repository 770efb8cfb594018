"""Django settings for the donations project.

Every deployment-specific value is read from the environment. SQLite is used
unless DATABASE_ENGINE selects PostgreSQL.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(key: str, default: bool = False) -> bool:
    return os.getenv(key, str(default)).strip().lower() in {"1", "true", "yes", "on"}


SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "insecure-development-key")
DEBUG = _env_bool("DJANGO_DEBUG")
ALLOWED_HOSTS = [h for h in os.getenv("DJANGO_ALLOWED_HOSTS", "").split(",") if h]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "donations.apps.DonationsAppConfig",
]

DATABASE_ENGINE = os.getenv("DATABASE_ENGINE", "sqlite").strip().lower()

if DATABASE_ENGINE in {"postgres", "postgresql"}:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.getenv("DATABASE_NAME", "donations"),
            "USER": os.getenv("DATABASE_USER", "app"),
            "PASSWORD": os.getenv("DATABASE_PASSWORD", "app"),
            "HOST": os.getenv("DATABASE_HOST", "localhost"),
            "PORT": os.getenv("DATABASE_PORT", "5432"),
            "CONN_MAX_AGE": int(os.getenv("DATABASE_CONN_MAX_AGE", "60")),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": os.getenv("DATABASE_NAME", str(BASE_DIR / "db.sqlite3")),
        }
    }

USE_TZ = True
TIME_ZONE = "UTC"

DONATIONS = {
    "DEFAULT_CURRENCY": os.getenv("DONATIONS_DEFAULT_CURRENCY", "USD"),
    "RECENT_DONATIONS_LIMIT": int(os.getenv("DONATIONS_RECENT_LIMIT", "10")),
    "TOP_DONORS_LIMIT": int(os.getenv("DONATIONS_TOP_DONORS_LIMIT", "10")),
}

LOG_LEVEL = os.getenv("DONATIONS_LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "loggers": {
        "donations": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
        },
        "django.db.backends": {
            "handlers": ["console"],
            "level": "WARNING",
        },
    },
}

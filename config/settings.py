"""
Django settings for the family directory project.

Anything that differs per environment is read from an environment variable,
with defaults that are safe for local development.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# ──────────────────────────────────────────
# CORE
# ──────────────────────────────────────────
SECRET_KEY    = os.environ.get("DJANGO_SECRET_KEY", "dev-only-family-directory-key")
DEBUG         = env_bool("DJANGO_DEBUG", default=True)
ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "django_htmx",
    "families.apps.FamiliesConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "django_htmx.middleware.HtmxMiddleware",
]

ROOT_URLCONF     = "config.urls"
WSGI_APPLICATION = "config.wsgi.application"

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


# ──────────────────────────────────────────
# DATABASE
# ──────────────────────────────────────────
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("DJANGO_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# ──────────────────────────────────────────
# I18N & STATIC
# ──────────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE     = os.environ.get("DJANGO_TIME_ZONE", "Asia/Kolkata")
USE_I18N      = True
USE_TZ        = True

STATIC_URL = "static/"


# ──────────────────────────────────────────
# LOGGING
# ──────────────────────────────────────────
LOG_LEVEL = os.environ.get("DJANGO_LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} [{levelname}] {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "families": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}


# ──────────────────────────────────────────
# FAMILY DIRECTORY
# ──────────────────────────────────────────
FAMILY_DIRECTORY = {
    "NATIVE_PLACES": [
        "Ahmedabad", "Amreli", "Bhavnagar", "Jamnagar",
        "Junagadh", "Kutch", "Rajkot", "Surat", "Vadodara",
    ],
    "GOTRAS": [
        "Atri", "Bharadwaj", "Gautam", "Jamadagni",
        "Kashyap", "Kaushik", "Vashishtha", "Vishwamitra",
    ],
    "FAMILY_CODE_PREFIX": "FAM",
    "EXPORT_FILENAME": "family_directory.xlsx",
    "EXPORT_SHEET_TITLE": "Family Directory",
}

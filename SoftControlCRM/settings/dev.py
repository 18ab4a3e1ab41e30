"""
Development settings for SoftControlCRM.
"""

import os

from .base import *  # noqa: F403, F401

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

# Override with environment variable DB_ENGINE=sqlite for SQLite
if os.environ.get("DB_ENGINE") == "sqlite":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",  # noqa: F405
        }
    }

if os.environ.get("CACHE_BACKEND") == "locmem":
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        }
    }

# The frontend dev server runs on another port
CSRF_TRUSTED_ORIGINS = [
    "http://localhost:4321",
    "http://127.0.0.1:4321",
]

# Email backend for development
EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"

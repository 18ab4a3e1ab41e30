"""
Celery configuration for background tasks.

Used for the periodic license expiration sweep.
"""
import os

from celery import Celery
from celery.schedules import crontab

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "SoftControlCRM.settings.dev")

app = Celery("SoftControlCRM")

# Load configuration from Django settings
app.config_from_object("django.conf:settings", namespace="CELERY")

# Auto-discover tasks from all installed apps
app.autodiscover_tasks()

app.conf.beat_schedule = {
    "sweep-expired-licenses": {
        "task": "core.tasks.sweep_expired_licenses_task",
        "schedule": crontab(hour=2, minute=0),
    },
}

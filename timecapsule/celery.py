import os
from datetime import timedelta

from celery import Celery
from django.conf import settings


os.environ.setdefault("DJANGO_SETTINGS_MODULE", "timecapsule.settings")

app = Celery("timecapsule")

app.config_from_object("django.conf:settings", namespace="CELERY")

# autodiscovers tasks.py in all INSTALLED_APPS
app.autodiscover_tasks()

# ⏰ Celery Beat schedule
app.conf.beat_schedule = {
    'capsule-unlock-check': {
        'task': 'capsules.tasks.capsule_unlock_handler',
        'schedule': timedelta(seconds=settings.CAPSULE_UNLOCK_INTERVAL_SECONDS),
    },
}

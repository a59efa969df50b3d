"""
PadBank — Celery Application

Background workers and the beat schedule for periodic inventory upkeep.
Broker and result backend come from CELERY_* Django settings.

@file config/celery.py
"""

import os

from celery import Celery
from celery.schedules import crontab

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

app = Celery('padbank')

app.config_from_object('django.conf:settings', namespace='CELERY')

app.autodiscover_tasks()

app.conf.beat_schedule = {
    # Shortly after local midnight so the new calendar day sees expired batches
    'expire-overdue-batches': {
        'task': 'inventory.expire_overdue_batches',
        'schedule': crontab(hour=0, minute=5),
    },
}

app.conf.update(
    result_expires=3600,
    task_time_limit=300,
    task_soft_time_limit=240,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
)

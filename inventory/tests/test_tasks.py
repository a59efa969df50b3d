"""
Tests — Celery task wrapper for the expiry sweep.

@file inventory/tests/test_tasks.py
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from core.models import AuditLog
from inventory.models import InventoryBatch
from inventory.tasks import expire_overdue_batches_task
from tests.factories import InventoryBatchFactory


pytestmark = pytest.mark.django_db


def test_task_expires_and_reports_count():
    batch = InventoryBatchFactory()
    InventoryBatch.objects.filter(pk=batch.pk).update(
        expiry_date=timezone.localdate() - timedelta(days=3),
    )
    result = expire_overdue_batches_task.delay().get()
    assert result == {'expired_count': 1}
    batch.refresh_from_db()
    assert batch.status == InventoryBatch.StatusChoices.EXPIRED
    assert AuditLog.objects.filter(
        action=AuditLog.ActionChoices.STATUS_CHANGE, object_id=str(batch.pk),
    ).exists()


def test_task_is_noop_when_nothing_due():
    InventoryBatchFactory()
    assert expire_overdue_batches_task() == {'expired_count': 0}

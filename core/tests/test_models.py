"""
Core — Model Tests

Tests for AuditLog and the audit service.

@file core/tests/test_models.py
"""

import datetime
from decimal import Decimal

import pytest
from django.contrib.auth.models import AnonymousUser

from core.models import AuditLog
from core.services import AuditService
from tests.factories import AuditLogFactory, InventoryBatchFactory, UserFactory


@pytest.mark.django_db
class TestAuditLog:
    def test_create_audit_log(self):
        user = UserFactory()
        log = AuditService.log(
            actor=user,
            action=AuditLog.ActionChoices.CREATE,
            model_name='TestModel',
            object_id='test-123',
            new_values={'key': 'value'},
        )
        assert log.pk is not None
        assert log.action == 'CREATE'
        assert log.model_name == 'TestModel'
        assert log.actor == user

    def test_anonymous_actor_stored_as_null(self):
        log = AuditService.log(
            actor=AnonymousUser(),
            action=AuditLog.ActionChoices.UPDATE,
            model_name='InventoryBatch',
            object_id='abc',
        )
        assert log.actor is None

    def test_factory(self):
        log = AuditLogFactory()
        assert log.pk is not None
        assert str(log).startswith('CREATE InventoryBatch:')

    def test_snapshot_is_json_ready(self):
        batch = InventoryBatchFactory(unit_cost=Decimal('2.50'))
        snapshot = AuditService.snapshot(batch)
        assert snapshot['pad_batch_id'] == batch.pad_batch_id
        assert snapshot['current_stock'] == batch.current_stock
        assert snapshot['unit_cost'] == '2.50'
        assert snapshot['id'] == str(batch.pk)
        assert datetime.date.fromisoformat(snapshot['date_received']) == batch.date_received

    def test_snapshot_field_subset(self):
        batch = InventoryBatchFactory()
        assert set(AuditService.snapshot(batch, fields=['status', 'current_stock'])) == {
            'status', 'current_stock',
        }

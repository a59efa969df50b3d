"""
Tests — InventoryBatch ledger appends and insert-only child records.

@file inventory/tests/test_models.py
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from core.exceptions import BusinessRuleViolation, InsufficientStockError
from inventory.models import DistributionRecord, InventoryBatch, StockAdjustment
from tests.factories import InventoryBatchFactory, StudentFactory


pytestmark = pytest.mark.django_db


class TestInventoryBatchCreate:

    def test_initial_derived_fields(self):
        batch = InventoryBatchFactory(quantity_supplied=40, low_stock_threshold=5)
        assert batch.current_stock == 40
        assert batch.status == InventoryBatch.StatusChoices.ACTIVE
        assert batch.is_low_stock is False
        assert batch.total_value == Decimal('100.00')

    def test_small_batch_starts_low(self):
        batch = InventoryBatchFactory(quantity_supplied=3, low_stock_threshold=5)
        assert batch.is_low_stock is True

    def test_batch_received_already_expired(self):
        batch = InventoryBatchFactory(expiry_date=timezone.localdate() - timedelta(days=1))
        assert batch.status == InventoryBatch.StatusChoices.EXPIRED

    def test_total_value_none_without_unit_cost(self):
        batch = InventoryBatchFactory(unit_cost=None)
        assert batch.total_value is None

    def test_str(self):
        batch = InventoryBatchFactory(quantity_supplied=12)
        assert str(batch) == f'{batch.pad_batch_id} (Always Ultra, 12/12)'


class TestAppendDistribution:

    def test_decrements_stock(self):
        batch = InventoryBatchFactory(quantity_supplied=10)
        student = StudentFactory()
        record = batch.append_distribution(
            student=student, quantity_distributed=3, distributed_by='Nurse Ada',
        )
        batch.refresh_from_db()
        assert batch.current_stock == 7
        assert batch.total_distributed == 3
        assert record.user_name == student.names
        assert record.reason == DistributionRecord.DEFAULT_REASON

    def test_over_distribution_rejected_and_stock_unchanged(self):
        batch = InventoryBatchFactory(quantity_supplied=4)
        with pytest.raises(InsufficientStockError):
            batch.append_distribution(
                student=StudentFactory(), quantity_distributed=5, distributed_by='Nurse Ada',
            )
        batch.refresh_from_db()
        assert batch.current_stock == 4
        assert not DistributionRecord.objects.filter(batch=batch).exists()

    def test_zero_quantity_rejected(self):
        batch = InventoryBatchFactory()
        with pytest.raises(BusinessRuleViolation):
            batch.append_distribution(
                student=StudentFactory(), quantity_distributed=0, distributed_by='Nurse Ada',
            )

    def test_distributing_everything_depletes(self):
        batch = InventoryBatchFactory(quantity_supplied=2)
        batch.append_distribution(
            student=StudentFactory(), quantity_distributed=2, distributed_by='Nurse Ada',
        )
        batch.refresh_from_db()
        assert batch.current_stock == 0
        assert batch.status == InventoryBatch.StatusChoices.DEPLETED
        assert batch.is_low_stock is True
        assert batch.stock_percentage == 0


class TestAppendAdjustment:

    def test_snapshots_previous_and_new_stock(self):
        batch = InventoryBatchFactory(quantity_supplied=10)
        adjustment = batch.append_adjustment(
            adjustment_type=StockAdjustment.AdjustmentType.ADDITION,
            quantity=5, reason='Late delivery', adjusted_by='Store keeper',
        )
        assert adjustment.previous_stock == 10
        assert adjustment.new_stock == 15
        batch.refresh_from_db()
        assert batch.current_stock == 15

    def test_reduction_clamped(self):
        batch = InventoryBatchFactory(quantity_supplied=4)
        adjustment = batch.append_adjustment(
            adjustment_type=StockAdjustment.AdjustmentType.REDUCTION,
            quantity=10, reason='Water damage', adjusted_by='Store keeper',
        )
        assert adjustment.new_stock == 0
        batch.refresh_from_db()
        assert batch.current_stock == 0

    def test_stock_after_clamp_replays_exactly(self):
        batch = InventoryBatchFactory(quantity_supplied=4)
        batch.append_adjustment(
            adjustment_type=StockAdjustment.AdjustmentType.REDUCTION,
            quantity=10, reason='Water damage', adjusted_by='Store keeper',
        )
        batch.append_adjustment(
            adjustment_type=StockAdjustment.AdjustmentType.ADDITION,
            quantity=6, reason='Restock', adjusted_by='Store keeper',
        )
        batch.refresh_from_db()
        assert batch.current_stock == 6
        assert batch.ledger_totals() == (0, 2)


class TestInsertOnly:

    def test_distribution_record_cannot_be_updated(self):
        batch = InventoryBatchFactory()
        record = batch.append_distribution(
            student=StudentFactory(), quantity_distributed=1, distributed_by='Nurse Ada',
        )
        record.notes = 'edited'
        with pytest.raises(NotImplementedError):
            record.save()

    def test_distribution_record_cannot_be_deleted(self):
        batch = InventoryBatchFactory()
        record = batch.append_distribution(
            student=StudentFactory(), quantity_distributed=1, distributed_by='Nurse Ada',
        )
        with pytest.raises(NotImplementedError):
            record.delete()

    def test_adjustment_cannot_be_updated(self):
        batch = InventoryBatchFactory()
        adjustment = batch.append_adjustment(
            adjustment_type=StockAdjustment.AdjustmentType.ADDITION,
            quantity=1, reason='Found box', adjusted_by='Store keeper',
        )
        adjustment.reason = 'edited'
        with pytest.raises(NotImplementedError):
            adjustment.save()

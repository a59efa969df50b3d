"""
Tests — ReportService: summary, stats, export, per-day report and
distribution analytics.

@file inventory/tests/test_reports.py
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from inventory.models import DistributionRecord, InventoryBatch
from inventory.reports import ReportService
from tests.factories import InventoryBatchFactory, StudentFactory


pytestmark = pytest.mark.django_db


def _distribute(batch, student, quantity=1, days_ago=0):
    record = batch.append_distribution(
        student=student, quantity_distributed=quantity, distributed_by='Nurse Ada',
    )
    if days_ago:
        DistributionRecord.objects.filter(pk=record.pk).update(
            created_at=timezone.now() - timedelta(days=days_ago),
        )
    return record


class TestSummary:

    def test_empty(self):
        assert ReportService.summary() == {
            'total_batches': 0,
            'total_supplied': 0,
            'total_current_stock': 0,
            'active_batches': 0,
            'low_stock_batches': 0,
        }

    def test_totals(self):
        InventoryBatchFactory(quantity_supplied=50)
        low = InventoryBatchFactory(quantity_supplied=4, low_stock_threshold=5)
        InventoryBatchFactory(quantity_supplied=20, expiry_date=timezone.localdate() - timedelta(days=1))
        summary = ReportService.summary()
        assert summary['total_batches'] == 3
        assert summary['total_supplied'] == 74
        assert summary['total_current_stock'] == 74
        assert summary['active_batches'] == 2
        assert summary['low_stock_batches'] == 1
        assert list(ReportService.low_stock_items()) == [low]

    def test_low_stock_excludes_inactive(self):
        batch = InventoryBatchFactory(quantity_supplied=1)
        _distribute(batch, StudentFactory())
        assert list(ReportService.low_stock_items()) == []


class TestStats:

    def test_overview_and_rollups(self):
        InventoryBatchFactory(quantity_supplied=30, unit_cost=Decimal('2.00'))
        InventoryBatchFactory(quantity_supplied=10, unit_cost=Decimal('1.00'), brand_type='Kotex')
        InventoryBatchFactory(
            quantity_supplied=5, unit_cost=None, brand_type='Kotex',
            storage_location='Main Storage Room',
        )
        stats = ReportService.stats()
        overview = stats['overview']
        assert overview['total_batches'] == 3
        assert overview['total_value'] == Decimal('70.00')
        assert overview['depleted_batches'] == 0
        assert overview['expired_batches'] == 0

        assert stats['brand_stats'][0] == {
            'brand_type': 'Always Ultra', 'total_batches': 1, 'total_supplied': 30, 'current_stock': 30,
        }
        assert stats['brand_stats'][1]['total_supplied'] == 15
        assert [row['storage_location'] for row in stats['location_stats']] == [
            'School Clinic', 'Main Storage Room',
        ]

    def test_empty_total_value_is_zero(self):
        assert ReportService.stats()['overview']['total_value'] == 0


class TestExport:

    def test_rows_keyed_by_labels(self):
        batch = InventoryBatchFactory(quantity_supplied=3, low_stock_threshold=5, notes='Shelf B')
        rows = ReportService.export_rows(InventoryBatch.objects.all())
        assert len(rows) == 1
        row = rows[0]
        assert row['Batch ID'] == batch.pad_batch_id
        assert row['Supplier/Donor'] == 'Hope Foundation'
        assert row['Low Stock'] == 'Yes'
        assert row['Date Received'] == batch.date_received.isoformat()
        assert row['Notes'] == 'Shelf B'
        assert list(row)[0] == 'Batch ID'
        assert list(row)[-1] == 'Notes'


class TestDayReport:

    def test_groups_by_brand_and_location(self):
        always = InventoryBatchFactory()
        kotex = InventoryBatchFactory(brand_type='Kotex')
        student = StudentFactory()
        _distribute(always, student, quantity=2)
        _distribute(always, StudentFactory())
        _distribute(kotex, student)
        _distribute(kotex, StudentFactory(), days_ago=1)

        result = ReportService.day_report()
        assert result['date'] == timezone.localdate().isoformat()
        report = result['report']
        assert report['total_pads_distributed'] == 4
        assert report['unique_students_count'] == 2
        assert report['by_brand'] == [
            {'brand': 'Always Ultra', 'location': 'School Clinic', 'count': 3},
            {'brand': 'Kotex', 'location': 'School Clinic', 'count': 1},
        ]

    def test_empty_day(self):
        result = ReportService.day_report(timezone.localdate() - timedelta(days=30))
        assert result['report'] == {
            'total_pads_distributed': 0,
            'unique_students_count': 0,
            'by_brand': [],
        }


class TestInsights:

    def test_empty(self):
        data = ReportService.insights()
        assert data['total_pads_distributed'] == 0
        assert data['days_active'] == 0
        assert data['avg_daily'] == 0
        assert data['time_series'] == []
        assert data['top_donors'] == []
        assert data['breakdown_age'] == []

    def test_single_day_averages_equal_total(self):
        batch = InventoryBatchFactory()
        _distribute(batch, StudentFactory(), quantity=3)
        data = ReportService.insights()
        assert data['days_active'] == 0
        assert data['avg_daily'] == 3
        assert data['avg_monthly'] == 3

    def test_series_donors_and_breakdowns(self):
        hope = InventoryBatchFactory(supplier_donor_name='Hope Foundation')
        unicef = InventoryBatchFactory(supplier_donor_name='UNICEF')
        young = StudentFactory(age=12)
        teen = StudentFactory(age=15, has_disability=True, disability_type='Visual')
        unknown = StudentFactory(age=None, has_disability=True, disability_type='')

        _distribute(hope, young, quantity=2, days_ago=10)
        _distribute(hope, teen, quantity=1, days_ago=10)
        _distribute(unicef, unknown, quantity=1)

        data = ReportService.insights()
        assert data['total_pads_distributed'] == 4
        assert data['total_donors'] == 2
        assert data['days_active'] == 10
        assert data['avg_daily'] == 0
        assert len(data['time_series']) == 2
        assert data['time_series'][-1] == {'date': timezone.localdate().isoformat(), 'quantity': 1}
        assert data['top_donors'] == [
            {'name': 'Hope Foundation', 'total': 3},
            {'name': 'UNICEF', 'total': 1},
        ]
        assert data['breakdown_age'] == [
            {'name': '10-13', 'value': 2},
            {'name': '14-16', 'value': 1},
            {'name': 'Unknown', 'value': 1},
        ]
        assert data['breakdown_disability'] == [
            {'name': 'No Disability', 'value': 3},
            {'name': 'Visual', 'value': 1},
        ]

    def test_top_donors_limited(self, settings):
        settings.PAD_TOP_DONORS_LIMIT = 2
        for name in ('A Org', 'B Org', 'C Org'):
            _distribute(InventoryBatchFactory(supplier_donor_name=name), StudentFactory())
        assert len(ReportService.insights()['top_donors']) == 2

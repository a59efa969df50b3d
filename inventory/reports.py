"""
Inventory — Reporting

Read-only aggregates over batches and their distribution ledger. Nothing
is cached; every call reflects the committed ledger at query time.

@file inventory/reports.py
"""

import datetime

from django.conf import settings
from django.db.models import Case, CharField, Count, F, Max, Min, Q, Sum, Value, When
from django.db.models.functions import Coalesce, TruncDate
from django.utils import timezone

from .dates import day_window, months_between
from .models import DistributionRecord, InventoryBatch

NO_DISABILITY = 'No Disability'
AGE_UNKNOWN = 'Unknown'
AGE_BUCKETS = (
    ('10-13', 10, 14),
    ('14-16', 14, 17),
    ('17-19', 17, 20),
    ('20+', 20, 200),
)

EXPORT_COLUMNS = (
    ('Batch ID', 'pad_batch_id'),
    ('Brand Type', 'brand_type'),
    ('Quantity Supplied', 'quantity_supplied'),
    ('Current Stock', 'current_stock'),
    ('Supplier/Donor', 'supplier_donor_name'),
    ('Date Received', 'date_received'),
    ('Storage Location', 'storage_location'),
    ('Staff in Charge', 'staff_in_charge'),
    ('Staff ID', 'staff_id'),
    ('Status', 'status'),
    ('Low Stock', 'is_low_stock'),
    ('Unit Cost', 'unit_cost'),
    ('Total Value', 'total_value'),
    ('Expiry Date', 'expiry_date'),
    ('Notes', 'notes'),
)


def _age_bucket_expression():
    whens = [
        When(student__age__gte=low, student__age__lt=high, then=Value(label))
        for label, low, high in AGE_BUCKETS
    ]
    return Case(*whens, default=Value(AGE_UNKNOWN), output_field=CharField())


def _disability_expression():
    return Case(
        When(student__has_disability=False, then=Value(NO_DISABILITY)),
        When(student__disability_type='', then=Value(NO_DISABILITY)),
        default=F('student__disability_type'),
        output_field=CharField(),
    )


def _export_value(batch: InventoryBatch, attr: str):
    value = getattr(batch, attr)
    if attr == 'is_low_stock':
        return 'Yes' if value else 'No'
    if isinstance(value, datetime.date):
        return value.isoformat()
    if value is None:
        return ''
    return value


class ReportService:
    """Summary, statistics, export and distribution analytics."""

    @staticmethod
    def low_stock_items():
        return InventoryBatch.objects.filter(
            is_low_stock=True,
            status=InventoryBatch.StatusChoices.ACTIVE,
        ).order_by('current_stock', 'pad_batch_id')

    @staticmethod
    def summary() -> dict:
        totals = InventoryBatch.objects.aggregate(
            total_batches=Count('id'),
            total_supplied=Coalesce(Sum('quantity_supplied'), 0),
            total_current_stock=Coalesce(Sum('current_stock'), 0),
            active_batches=Count('id', filter=Q(status=InventoryBatch.StatusChoices.ACTIVE)),
            low_stock_batches=Count('id', filter=Q(is_low_stock=True)),
        )
        return totals

    @staticmethod
    def stats() -> dict:
        overview = InventoryBatch.objects.aggregate(
            total_batches=Count('id'),
            total_supplied=Coalesce(Sum('quantity_supplied'), 0),
            total_current_stock=Coalesce(Sum('current_stock'), 0),
            total_value=Sum('total_value'),
            active_batches=Count('id', filter=Q(status=InventoryBatch.StatusChoices.ACTIVE)),
            low_stock_batches=Count('id', filter=Q(is_low_stock=True)),
            depleted_batches=Count('id', filter=Q(status=InventoryBatch.StatusChoices.DEPLETED)),
            expired_batches=Count('id', filter=Q(status=InventoryBatch.StatusChoices.EXPIRED)),
        )
        overview['total_value'] = overview['total_value'] or 0

        def rollup(field: str) -> list[dict]:
            rows = (
                InventoryBatch.objects
                .values(field)
                .annotate(
                    total_batches=Count('id'),
                    total_supplied=Sum('quantity_supplied'),
                    current_stock=Sum('current_stock'),
                )
                .order_by('-total_supplied', field)
            )
            return [
                {
                    field: row[field],
                    'total_batches': row['total_batches'],
                    'total_supplied': row['total_supplied'],
                    'current_stock': row['current_stock'],
                }
                for row in rows
            ]

        return {
            'overview': overview,
            'brand_stats': rollup('brand_type'),
            'location_stats': rollup('storage_location'),
        }

    @staticmethod
    def export_rows(queryset) -> list[dict]:
        return [
            {label: _export_value(batch, attr) for label, attr in EXPORT_COLUMNS}
            for batch in queryset
        ]

    @staticmethod
    def day_report(day: datetime.date | None = None) -> dict:
        """Distributions on one local calendar day, grouped by brand and location."""
        day = day or timezone.localdate()
        start, end = day_window(day)
        records = DistributionRecord.objects.filter(created_at__gte=start, created_at__lt=end)

        totals = records.aggregate(
            total_pads_distributed=Coalesce(Sum('quantity_distributed'), 0),
            unique_students_count=Count('student', distinct=True),
        )
        by_brand = (
            records
            .values(brand=F('batch__brand_type'), location=F('batch__storage_location'))
            .annotate(count=Sum('quantity_distributed'))
            .order_by('brand', 'location')
        )
        return {
            'date': day.isoformat(),
            'report': {
                'total_pads_distributed': totals['total_pads_distributed'],
                'unique_students_count': totals['unique_students_count'],
                'by_brand': list(by_brand),
            },
        }

    @staticmethod
    def insights() -> dict:
        """
        Distribution analytics across the whole ledger: totals, averages
        over the active span, a per-day series, top donors and demographic
        breakdowns joined from the student registry.
        """
        records = DistributionRecord.objects.all()
        totals = records.aggregate(
            total_pads_distributed=Coalesce(Sum('quantity_distributed'), 0),
            total_donors=Count('batch__supplier_donor_name', distinct=True),
            first=Min('created_at'),
            last=Max('created_at'),
        )
        total = totals['total_pads_distributed']

        days_active = months_active = 0
        if totals['first'] is not None:
            first = timezone.localtime(totals['first']).date()
            last = timezone.localtime(totals['last']).date()
            days_active = (last - first).days
            months_active = months_between(first, last)

        time_series = (
            records
            .annotate(day=TruncDate('created_at'))
            .values('day')
            .annotate(quantity=Sum('quantity_distributed'))
            .order_by('day')
        )
        top_donors = (
            records
            .values(name=F('batch__supplier_donor_name'))
            .annotate(total=Sum('quantity_distributed'))
            .order_by('-total', 'name')[:settings.PAD_TOP_DONORS_LIMIT]
        )
        age_rows = {
            row['bucket']: row['value']
            for row in records
            .annotate(bucket=_age_bucket_expression())
            .values('bucket')
            .annotate(value=Sum('quantity_distributed'))
            .order_by()
        }
        age_order = [label for label, _, _ in AGE_BUCKETS] + [AGE_UNKNOWN]
        disability_rows = (
            records
            .annotate(name=_disability_expression())
            .values('name')
            .annotate(value=Sum('quantity_distributed'))
            .order_by('-value', 'name')
        )

        return {
            'total_pads_distributed': total,
            'total_donors': totals['total_donors'],
            'days_active': days_active,
            'months_active': months_active,
            'avg_daily': round(total / days_active) if days_active > 0 else total,
            'avg_monthly': round(total / months_active) if months_active > 0 else total,
            'time_series': [
                {'date': row['day'].isoformat(), 'quantity': row['quantity']}
                for row in time_series
            ],
            'top_donors': list(top_donors),
            'breakdown_age': [
                {'name': label, 'value': age_rows[label]}
                for label in age_order if label in age_rows
            ],
            'breakdown_disability': list(disability_rows),
        }

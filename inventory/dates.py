"""
Inventory — Calendar Day Helpers

The daily distribution cap and the per-day report both work on the local
calendar day (settings.TIME_ZONE), midnight to midnight.

@file inventory/dates.py
"""

import datetime

from django.utils import timezone


def day_window(day: datetime.date | None = None) -> tuple[datetime.datetime, datetime.datetime]:
    """Return aware [start, end) datetimes bounding ``day`` in local time."""
    day = day or timezone.localdate()
    start = timezone.make_aware(datetime.datetime.combine(day, datetime.time.min))
    end = timezone.make_aware(datetime.datetime.combine(day + datetime.timedelta(days=1), datetime.time.min))
    return start, end


def months_between(first: datetime.date, last: datetime.date) -> int:
    """Number of calendar-month boundaries crossed from ``first`` to ``last``."""
    return (last.year - first.year) * 12 + (last.month - first.month)

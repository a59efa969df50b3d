"""
Inventory — Pad Batch Identifiers

Human-readable batch IDs of the form

    PAD/{YYYYMMDD}/{BRAND}/{SUPPLIER}/{NNN}

BRAND is the first three letters of the brand name (spaces removed,
upper-cased), SUPPLIER the initials of up to three supplier words, and NNN
a random suffix in 100-999. The suffix is not collision-free; uniqueness
is enforced by the caller against the database.

@file inventory/identifiers.py
"""

import datetime
import secrets

from django.utils import timezone

SUFFIX_MIN = 100
SUFFIX_MAX = 999


def brand_code(brand_type: str) -> str:
    return ''.join(brand_type.split())[:3].upper()


def supplier_initials(supplier_name: str) -> str:
    return ''.join(word[0].upper() for word in supplier_name.split())[:3]


def _random_suffix() -> int:
    return SUFFIX_MIN + secrets.randbelow(SUFFIX_MAX - SUFFIX_MIN + 1)


def generate_pad_batch_id(
    brand_type: str,
    supplier_name: str,
    on_date: datetime.date | None = None,
) -> str:
    """Build one candidate ID. Two calls may return the same value."""
    on_date = on_date or timezone.localdate()
    return '/'.join([
        'PAD',
        on_date.strftime('%Y%m%d'),
        brand_code(brand_type),
        supplier_initials(supplier_name),
        str(_random_suffix()),
    ])

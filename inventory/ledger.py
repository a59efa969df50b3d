"""
Inventory — Ledger Arithmetic

Pure functions that derive a batch's stock figures from its immutable
intake quantity and its two append-only histories. Nothing here touches
the database; the model feeds in aggregated totals and writes the result
back inside the same transaction as the append.

Stock rule:
    current_stock = quantity_supplied
                    - sum(distributed quantities)
                    + sum(adjustment.new_stock - adjustment.previous_stock)

Each adjustment's snapshot delta equals +quantity for an addition and
-quantity for a reduction or correction, except when a reduction was
clamped at zero; the snapshot keeps the clamped delta so replaying the
history always lands on the stock that was actually recorded.

@file inventory/ledger.py
"""

import datetime
from decimal import Decimal
from typing import NamedTuple

STATUS_ACTIVE = 'active'
STATUS_DEPLETED = 'depleted'
STATUS_EXPIRED = 'expired'
STATUS_DAMAGED = 'damaged'

ADJUSTMENT_ADDITION = 'addition'
ADJUSTMENT_REDUCTION = 'reduction'
ADJUSTMENT_CORRECTION = 'correction'


class LedgerState(NamedTuple):
    current_stock: int
    is_low_stock: bool
    status: str
    total_value: Decimal | None


def stock_after_adjustment(adjustment_type: str, quantity: int, current_stock: int) -> int:
    """
    Stock level once an adjustment is applied.

    Reductions and corrections never push stock below zero; the excess is
    dropped rather than rejected.
    """
    if adjustment_type == ADJUSTMENT_ADDITION:
        return current_stock + quantity
    if adjustment_type in (ADJUSTMENT_REDUCTION, ADJUSTMENT_CORRECTION):
        return max(0, current_stock - quantity)
    raise ValueError(f'Unknown adjustment type: {adjustment_type}')


def derive_status(
    *,
    current_stock: int,
    expiry_date: datetime.date | None,
    status: str,
    today: datetime.date,
) -> str:
    """
    damaged is sticky until cleared explicitly; otherwise an elapsed expiry
    wins over stock level, and any positive stock is active again.
    """
    if status == STATUS_DAMAGED:
        return STATUS_DAMAGED
    if expiry_date is not None and expiry_date < today:
        return STATUS_EXPIRED
    if current_stock <= 0:
        return STATUS_DEPLETED
    return STATUS_ACTIVE


def derive_state(
    *,
    quantity_supplied: int,
    total_distributed: int,
    net_adjustment: int,
    low_stock_threshold: int,
    expiry_date: datetime.date | None,
    unit_cost: Decimal | None,
    status: str,
    today: datetime.date,
) -> LedgerState:
    """Recompute every derived field of a batch from stored data."""
    current_stock = quantity_supplied - total_distributed + net_adjustment
    total_value = None
    if unit_cost is not None:
        total_value = Decimal(current_stock) * Decimal(unit_cost)
    return LedgerState(
        current_stock=current_stock,
        is_low_stock=current_stock <= low_stock_threshold,
        status=derive_status(
            current_stock=current_stock,
            expiry_date=expiry_date,
            status=status,
            today=today,
        ),
        total_value=total_value,
    )


def stock_percentage(current_stock: int, quantity_supplied: int) -> float:
    if not quantity_supplied:
        return 0
    return current_stock / quantity_supplied * 100

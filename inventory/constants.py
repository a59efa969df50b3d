"""
Inventory — Shared Constants

Field sets shared by the service layer and the write serializers.

@file inventory/constants.py
"""

CREATE_FIELDS = (
    'brand_type', 'quantity_supplied', 'supplier_donor_name', 'date_received',
    'storage_location', 'staff_in_charge', 'staff_id', 'expiry_date',
    'unit_cost', 'notes', 'low_stock_threshold',
)
MUTABLE_FIELDS = (
    'brand_type', 'supplier_donor_name', 'date_received', 'storage_location',
    'staff_in_charge', 'staff_id', 'expiry_date', 'unit_cost', 'notes',
    'low_stock_threshold', 'status',
)
PROTECTED_FIELDS = frozenset({
    'pad_batch_id', 'quantity_supplied', 'current_stock', 'is_low_stock',
    'total_value', 'distribution_records', 'stock_adjustments',
    'total_distributed', 'stock_percentage',
})
STRIPPED_FIELDS = ('supplier_donor_name', 'staff_in_charge', 'staff_id', 'notes')

CHECKOUT_REASON = 'Daily distribution'
SELECTION_ATTEMPTS = 3

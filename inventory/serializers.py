"""
Inventory — Serializers

Read serializers for batches and their ledgers, write serializers for
intake, metadata updates, distributions and adjustments, and the small
query serializers behind the checkout and report endpoints.

@file inventory/serializers.py
"""

from rest_framework import serializers

from .models import DistributionRecord, InventoryBatch, StockAdjustment
from .constants import PROTECTED_FIELDS


# ---------------------------------------------------------------------------
# Ledger entries
# ---------------------------------------------------------------------------

class DistributionRecordSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(source='student_id', read_only=True)
    student_number = serializers.CharField(source='student.student_number', read_only=True)

    class Meta:
        model = DistributionRecord
        fields = [
            'id', 'user_id', 'student_number', 'user_name',
            'quantity_distributed', 'distributed_by', 'reason', 'notes',
            'created_at',
        ]
        read_only_fields = fields


class StockAdjustmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = StockAdjustment
        fields = [
            'id', 'adjustment_type', 'quantity', 'reason', 'adjusted_by',
            'previous_stock', 'new_stock', 'created_at',
        ]
        read_only_fields = fields


# ---------------------------------------------------------------------------
# InventoryBatch
# ---------------------------------------------------------------------------

class InventoryBatchListSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    stock_percentage = serializers.FloatField(read_only=True)

    class Meta:
        model = InventoryBatch
        fields = [
            'id', 'pad_batch_id', 'brand_type', 'quantity_supplied',
            'current_stock', 'stock_percentage', 'supplier_donor_name',
            'date_received', 'storage_location', 'staff_in_charge', 'staff_id',
            'expiry_date', 'status', 'status_display', 'unit_cost', 'total_value',
            'low_stock_threshold', 'is_low_stock', 'notes',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class InventoryBatchDetailSerializer(InventoryBatchListSerializer):
    total_distributed = serializers.IntegerField(read_only=True)
    distribution_records = DistributionRecordSerializer(many=True, read_only=True)
    stock_adjustments = StockAdjustmentSerializer(many=True, read_only=True)

    class Meta(InventoryBatchListSerializer.Meta):
        fields = InventoryBatchListSerializer.Meta.fields + [
            'total_distributed', 'distribution_records', 'stock_adjustments',
        ]
        read_only_fields = fields


class InventoryBatchCreateSerializer(serializers.ModelSerializer):
    low_stock_threshold = serializers.IntegerField(min_value=0, required=False)

    class Meta:
        model = InventoryBatch
        fields = [
            'brand_type', 'quantity_supplied', 'supplier_donor_name',
            'date_received', 'storage_location', 'staff_in_charge', 'staff_id',
            'expiry_date', 'unit_cost', 'notes', 'low_stock_threshold',
        ]

    def validate_quantity_supplied(self, value):
        if value < 1:
            raise serializers.ValidationError('Quantity supplied must be at least 1.')
        return value

    def validate_supplier_donor_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Supplier/donor name is required.')
        return value

    def validate(self, attrs):
        expiry = attrs.get('expiry_date')
        received = attrs.get('date_received')
        if expiry and received and expiry < received:
            raise serializers.ValidationError(
                {'expiry_date': 'Expiry date cannot be before the date received.'},
            )
        return attrs


class InventoryBatchUpdateSerializer(serializers.ModelSerializer):
    """Metadata edits. Protected keys in the payload are reported, not ignored."""

    low_stock_threshold = serializers.IntegerField(min_value=0, required=False)
    status = serializers.ChoiceField(choices=InventoryBatch.StatusChoices.choices, required=False)

    class Meta:
        model = InventoryBatch
        fields = [
            'brand_type', 'supplier_donor_name', 'date_received',
            'storage_location', 'staff_in_charge', 'staff_id',
            'expiry_date', 'unit_cost', 'notes', 'low_stock_threshold', 'status',
        ]
        extra_kwargs = {field: {'required': False} for field in fields}

    def protected_keys(self) -> list[str]:
        return sorted(PROTECTED_FIELDS.intersection(self.initial_data))


class BulkInventoryCreateSerializer(serializers.Serializer):
    items = serializers.ListField(
        child=serializers.DictField(), allow_empty=False, max_length=500,
    )


# ---------------------------------------------------------------------------
# Distribution / adjustment payloads
# ---------------------------------------------------------------------------

class ManualDistributionSerializer(serializers.Serializer):
    user_id = serializers.CharField(max_length=64)
    user_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    quantity_distributed = serializers.IntegerField(min_value=1)
    distributed_by = serializers.CharField(max_length=255)
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class StockAdjustmentCreateSerializer(serializers.Serializer):
    adjustment_type = serializers.ChoiceField(choices=StockAdjustment.AdjustmentType.choices)
    quantity = serializers.IntegerField(min_value=1)
    reason = serializers.CharField(max_length=255)
    adjusted_by = serializers.CharField(max_length=255)


class CheckoutSerializer(serializers.Serializer):
    student_user_id = serializers.CharField(max_length=64)
    staff_id = serializers.CharField(max_length=64)
    staff_name = serializers.CharField(max_length=255)
    brand_preference = serializers.ChoiceField(
        choices=InventoryBatch.BrandChoices.choices, required=False, allow_blank=True, default='',
    )
    storage_location = serializers.ChoiceField(
        choices=InventoryBatch.LocationChoices.choices, required=False, allow_blank=True, default='',
    )
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class EligibilityQuerySerializer(serializers.Serializer):
    storage_location = serializers.ChoiceField(
        choices=InventoryBatch.LocationChoices.choices, required=False, allow_blank=True, default='',
    )
    brand_preference = serializers.ChoiceField(
        choices=InventoryBatch.BrandChoices.choices, required=False, allow_blank=True, default='',
    )


class ReportDateSerializer(serializers.Serializer):
    date = serializers.DateField(required=False)


class ExportQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=InventoryBatch.StatusChoices.choices, required=False)
    brand_type = serializers.ChoiceField(choices=InventoryBatch.BrandChoices.choices, required=False)
    storage_location = serializers.ChoiceField(
        choices=InventoryBatch.LocationChoices.choices, required=False,
    )


# ---------------------------------------------------------------------------
# Response payloads
# ---------------------------------------------------------------------------

def checkout_payload(record: DistributionRecord, batch: InventoryBatch, student, *, staff_id, staff_name) -> dict:
    """Checkout result; previous_stock is reconstructed from the post-commit figure."""
    return {
        'distribution': {
            **DistributionRecordSerializer(record).data,
            'batch_id': batch.pad_batch_id,
            'brand_type': batch.brand_type,
        },
        'student': {
            'user_id': str(student.pk),
            'student_number': student.student_number,
            'name': student.names,
        },
        'inventory': {
            'batch_id': batch.pad_batch_id,
            'brand_type': batch.brand_type,
            'previous_stock': batch.current_stock + record.quantity_distributed,
            'current_stock': batch.current_stock,
            'storage_location': batch.storage_location,
            'is_low_stock': batch.is_low_stock,
        },
        'staff': {
            'staff_id': staff_id,
            'staff_name': staff_name,
        },
    }


def eligibility_payload(result: dict) -> dict:
    student = result['student']
    last = result['last_distribution']
    suggested = result['suggested_batch']
    return {
        'student': {
            'user_id': str(student.pk),
            'student_number': student.student_number,
            'name': student.names,
        },
        'eligible': result['eligible'],
        'reasons': {
            'student_inactive': result['student_inactive'],
            'already_received_today': result['already_received_today'],
            'no_stock_available': result['no_stock_available'],
        },
        'last_distribution': {
            'date': last.created_at.isoformat(),
            'batch_id': last.batch.pad_batch_id,
        } if last else None,
        'available_stock': result['available_stock'],
        'suggested_batch': {
            'batch_id': suggested.pad_batch_id,
            'brand_type': suggested.brand_type,
            'storage_location': suggested.storage_location,
            'current_stock': suggested.current_stock,
        } if suggested else None,
    }


class StudentHistorySerializer(serializers.ModelSerializer):
    """One history row: the distribution plus the batch it came from."""

    pad_batch_id = serializers.CharField(source='batch.pad_batch_id', read_only=True)
    brand_type = serializers.CharField(source='batch.brand_type', read_only=True)
    storage_location = serializers.CharField(source='batch.storage_location', read_only=True)
    distribution = DistributionRecordSerializer(source='*', read_only=True)

    class Meta:
        model = DistributionRecord
        fields = ['id', 'pad_batch_id', 'brand_type', 'storage_location', 'distribution']
        read_only_fields = fields

"""
Inventory — Django Admin Configuration

Batch admin with stock and status badges. The distribution and adjustment
ledgers are shown read-only; they are appended through the API so the
derived stock figures stay consistent.

@file inventory/admin.py
"""

from django.contrib import admin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import DistributionRecord, InventoryBatch, StockAdjustment

STATUS_COLORS = {
    InventoryBatch.StatusChoices.ACTIVE: '#28a745',
    InventoryBatch.StatusChoices.DEPLETED: '#6c757d',
    InventoryBatch.StatusChoices.EXPIRED: '#dc3545',
    InventoryBatch.StatusChoices.DAMAGED: '#fd7e14',
}


class ReadOnlyInline(admin.TabularInline):
    extra = 0
    can_delete = False
    show_change_link = False

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False


class DistributionRecordInline(ReadOnlyInline):
    model = DistributionRecord
    fields = ('created_at', 'student', 'user_name', 'quantity_distributed', 'distributed_by', 'reason')
    readonly_fields = fields


class StockAdjustmentInline(ReadOnlyInline):
    model = StockAdjustment
    fields = ('created_at', 'adjustment_type', 'quantity', 'previous_stock', 'new_stock', 'adjusted_by', 'reason')
    readonly_fields = fields


@admin.register(InventoryBatch)
class InventoryBatchAdmin(admin.ModelAdmin):
    list_display = (
        'pad_batch_id', 'brand_type', 'storage_location',
        'stock_display', 'status_badge', 'low_stock_flag',
        'supplier_donor_name', 'date_received', 'expiry_date',
    )
    list_filter = ('status', 'brand_type', 'storage_location', 'is_low_stock')
    search_fields = ('pad_batch_id', 'supplier_donor_name', 'staff_in_charge', 'staff_id')
    readonly_fields = (
        'id', 'pad_batch_id', 'quantity_supplied', 'current_stock',
        'is_low_stock', 'status', 'total_value',
        'created_at', 'updated_at', 'created_by', 'updated_by',
    )
    date_hierarchy = 'date_received'
    list_per_page = 30
    ordering = ('-created_at',)
    inlines = [DistributionRecordInline, StockAdjustmentInline]

    fieldsets = (
        (_('Batch'), {
            'fields': ('id', 'pad_batch_id', 'brand_type', 'quantity_supplied', 'supplier_donor_name'),
        }),
        (_('Storage'), {
            'fields': ('storage_location', 'date_received', 'expiry_date', 'staff_in_charge', 'staff_id'),
        }),
        (_('Stock'), {
            'fields': ('current_stock', 'low_stock_threshold', 'is_low_stock', 'status', 'unit_cost', 'total_value'),
        }),
        (_('Notes'), {
            'fields': ('notes',),
        }),
        (_('Audit'), {
            'fields': ('created_at', 'updated_at', 'created_by', 'updated_by'),
            'classes': ('collapse',),
        }),
    )

    def has_add_permission(self, request):
        return False

    def save_model(self, request, obj, form, change):
        obj.refresh_derived()
        obj.updated_by = request.user
        super().save_model(request, obj, form, change)

    @admin.display(description=_('Stock'))
    def stock_display(self, obj):
        return f'{obj.current_stock} / {obj.quantity_supplied}'

    @admin.display(description=_('Status'), ordering='status')
    def status_badge(self, obj):
        color = STATUS_COLORS.get(obj.status, '#6c757d')
        return format_html(
            '<span style="background:{};color:#fff;padding:2px 8px;border-radius:3px;">{}</span>',
            color, obj.get_status_display(),
        )

    @admin.display(description=_('Low'), boolean=True, ordering='is_low_stock')
    def low_stock_flag(self, obj):
        return obj.is_low_stock

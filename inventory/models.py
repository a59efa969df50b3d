"""
Inventory — Models

One InventoryBatch per physical supply batch, with two insert-only child
ledgers: DistributionRecord (handouts to students) and StockAdjustment
(manual corrections). current_stock, is_low_stock, status and total_value
are never set by callers; they are recomputed from the ledgers by
inventory.ledger after every append, inside the caller's transaction.

@file inventory/models.py
"""

import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models, transaction
from django.db.models import F, IntegerField, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.exceptions import BusinessRuleViolation, InsufficientStockError
from core.models import BaseModel

from . import ledger

DERIVED_FIELDS = ('current_stock', 'is_low_stock', 'status', 'total_value')


class InventoryBatch(BaseModel):
    """
    A received or donated shipment of sanitary pads.

    pad_batch_id and quantity_supplied are fixed at intake. Provenance
    metadata may be edited; the derived stock fields may not.
    """

    class BrandChoices(models.TextChoices):
        ALWAYS_ULTRA = 'Always Ultra', _('Always Ultra')
        WHISPER_CHOICE = 'Whisper Choice', _('Whisper Choice')
        STAYFREE = 'Stayfree', _('Stayfree')
        KOTEX = 'Kotex', _('Kotex')
        CAREFREE = 'Carefree', _('Carefree')
        GENERIC = 'Generic Brand', _('Generic Brand')
        DONATED = 'Donated Pads', _('Donated Pads')
        OTHER = 'Other', _('Other')

    class LocationChoices(models.TextChoices):
        SCHOOL_CLINIC = 'School Clinic', _('School Clinic')
        PAD_BANK_ROOM = 'Designated Pad Bank Room', _('Designated Pad Bank Room')
        ADMIN_OFFICE = 'Administrative Office', _('Administrative Office')
        NURSE_OFFICE = "Nurse's Office", _("Nurse's Office")
        CHANGING_ROOM = "Girls' Changing Room", _("Girls' Changing Room")
        MAIN_STORAGE = 'Main Storage Room', _('Main Storage Room')
        OTHER = 'Other', _('Other')

    class StatusChoices(models.TextChoices):
        ACTIVE = ledger.STATUS_ACTIVE, _('Active')
        DEPLETED = ledger.STATUS_DEPLETED, _('Depleted')
        EXPIRED = ledger.STATUS_EXPIRED, _('Expired')
        DAMAGED = ledger.STATUS_DAMAGED, _('Damaged')

    pad_batch_id = models.CharField(
        _('pad batch ID'), max_length=64, unique=True, editable=False,
        help_text=_('PAD/YYYYMMDD/BRAND/SUPPLIER/NNN'),
    )
    brand_type = models.CharField(
        _('brand / type'), max_length=32,
        choices=BrandChoices.choices, db_index=True,
    )
    quantity_supplied = models.PositiveIntegerField(
        _('quantity supplied'), validators=[MinValueValidator(1)],
    )
    current_stock = models.PositiveIntegerField(
        _('current stock'), default=0, editable=False, db_index=True,
    )
    supplier_donor_name = models.CharField(
        _('supplier / donor name'), max_length=255, db_index=True,
    )
    date_received = models.DateField(_('date received'), db_index=True)
    storage_location = models.CharField(
        _('storage location'), max_length=32,
        choices=LocationChoices.choices, db_index=True,
    )
    staff_in_charge = models.CharField(_('staff in charge'), max_length=255)
    staff_id = models.CharField(_('staff ID'), max_length=64, db_index=True)
    expiry_date = models.DateField(_('expiry date'), null=True, blank=True, db_index=True)
    status = models.CharField(
        _('status'), max_length=10,
        choices=StatusChoices.choices,
        default=StatusChoices.ACTIVE,
        db_index=True,
    )
    unit_cost = models.DecimalField(
        _('unit cost'), max_digits=12, decimal_places=2,
        null=True, blank=True, validators=[MinValueValidator(0)],
    )
    total_value = models.DecimalField(
        _('total value'), max_digits=14, decimal_places=2,
        null=True, blank=True, editable=False,
    )
    low_stock_threshold = models.PositiveIntegerField(
        _('low stock threshold'), default=10,
    )
    is_low_stock = models.BooleanField(
        _('low stock'), default=False, editable=False, db_index=True,
    )
    notes = models.TextField(_('notes'), blank=True)

    class Meta:
        verbose_name = _('inventory batch')
        verbose_name_plural = _('inventory batches')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'storage_location'], name='inv_status_location_idx'),
            models.Index(fields=['brand_type', 'storage_location'], name='inv_brand_location_idx'),
            models.Index(fields=['is_low_stock', 'status'], name='inv_lowstock_status_idx'),
            models.Index(fields=['status', 'expiry_date'], name='inv_status_expiry_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity_supplied__gt=0),
                name='inv_positive_quantity_supplied',
            ),
            models.CheckConstraint(
                condition=models.Q(current_stock__gte=0),
                name='inv_non_negative_stock',
            ),
        ]

    def __str__(self):
        return f'{self.pad_batch_id} ({self.brand_type}, {self.current_stock}/{self.quantity_supplied})'

    def save(self, *args, **kwargs):
        if self._state.adding:
            self.refresh_derived()
        super().save(*args, **kwargs)

    # --- Derived figures ---

    @property
    def total_distributed(self) -> int:
        if self._state.adding:
            return 0
        return sum(record.quantity_distributed for record in self.distribution_records.all())

    @property
    def stock_percentage(self) -> float:
        return ledger.stock_percentage(self.current_stock, self.quantity_supplied)

    def ledger_totals(self) -> tuple[int, int]:
        """(sum distributed, net adjustment delta) read fresh from the ledgers."""
        if self._state.adding:
            return 0, 0
        distributed = self.distribution_records.aggregate(
            total=Coalesce(Sum('quantity_distributed'), Value(0)),
        )['total']
        net_adjustment = self.stock_adjustments.aggregate(
            total=Coalesce(
                Sum(F('new_stock') - F('previous_stock'), output_field=IntegerField()),
                Value(0),
                output_field=IntegerField(),
            ),
        )['total']
        return distributed, net_adjustment

    def refresh_derived(self, today=None) -> ledger.LedgerState:
        distributed, net_adjustment = self.ledger_totals()
        state = ledger.derive_state(
            quantity_supplied=self.quantity_supplied,
            total_distributed=distributed,
            net_adjustment=net_adjustment,
            low_stock_threshold=self.low_stock_threshold,
            expiry_date=self.expiry_date,
            unit_cost=self.unit_cost,
            status=self.status,
            today=today or timezone.localdate(),
        )
        self.current_stock, self.is_low_stock, self.status, self.total_value = state
        return state

    def _persist_derived(self, actor=None):
        self.refresh_derived()
        self.updated_by = actor if getattr(actor, 'is_authenticated', False) else None
        self.save(update_fields=[*DERIVED_FIELDS, 'updated_by', 'updated_at'])

    # --- Ledger appends (caller holds the row lock) ---

    @transaction.atomic
    def append_distribution(
        self,
        *,
        student,
        quantity_distributed: int,
        distributed_by: str,
        user_name: str = '',
        reason: str = '',
        notes: str = '',
        actor=None,
    ) -> 'DistributionRecord':
        if quantity_distributed < 1:
            raise BusinessRuleViolation(detail='Quantity distributed must be at least 1.')
        if quantity_distributed > self.current_stock:
            raise InsufficientStockError(
                detail=(
                    f'Insufficient stock for distribution: '
                    f'current_stock={self.current_stock}, requested={quantity_distributed}.'
                ),
            )
        record = DistributionRecord(
            batch=self,
            student=student,
            user_name=user_name or student.names,
            quantity_distributed=quantity_distributed,
            distributed_by=distributed_by,
            reason=reason or DistributionRecord.DEFAULT_REASON,
            notes=notes or '',
            created_by=actor if getattr(actor, 'is_authenticated', False) else None,
        )
        record.save()
        self._persist_derived(actor)
        return record

    @transaction.atomic
    def append_adjustment(
        self,
        *,
        adjustment_type: str,
        quantity: int,
        reason: str,
        adjusted_by: str,
        actor=None,
    ) -> 'StockAdjustment':
        if quantity < 1:
            raise BusinessRuleViolation(detail='Adjustment quantity must be at least 1.')
        previous_stock = self.current_stock
        adjustment = StockAdjustment(
            batch=self,
            adjustment_type=adjustment_type,
            quantity=quantity,
            reason=reason,
            adjusted_by=adjusted_by,
            previous_stock=previous_stock,
            new_stock=ledger.stock_after_adjustment(adjustment_type, quantity, previous_stock),
            created_by=actor if getattr(actor, 'is_authenticated', False) else None,
        )
        adjustment.save()
        self._persist_derived(actor)
        return adjustment


class DistributionRecord(models.Model):
    """
    One handout of pads from a batch to a student (insert only).

    user_name is a snapshot of the student's name at distribution time.
    """

    DEFAULT_REASON = 'Monthly allocation'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    batch = models.ForeignKey(
        InventoryBatch,
        on_delete=models.PROTECT,
        related_name='distribution_records',
        verbose_name=_('batch'),
    )
    student = models.ForeignKey(
        'students.Student',
        on_delete=models.PROTECT,
        related_name='distributions',
        verbose_name=_('student'),
    )
    user_name = models.CharField(_('student name'), max_length=255)
    quantity_distributed = models.PositiveIntegerField(
        _('quantity distributed'), validators=[MinValueValidator(1)],
    )
    distributed_by = models.CharField(_('distributed by'), max_length=255)
    reason = models.CharField(_('reason'), max_length=255, default=DEFAULT_REASON)
    notes = models.TextField(_('notes'), blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True,
        on_delete=models.SET_NULL,
        related_name='+',
        verbose_name=_('created by'),
    )
    created_at = models.DateTimeField(
        _('created at'), default=timezone.now, editable=False, db_index=True,
    )

    class Meta:
        verbose_name = _('distribution record')
        verbose_name_plural = _('distribution records')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['student', 'created_at'], name='dist_student_created_idx'),
            models.Index(fields=['batch', 'created_at'], name='dist_batch_created_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity_distributed__gte=1),
                name='dist_positive_quantity',
            ),
        ]

    def __str__(self):
        return f'{self.quantity_distributed} x {self.batch_id} -> {self.user_name}'

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise NotImplementedError('DistributionRecord is insert-only; updates are not allowed.')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise NotImplementedError('DistributionRecord records cannot be deleted.')


class StockAdjustment(models.Model):
    """
    A manual stock correction (insert only).

    previous_stock / new_stock are snapshotted when the adjustment is
    recorded and never recomputed.
    """

    class AdjustmentType(models.TextChoices):
        ADDITION = ledger.ADJUSTMENT_ADDITION, _('Addition')
        REDUCTION = ledger.ADJUSTMENT_REDUCTION, _('Reduction')
        CORRECTION = ledger.ADJUSTMENT_CORRECTION, _('Correction')

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    batch = models.ForeignKey(
        InventoryBatch,
        on_delete=models.CASCADE,
        related_name='stock_adjustments',
        verbose_name=_('batch'),
    )
    adjustment_type = models.CharField(
        _('adjustment type'), max_length=12,
        choices=AdjustmentType.choices,
    )
    quantity = models.PositiveIntegerField(_('quantity'), validators=[MinValueValidator(1)])
    reason = models.CharField(_('reason'), max_length=255)
    adjusted_by = models.CharField(_('adjusted by'), max_length=255)
    previous_stock = models.PositiveIntegerField(_('previous stock'))
    new_stock = models.PositiveIntegerField(_('new stock'))
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True,
        on_delete=models.SET_NULL,
        related_name='+',
        verbose_name=_('created by'),
    )
    created_at = models.DateTimeField(
        _('created at'), default=timezone.now, editable=False, db_index=True,
    )

    class Meta:
        verbose_name = _('stock adjustment')
        verbose_name_plural = _('stock adjustments')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['batch', 'created_at'], name='adj_batch_created_idx'),
        ]

    def __str__(self):
        return f'{self.adjustment_type} {self.quantity} on {self.batch_id}: {self.previous_stock} -> {self.new_stock}'

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise NotImplementedError('StockAdjustment is insert-only; updates are not allowed.')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise NotImplementedError('StockAdjustment records cannot be deleted.')

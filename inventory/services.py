"""
Inventory — Service Layer

Batch lifecycle, the checkout (distribution) workflow and stock
adjustments. Every public mutation is one transaction.atomic unit: the
eligibility reads, the ledger append, the derived-field recompute and the
audit entry commit together or not at all.

Concurrency: the batch row is locked with select_for_update before its
stock is read, and checkout also locks the student row so two requests
for the same student serialise on the daily-cap check.

@file inventory/services.py
"""

import logging

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import F, Q
from django.utils import timezone
from rest_framework.exceptions import APIException

from core.constants import (
    AUDIT_ACTION_ADJUST,
    AUDIT_ACTION_CREATE,
    AUDIT_ACTION_DELETE,
    AUDIT_ACTION_DISTRIBUTE,
    AUDIT_ACTION_STATUS_CHANGE,
    AUDIT_ACTION_UPDATE,
)
from core.exceptions import (
    AlreadyDistributedToday,
    BatchIdGenerationExhausted,
    BulkCreateFailed,
    BusinessRuleViolation,
    ImmutableFieldError,
    NoStockAvailable,
    ResourceNotFoundError,
)
from core.services import AuditService
from students.models import Student
from students.services import StudentService

from .constants import (
    CHECKOUT_REASON,
    CREATE_FIELDS,
    MUTABLE_FIELDS,
    PROTECTED_FIELDS,
    SELECTION_ATTEMPTS,
    STRIPPED_FIELDS,
)
from .dates import day_window
from .identifiers import generate_pad_batch_id
from .models import DistributionRecord, InventoryBatch, StockAdjustment
from .serializers import InventoryBatchCreateSerializer

logger = logging.getLogger('padbank')


def _actor_or_none(actor):
    return actor if getattr(actor, 'is_authenticated', False) else None


def _lock_batch(batch_id) -> InventoryBatch:
    try:
        return InventoryBatch.objects.select_for_update().get(pk=batch_id)
    except (InventoryBatch.DoesNotExist, DjangoValidationError):
        raise ResourceNotFoundError(detail='Inventory item not found.')


def _field_errors_message(errors: dict) -> str:
    """Flatten {field: [messages]} into one line."""
    parts = []
    for field, messages in errors.items():
        if not isinstance(messages, (list, tuple)):
            messages = [messages]
        text = ' '.join(str(message) for message in messages)
        parts.append(text if field == 'non_field_errors' else f'{field}: {text}')
    return '; '.join(parts)


def _error_message(exc) -> str:
    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, 'message_dict'):
            return _field_errors_message(exc.message_dict)
        return ' '.join(exc.messages)
    if isinstance(exc, APIException):
        return str(exc.detail)
    return str(exc)


class BatchService:
    """Intake, metadata edits, deletion and expiry sweeps for InventoryBatch."""

    @staticmethod
    def get_batch(batch_id) -> InventoryBatch:
        try:
            return InventoryBatch.objects.get(pk=batch_id)
        except (InventoryBatch.DoesNotExist, DjangoValidationError):
            raise ResourceNotFoundError(detail='Inventory item not found.')

    @staticmethod
    def get_by_pad_batch_id(pad_batch_id: str) -> InventoryBatch:
        try:
            return InventoryBatch.objects.get(pad_batch_id=pad_batch_id)
        except InventoryBatch.DoesNotExist:
            raise ResourceNotFoundError(detail='Inventory batch not found.')

    @staticmethod
    def _insert_with_unique_id(batch: InventoryBatch) -> InventoryBatch:
        """
        Assign a fresh pad_batch_id and insert, retrying on collision.

        The existence check skips known IDs cheaply; the unique index is the
        real guard, so an IntegrityError on an ID that now exists means a
        concurrent intake won the race and we draw again.
        """
        max_attempts = settings.PAD_BATCH_ID_MAX_ATTEMPTS
        for attempt in range(1, max_attempts + 1):
            candidate = generate_pad_batch_id(batch.brand_type, batch.supplier_donor_name)
            if InventoryBatch.objects.filter(pad_batch_id=candidate).exists():
                logger.warning('Pad batch ID collision on %s (attempt %d/%d)', candidate, attempt, max_attempts)
                continue
            batch.pad_batch_id = candidate
            try:
                with transaction.atomic():
                    batch.save(force_insert=True)
            except IntegrityError:
                if not InventoryBatch.objects.filter(pad_batch_id=candidate).exists():
                    raise
                logger.warning(
                    'Pad batch ID %s taken concurrently (attempt %d/%d)',
                    candidate, attempt, max_attempts,
                )
                continue
            return batch
        raise BatchIdGenerationExhausted()

    @staticmethod
    @transaction.atomic
    def create_batch(*, actor=None, **fields) -> InventoryBatch:
        unknown = set(fields) - set(CREATE_FIELDS)
        if unknown:
            raise ImmutableFieldError(
                detail=f'Cannot set field(s) on create: {", ".join(sorted(unknown))}.',
            )
        for name in STRIPPED_FIELDS:
            if isinstance(fields.get(name), str):
                fields[name] = fields[name].strip()
        if fields.get('low_stock_threshold') is None:
            fields.pop('low_stock_threshold', None)
        fields.setdefault('low_stock_threshold', settings.PAD_DEFAULT_LOW_STOCK_THRESHOLD)
        if fields.get('notes') is None:
            fields['notes'] = ''

        batch = InventoryBatch(**fields)
        batch.full_clean(exclude=['pad_batch_id'])
        batch.created_by = _actor_or_none(actor)
        BatchService._insert_with_unique_id(batch)

        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_CREATE,
            model_name='InventoryBatch',
            object_id=str(batch.pk),
            new_values=AuditService.snapshot(batch),
        )
        logger.info(
            'Inventory batch %s created: %s x %s at %s',
            batch.pad_batch_id, batch.quantity_supplied, batch.brand_type, batch.storage_location,
        )
        return batch

    @staticmethod
    @transaction.atomic
    def bulk_create_batches(*, items: list[dict], actor=None) -> tuple[list[InventoryBatch], list[dict]]:
        """
        Create several batches in one transaction.

        Every item goes through the same validation as a single create.
        Each item runs in its own savepoint so a bad item is reported and
        skipped; the whole call rolls back only if nothing was created.
        """
        created: list[InventoryBatch] = []
        errors: list[dict] = []
        for index, item in enumerate(items, start=1):
            unknown = sorted(set(item) - set(CREATE_FIELDS))
            if unknown:
                errors.append({
                    'index': index,
                    'error': f'Cannot set field(s) on create: {", ".join(unknown)}.',
                })
                continue
            ser = InventoryBatchCreateSerializer(data=item)
            if not ser.is_valid():
                errors.append({'index': index, 'error': _field_errors_message(ser.errors)})
                continue
            try:
                created.append(BatchService.create_batch(actor=actor, **ser.validated_data))
            except (DjangoValidationError, APIException, IntegrityError, TypeError, ValueError) as exc:
                errors.append({'index': index, 'error': _error_message(exc)})

        if not created:
            raise BulkCreateFailed(item_errors=errors)

        logger.info('Bulk inventory create: %d created, %d failed', len(created), len(errors))
        return created, errors

    @staticmethod
    @transaction.atomic
    def update_batch(*, batch_id, actor=None, **fields) -> InventoryBatch:
        batch = _lock_batch(batch_id)

        protected = PROTECTED_FIELDS.intersection(fields)
        if protected:
            raise ImmutableFieldError(
                detail=f'Cannot modify protected field(s): {", ".join(sorted(protected))}.',
            )

        old_snapshot = AuditService.snapshot(batch)
        old_status = batch.status

        for name in STRIPPED_FIELDS:
            if isinstance(fields.get(name), str):
                fields[name] = fields[name].strip()
        for field, value in fields.items():
            if field == 'status':
                continue
            if field in MUTABLE_FIELDS:
                setattr(batch, field, value)

        if 'status' in fields:
            # Only damaged is settable; anything else clears it and lets the
            # recompute pick the real status.
            if fields['status'] == InventoryBatch.StatusChoices.DAMAGED:
                batch.status = InventoryBatch.StatusChoices.DAMAGED
            elif batch.status == InventoryBatch.StatusChoices.DAMAGED:
                batch.status = InventoryBatch.StatusChoices.ACTIVE

        batch.full_clean(exclude=['pad_batch_id'], validate_unique=False)
        batch.refresh_derived()
        batch.updated_by = _actor_or_none(actor)
        batch.save()

        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_UPDATE,
            model_name='InventoryBatch',
            object_id=str(batch.pk),
            old_values=old_snapshot,
            new_values=AuditService.snapshot(batch),
        )
        if batch.status != old_status:
            logger.info('Inventory batch %s status %s -> %s', batch.pad_batch_id, old_status, batch.status)
        return batch

    @staticmethod
    @transaction.atomic
    def delete_batch(*, batch_id, actor=None) -> None:
        batch = _lock_batch(batch_id)
        if batch.distribution_records.exists():
            raise BusinessRuleViolation(
                detail='Cannot delete inventory item with distribution records.',
            )
        snapshot = AuditService.snapshot(batch)
        pad_batch_id = batch.pad_batch_id
        object_id = str(batch.pk)
        batch.delete()

        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_DELETE,
            model_name='InventoryBatch',
            object_id=object_id,
            old_values=snapshot,
        )
        logger.info('Inventory batch %s deleted', pad_batch_id)

    @staticmethod
    def expire_overdue_batches() -> int:
        """
        Recompute batches whose expiry date has passed but whose stored
        status still predates it. Called daily by Celery beat.
        Returns the count of batches moved to expired.
        """
        today = timezone.localdate()
        candidate_ids = list(
            InventoryBatch.objects.filter(
                expiry_date__lt=today,
                status__in=[InventoryBatch.StatusChoices.ACTIVE, InventoryBatch.StatusChoices.DEPLETED],
            ).values_list('pk', flat=True)
        )
        count = 0
        for batch_id in candidate_ids:
            with transaction.atomic():
                batch = _lock_batch(batch_id)
                old_status = batch.status
                batch._persist_derived()
                if batch.status != old_status:
                    count += 1
                    AuditService.log(
                        actor=None,
                        action=AUDIT_ACTION_STATUS_CHANGE,
                        model_name='InventoryBatch',
                        object_id=str(batch.pk),
                        old_values={'status': old_status},
                        new_values={'status': batch.status},
                    )
        if count:
            logger.info('Auto-expired %d inventory batches past expiry date.', count)
        return count


class DistributionService:
    """Checkout workflow, manual distribution, eligibility and history."""

    @staticmethod
    def distributed_today(student: Student, day=None) -> DistributionRecord | None:
        """Most recent record for ``student`` on the local calendar day, from any batch."""
        start, end = day_window(day)
        return (
            DistributionRecord.objects
            .filter(student=student, created_at__gte=start, created_at__lt=end)
            .select_related('batch')
            .order_by('-created_at')
            .first()
        )

    @staticmethod
    def eligible_batches(*, storage_location: str = '', brand_type: str = '', min_stock: int = 1):
        """Active, unexpired batches holding at least ``min_stock`` units."""
        today = timezone.localdate()
        qs = InventoryBatch.objects.filter(
            Q(expiry_date__isnull=True) | Q(expiry_date__gte=today),
            status=InventoryBatch.StatusChoices.ACTIVE,
            current_stock__gte=min_stock,
        )
        if storage_location:
            qs = qs.filter(storage_location=storage_location)
        if brand_type:
            qs = qs.filter(brand_type=brand_type)
        return qs

    @classmethod
    def select_batch(
        cls, *, storage_location: str = '', brand_preference: str = '', quantity: int = 1,
    ) -> InventoryBatch | None:
        """
        First-expired-first-out pick: earliest expiry (undated batches
        last), then the fullest batch. A brand preference that matches
        nothing falls back to any brand.
        """
        ordering = (F('expiry_date').asc(nulls_last=True), '-current_stock', 'created_at')
        if brand_preference:
            batch = cls.eligible_batches(
                storage_location=storage_location, brand_type=brand_preference, min_stock=quantity,
            ).order_by(*ordering).first()
            if batch is not None:
                return batch
        return cls.eligible_batches(
            storage_location=storage_location, min_stock=quantity,
        ).order_by(*ordering).first()

    @classmethod
    def _lock_selected_batch(cls, *, storage_location: str, brand_preference: str, quantity: int) -> InventoryBatch:
        """
        Select then lock. A concurrent checkout may drain the pick between
        the two reads, so the locked row is re-checked and selection retried.
        """
        for _ in range(SELECTION_ATTEMPTS):
            candidate = cls.select_batch(
                storage_location=storage_location, brand_preference=brand_preference, quantity=quantity,
            )
            if candidate is None:
                break
            batch = _lock_batch(candidate.pk)
            if batch.status == InventoryBatch.StatusChoices.ACTIVE and batch.current_stock >= quantity:
                return batch
        if storage_location:
            raise NoStockAvailable(detail=f'No pads available in {storage_location}.')
        raise NoStockAvailable(detail='No pads available in stock.')

    @classmethod
    @transaction.atomic
    def checkout(
        cls,
        *,
        student_identifier,
        staff_id: str,
        staff_name: str,
        brand_preference: str = '',
        storage_location: str = '',
        reason: str = '',
        notes: str = '',
        actor=None,
    ) -> tuple[DistributionRecord, InventoryBatch, Student]:
        """
        Hand one unit to a student: resolve, enforce the daily cap, pick a
        batch FEFO, append the distribution. Any failure rolls back all of it.
        """
        student = StudentService.resolve(student_identifier, for_update=True, active_only=True)

        if cls.distributed_today(student) is not None:
            raise AlreadyDistributedToday()

        quantity = settings.PAD_CHECKOUT_QUANTITY
        batch = cls._lock_selected_batch(
            storage_location=storage_location,
            brand_preference=brand_preference,
            quantity=quantity,
        )
        previous_stock = batch.current_stock
        record = batch.append_distribution(
            student=student,
            quantity_distributed=quantity,
            distributed_by=f'{staff_name} ({staff_id})',
            reason=reason or CHECKOUT_REASON,
            notes=notes,
            actor=actor,
        )
        cls._audit(actor, batch, record, previous_stock)
        logger.info(
            'Checkout: %s unit(s) from %s to student %s by %s (stock %d -> %d)',
            quantity, batch.pad_batch_id, student.student_number, staff_id,
            previous_stock, batch.current_stock,
        )
        return record, batch, student

    @classmethod
    @transaction.atomic
    def distribute_from_batch(
        cls,
        *,
        batch_id,
        student_identifier,
        quantity_distributed: int,
        distributed_by: str,
        user_name: str = '',
        reason: str = '',
        notes: str = '',
        actor=None,
    ) -> tuple[DistributionRecord, InventoryBatch]:
        """Record a distribution against a specific batch chosen by staff."""
        student = StudentService.resolve(student_identifier, for_update=True, active_only=True)
        batch = _lock_batch(batch_id)

        if cls.distributed_today(student) is not None:
            raise AlreadyDistributedToday()

        previous_stock = batch.current_stock
        record = batch.append_distribution(
            student=student,
            quantity_distributed=quantity_distributed,
            distributed_by=distributed_by,
            user_name=user_name,
            reason=reason,
            notes=notes,
            actor=actor,
        )
        cls._audit(actor, batch, record, previous_stock)
        logger.info(
            'Distribution: %s unit(s) from %s to student %s (stock %d -> %d)',
            quantity_distributed, batch.pad_batch_id, student.student_number,
            previous_stock, batch.current_stock,
        )
        return record, batch

    @staticmethod
    def _audit(actor, batch: InventoryBatch, record: DistributionRecord, previous_stock: int):
        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_DISTRIBUTE,
            model_name='InventoryBatch',
            object_id=str(batch.pk),
            old_values={'current_stock': previous_stock},
            new_values={
                'current_stock': batch.current_stock,
                'distribution_id': str(record.pk),
                'student_id': str(record.student_id),
                'quantity_distributed': record.quantity_distributed,
            },
        )

    @classmethod
    def check_eligibility(cls, *, student_identifier, storage_location: str = '', brand_preference: str = '') -> dict:
        """Run the checkout checks without writing anything."""
        student = StudentService.resolve(student_identifier)
        last = cls.distributed_today(student)
        quantity = settings.PAD_CHECKOUT_QUANTITY

        available_stock = cls.eligible_batches(
            storage_location=storage_location, brand_type=brand_preference, min_stock=quantity,
        ).count()
        if brand_preference and not available_stock:
            available_stock = cls.eligible_batches(
                storage_location=storage_location, min_stock=quantity,
            ).count()
        suggested = cls.select_batch(
            storage_location=storage_location, brand_preference=brand_preference, quantity=quantity,
        )

        return {
            'student': student,
            'eligible': student.is_active and last is None and available_stock > 0,
            'student_inactive': not student.is_active,
            'already_received_today': last is not None,
            'no_stock_available': available_stock == 0,
            'last_distribution': last,
            'available_stock': available_stock,
            'suggested_batch': suggested,
        }

    @staticmethod
    def student_history(student_identifier):
        """All distributions to a student across batches, newest first."""
        students = Student.objects.filter(StudentService.lookup_filter(student_identifier))
        return (
            DistributionRecord.objects
            .filter(student__in=students)
            .select_related('batch', 'student')
            .order_by('-created_at')
        )


class AdjustmentService:
    """Manual stock corrections on a single batch."""

    @staticmethod
    @transaction.atomic
    def adjust_stock(
        *,
        batch_id,
        adjustment_type: str,
        quantity: int,
        reason: str,
        adjusted_by: str,
        actor=None,
    ) -> tuple[InventoryBatch, StockAdjustment]:
        if adjustment_type not in StockAdjustment.AdjustmentType.values:
            raise BusinessRuleViolation(detail=f'Invalid adjustment_type: {adjustment_type}.')
        batch = _lock_batch(batch_id)
        adjustment = batch.append_adjustment(
            adjustment_type=adjustment_type,
            quantity=quantity,
            reason=reason,
            adjusted_by=adjusted_by,
            actor=actor,
        )
        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_ADJUST,
            model_name='InventoryBatch',
            object_id=str(batch.pk),
            old_values={'current_stock': adjustment.previous_stock},
            new_values={
                'current_stock': batch.current_stock,
                'adjustment_id': str(adjustment.pk),
                'adjustment_type': adjustment_type,
                'quantity': quantity,
            },
        )
        if adjustment_type != StockAdjustment.AdjustmentType.ADDITION and (
            adjustment.previous_stock - adjustment.new_stock < quantity
        ):
            logger.warning(
                'Adjustment on %s clamped at zero: requested -%d, applied -%d',
                batch.pad_batch_id, quantity, adjustment.previous_stock - adjustment.new_stock,
            )
        logger.info(
            'Stock adjustment %s %d on %s (stock %d -> %d)',
            adjustment_type, quantity, batch.pad_batch_id,
            adjustment.previous_stock, adjustment.new_stock,
        )
        return batch, adjustment

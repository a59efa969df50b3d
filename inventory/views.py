"""
Inventory — Views

DRF ViewSet for pad batches: CRUD, reports, the checkout workflow and the
per-batch ledger actions. Business logic lives in services.py; views only
validate input and shape the response.

@file inventory/views.py
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from core.exceptions import ImmutableFieldError

from .models import InventoryBatch
from .reports import ReportService
from .serializers import (
    BulkInventoryCreateSerializer,
    CheckoutSerializer,
    DistributionRecordSerializer,
    EligibilityQuerySerializer,
    ExportQuerySerializer,
    InventoryBatchCreateSerializer,
    InventoryBatchDetailSerializer,
    InventoryBatchListSerializer,
    InventoryBatchUpdateSerializer,
    ManualDistributionSerializer,
    ReportDateSerializer,
    StockAdjustmentCreateSerializer,
    StockAdjustmentSerializer,
    StudentHistorySerializer,
    checkout_payload,
    eligibility_payload,
)
from .services import AdjustmentService, BatchService, DistributionService


class InventoryBatchViewSet(viewsets.ModelViewSet):
    """
    Pad batches and their distribution / adjustment ledgers.

    PUT behaves as a partial update: only the metadata keys sent are changed.
    """

    lookup_value_regex = '[0-9a-fA-F-]{36}'
    filterset_fields = ['status', 'brand_type', 'storage_location', 'is_low_stock']
    search_fields = ['pad_batch_id', 'brand_type', 'supplier_donor_name', 'staff_in_charge']
    ordering_fields = ['created_at', 'date_received', 'expiry_date', 'current_stock', 'quantity_supplied']
    ordering = ['-created_at']

    def get_queryset(self):
        qs = InventoryBatch.objects.all()
        if self.action == 'retrieve':
            qs = qs.prefetch_related('distribution_records__student', 'stock_adjustments')
        return qs

    def get_serializer_class(self):
        if self.action == 'create':
            return InventoryBatchCreateSerializer
        if self.action in ('update', 'partial_update'):
            return InventoryBatchUpdateSerializer
        if self.action == 'retrieve':
            return InventoryBatchDetailSerializer
        return InventoryBatchListSerializer

    def create(self, request, *args, **kwargs):
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        batch = BatchService.create_batch(actor=request.user, **ser.validated_data)
        return Response(
            {
                'status': 'success',
                'message': 'Inventory item created successfully.',
                'data': InventoryBatchDetailSerializer(batch).data,
            },
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):
        instance = self.get_object()
        ser = InventoryBatchUpdateSerializer(instance, data=request.data, partial=True)
        protected = ser.protected_keys()
        if protected:
            raise ImmutableFieldError(
                detail=f'Cannot modify protected field(s): {", ".join(protected)}.',
            )
        ser.is_valid(raise_exception=True)
        batch = BatchService.update_batch(
            batch_id=instance.pk, actor=request.user, **ser.validated_data,
        )
        return Response({
            'status': 'success',
            'message': 'Inventory item updated successfully.',
            'data': InventoryBatchDetailSerializer(batch).data,
        })

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        BatchService.delete_batch(batch_id=instance.pk, actor=request.user)
        return Response({
            'status': 'success',
            'message': 'Inventory item deleted successfully.',
        })

    # --- Reports ---

    @action(detail=False, methods=['get'], url_path='summary')
    def summary(self, request):
        low_stock = ReportService.low_stock_items()
        return Response({
            'status': 'success',
            'data': {
                'summary': ReportService.summary(),
                'low_stock_items': InventoryBatchListSerializer(low_stock, many=True).data,
            },
        })

    @action(detail=False, methods=['get'], url_path='low-stock')
    def low_stock(self, request):
        qs = ReportService.low_stock_items()
        page = self.paginate_queryset(qs)
        if page is not None:
            ser = InventoryBatchListSerializer(page, many=True)
            return self.get_paginated_response(ser.data)
        return Response({'status': 'success', 'data': InventoryBatchListSerializer(qs, many=True).data})

    @action(detail=False, methods=['get'], url_path='stats')
    def stats(self, request):
        return Response({'status': 'success', 'data': ReportService.stats()})

    @action(detail=False, methods=['get'], url_path='export')
    def export(self, request):
        query = ExportQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        qs = InventoryBatch.objects.filter(**query.validated_data).order_by('-created_at')
        rows = ReportService.export_rows(qs)
        return Response({
            'status': 'success',
            'data': rows,
            'count': len(rows),
        })

    @action(detail=False, methods=['get'], url_path='reports/daily')
    def insights(self, request):
        return Response({'status': 'success', 'data': ReportService.insights()})

    @action(detail=False, methods=['get'], url_path='reports/day')
    def day_report(self, request):
        query = ReportDateSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return Response({
            'status': 'success',
            'data': ReportService.day_report(query.validated_data.get('date')),
        })

    # --- Lookup by human-readable ID ---

    @action(detail=False, methods=['get'], url_path=r'batch/(?P<batch_id>.+)')
    def by_batch_id(self, request, batch_id=None):
        batch = BatchService.get_by_pad_batch_id(batch_id)
        return Response({'status': 'success', 'data': InventoryBatchDetailSerializer(batch).data})

    # --- Bulk intake ---

    @action(detail=False, methods=['post'], url_path='bulk')
    def bulk(self, request):
        ser = BulkInventoryCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        created, errors = BatchService.bulk_create_batches(
            items=ser.validated_data['items'], actor=request.user,
        )
        return Response(
            {
                'status': 'success',
                'message': f'Successfully created {len(created)} inventory items.',
                'data': {
                    'created': InventoryBatchListSerializer(created, many=True).data,
                    'created_count': len(created),
                    'errors': errors,
                },
            },
            status=status.HTTP_201_CREATED,
        )

    # --- Ledger appends ---

    @action(detail=True, methods=['post'], url_path='distribute')
    def distribute(self, request, pk=None):
        ser = ManualDistributionSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        record, batch = DistributionService.distribute_from_batch(
            batch_id=pk,
            student_identifier=data['user_id'],
            quantity_distributed=data['quantity_distributed'],
            distributed_by=data['distributed_by'],
            user_name=data['user_name'],
            reason=data['reason'],
            notes=data['notes'],
            actor=request.user,
        )
        return Response({
            'status': 'success',
            'message': 'Distribution recorded successfully.',
            'data': {
                'distribution': DistributionRecordSerializer(record).data,
                'inventory': InventoryBatchListSerializer(batch).data,
            },
        })

    @action(detail=True, methods=['post'], url_path='adjust')
    def adjust(self, request, pk=None):
        ser = StockAdjustmentCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        batch, adjustment = AdjustmentService.adjust_stock(
            batch_id=pk, actor=request.user, **ser.validated_data,
        )
        return Response({
            'status': 'success',
            'message': 'Stock adjusted successfully.',
            'data': {
                'adjustment': StockAdjustmentSerializer(adjustment).data,
                'inventory': InventoryBatchListSerializer(batch).data,
            },
        })

    # --- Checkout workflow ---

    @action(detail=False, methods=['post'], url_path='distribute')
    def checkout(self, request):
        ser = CheckoutSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        record, batch, student = DistributionService.checkout(
            student_identifier=data['student_user_id'],
            staff_id=data['staff_id'],
            staff_name=data['staff_name'],
            brand_preference=data['brand_preference'],
            storage_location=data['storage_location'],
            reason=data['reason'],
            notes=data['notes'],
            actor=request.user,
        )
        return Response({
            'status': 'success',
            'message': 'Pad distributed successfully.',
            'data': checkout_payload(
                record, batch, student,
                staff_id=data['staff_id'], staff_name=data['staff_name'],
            ),
        })

    @action(detail=False, methods=['get'], url_path=r'student/(?P<student_id>[^/]+)/history')
    def student_history(self, request, student_id=None):
        qs = DistributionService.student_history(student_id)
        page = self.paginate_queryset(qs)
        if page is not None:
            ser = StudentHistorySerializer(page, many=True)
            return self.get_paginated_response(ser.data)
        return Response({'status': 'success', 'data': StudentHistorySerializer(qs, many=True).data})

    @action(detail=False, methods=['get'], url_path=r'student/(?P<student_id>[^/]+)/eligibility')
    def student_eligibility(self, request, student_id=None):
        query = EligibilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        result = DistributionService.check_eligibility(
            student_identifier=student_id, **query.validated_data,
        )
        return Response({'status': 'success', 'data': eligibility_payload(result)})

"""
Core — Exception Handling

Domain exceptions for the inventory ledger and the DRF exception handler
that renders every failure in the standard error envelope.

@file core/exceptions.py
"""

import logging

from django.core.exceptions import PermissionDenied, ValidationError
from django.db import IntegrityError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger('padbank')


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class BusinessRuleViolation(APIException):
    """Raised when a business rule is violated at the service layer."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Business rule violation.'
    default_code = 'BUSINESS_RULE_VIOLATION'


class InsufficientStockError(BusinessRuleViolation):
    """Raised when a distribution asks for more units than the batch holds."""
    default_detail = 'Insufficient stock for distribution.'
    default_code = 'INSUFFICIENT_STOCK'


class AlreadyDistributedToday(BusinessRuleViolation):
    """Raised when a student already received a distribution this calendar day."""
    default_detail = 'Student has already received a pad today.'
    default_code = 'ALREADY_DISTRIBUTED_TODAY'


class NoStockAvailable(BusinessRuleViolation):
    """Raised when checkout finds no eligible batch."""
    default_detail = 'No pads available in stock.'
    default_code = 'NO_STOCK_AVAILABLE'


class StudentInactive(BusinessRuleViolation):
    """Raised when a deactivated student is offered a distribution."""
    default_detail = 'Student is inactive.'
    default_code = 'STUDENT_INACTIVE'


class ImmutableFieldError(BusinessRuleViolation):
    default_detail = 'Attempted to modify a protected field.'
    default_code = 'IMMUTABLE_FIELD'


class DuplicateResourceError(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists.'
    default_code = 'DUPLICATE_RESOURCE'


class ResourceNotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found.'
    default_code = 'RESOURCE_NOT_FOUND'


class BulkCreateFailed(BusinessRuleViolation):
    """Raised when a bulk create produced no rows; carries the per-item errors."""
    default_detail = 'No inventory items were created.'
    default_code = 'BULK_CREATE_FAILED'

    def __init__(self, item_errors=None, detail=None, code=None):
        super().__init__(detail=detail, code=code)
        self.item_errors = item_errors or []


class BatchIdGenerationExhausted(APIException):
    """Raised when no unique pad batch ID was found within the retry bound."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Unable to generate unique Pad Batch ID after multiple attempts.'
    default_code = 'BATCH_ID_EXHAUSTED'


# ---------------------------------------------------------------------------
# Standard exception handler
# ---------------------------------------------------------------------------

def _first_message(errors) -> str:
    """Pull a human-readable message out of a DRF error structure."""
    if isinstance(errors, dict):
        if 'detail' in errors:
            return _first_message(errors['detail'])
        for field, value in errors.items():
            message = _first_message(value)
            if message:
                return message if field == 'non_field_errors' else f'{field}: {message}'
        return ''
    if isinstance(errors, (list, tuple)):
        return _first_message(errors[0]) if errors else ''
    return str(errors)


def standard_exception_handler(exc, context):
    """
    Wraps every error response in the standard envelope:
      { "status": "error", "message": "...", "code": "ERROR_CODE", "errors": {...} }
    """
    if isinstance(exc, Http404):
        exc = ResourceNotFoundError()
    elif isinstance(exc, PermissionDenied):
        exc = APIException(detail='Permission denied.', code='PERMISSION_DENIED')
        exc.status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, IntegrityError):
        logger.warning('Integrity error surfaced as duplicate: %s', exc)
        exc = DuplicateResourceError()
    elif isinstance(exc, ValidationError):
        errors = exc.message_dict if hasattr(exc, 'message_dict') else {'detail': exc.messages}
        return Response(
            {
                'status': 'error',
                'message': _first_message(errors) or 'Validation failed.',
                'code': 'VALIDATION_ERROR',
                'errors': errors,
            },
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = exception_handler(exc, context)

    if response is None:
        logger.exception('Unhandled exception in view: %s', exc)
        return Response(
            {
                'status': 'error',
                'message': 'Internal server error.',
                'code': 'INTERNAL_ERROR',
                'errors': {'detail': ['Internal server error.']},
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    code = getattr(exc, 'default_code', 'ERROR')
    if isinstance(response.data, dict):
        errors = response.data
    elif isinstance(response.data, list):
        errors = {'detail': response.data}
    else:
        errors = {'detail': [str(response.data)]}

    if getattr(exc, 'default_code', None) == 'invalid':
        code = 'VALIDATION_ERROR'

    item_errors = getattr(exc, 'item_errors', None)
    if item_errors is not None:
        errors = {**errors, 'items': item_errors}

    response.data = {
        'status': 'error',
        'message': _first_message(errors) or str(getattr(exc, 'default_detail', 'Error.')),
        'code': code,
        'errors': errors,
    }
    return response

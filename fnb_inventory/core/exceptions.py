"""
Error taxonomy and the REST framework exception handler.

Every error leaves the API as ``{"error": "<message>"}``. Serializer errors also
carry the per-field ``details`` so forms can highlight the offending inputs.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.db.models import ProtectedError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class InventoryError(exceptions.APIException):
    """Base class for domain errors raised by services"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Inventory operation failed.'
    default_code = 'inventory_error'


class NotFound(InventoryError):
    """A referenced purchase, order, item, product, supplier or customer is absent"""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found.'
    default_code = 'not_found'


class ValidationFailed(InventoryError):
    """A constraint on the submitted values was violated"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid input.'
    default_code = 'validation_failed'


class Conflict(InventoryError):
    """Foreign-key or unique constraint violation"""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The request conflicts with existing data.'
    default_code = 'conflict'


def first_error_message(detail):
    """Flatten a DRF error structure into one readable message"""
    if isinstance(detail, dict):
        if 'detail' in detail:
            return first_error_message(detail['detail'])
        for field, value in detail.items():
            message = first_error_message(value)
            if message:
                if field == 'non_field_errors':
                    return message
                return f"{field}: {message}"
        return None
    if isinstance(detail, (list, tuple)):
        for value in detail:
            message = first_error_message(value)
            if message:
                return message
        return None
    return str(detail) if detail is not None else None


def api_exception_handler(exc, context):
    """Translate any exception raised by a view into the ``{"error": ...}`` envelope"""
    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, 'error_dict'):
            exc = exceptions.ValidationError(exc.message_dict)
        else:
            exc = ValidationFailed('; '.join(exc.messages))
    elif isinstance(exc, ProtectedError):
        exc = Conflict('Record is still referenced by other records.')
    elif isinstance(exc, IntegrityError):
        logger.warning(f"Integrity error: {exc}")
        exc = Conflict(f"Integrity constraint violated: {exc}")

    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view') if context else None
        view_name = view.__class__.__name__ if view else 'unknown view'
        logger.error(f"Unexpected error in {view_name}: {exc}", exc_info=exc)
        return Response(
            {'error': 'An unexpected error occurred'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    body = {'error': first_error_message(response.data) or 'Request failed'}
    if isinstance(exc, exceptions.ValidationError):
        body['details'] = response.data
    response.data = body
    return response

"""
Global exception handler for consistent API error responses.
Every error body is { "detail": str, "code": str } so clients can tell
stale state (409) from authorization (403) from bad input (400).
"""
import logging
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import PermissionDenied, ValidationError as DjangoValidationError
from django.conf import settings

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """
    Custom exception handler that returns:
    { "detail": str, "code": str, "errors": dict (validation only) }
    """
    response = exception_handler(exc, context)
    if response is not None:
        if isinstance(response.data, dict) and 'detail' not in response.data:
            data = {'detail': 'Invalid request.', 'errors': response.data}
        elif isinstance(response.data, dict):
            data = dict(response.data)
        else:
            data = {'detail': _get_detail(exc), 'errors': response.data}
        data['detail'] = str(data.get('detail') or _get_detail(exc))
        data.setdefault('code', _get_code(exc))
        response.data = data
        return response

    if isinstance(exc, PermissionDenied):
        return Response(
            {'detail': str(exc) or 'Permission denied', 'code': 'permission_denied'},
            status=status.HTTP_403_FORBIDDEN
        )
    if isinstance(exc, DjangoValidationError):
        return Response(
            {'detail': '; '.join(exc.messages), 'code': 'validation_error'},
            status=status.HTTP_400_BAD_REQUEST
        )

    logger.exception('Unhandled exception: %s', exc)
    error_detail = 'An internal error occurred.'
    if settings.DEBUG:
        error_detail = f'An internal error occurred: {str(exc)}'
    # Never expose stack traces to clients
    return Response(
        {'detail': error_detail, 'code': 'internal_error'},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def _get_detail(exc):
    if hasattr(exc, 'detail'):
        d = exc.detail
        if isinstance(d, list):
            return str(d[0]) if d else 'Error'
        if isinstance(d, dict):
            return str(d.get('detail', d))
        return str(d)
    return str(exc)


def _get_code(exc):
    codes = {
        'AuthenticationFailed': 'invalid_credentials',
        'NotAuthenticated': 'not_authenticated',
        'NotFound': 'not_found',
        'PermissionDenied': 'permission_denied',
        'ValidationError': 'validation_error',
    }
    # Permission classes may attach their own code to the detail
    detail_code = getattr(getattr(exc, 'detail', None), 'code', None)
    default_code = getattr(exc, 'default_code', None)
    if detail_code and detail_code != default_code:
        return detail_code
    name = type(exc).__name__
    if name in codes:
        return codes[name]
    return default_code or 'error'

"""
Error types and the API-wide exception handler.

Every failure leaves the API as ``{"error": <message>}``.  Client errors
(400/401/403/404) carry their own message; validation errors add the
field-level ``details`` produced by the serializer.  Anything else is a
500 with a fixed message, the underlying exception only goes to the log.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class PersistenceError(APIException):
    """A store-level failure surfaced to the client as a generic 500."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Internal server error'
    default_code = 'persistence_error'


def _first_message(detail) -> str:
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
    if isinstance(detail, (list, tuple)) and detail:
        return _first_message(detail[0])
    return str(detail)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('Unhandled API error: %s', exc)
        return Response({'error': 'Internal server error'}, status=500)

    if isinstance(exc, ValidationError):
        detail = resp.data
        # ValidationError('Invalid age value') carries a plain list
        if isinstance(detail, list):
            return Response({'error': _first_message(detail)}, status=resp.status_code)
        return Response({'error': _first_message(detail), 'details': detail}, status=resp.status_code)

    detail = resp.data.get('detail') if isinstance(resp.data, dict) else resp.data
    return Response({'error': str(detail)}, status=resp.status_code, headers=_passthrough_headers(resp))


def _passthrough_headers(resp) -> dict:
    # WWW-Authenticate / Retry-After set by DRF for 401/429
    return {k: resp.headers[k] for k in ('WWW-Authenticate', 'Retry-After') if k in resp.headers}

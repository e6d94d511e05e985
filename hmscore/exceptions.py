import logging

from rest_framework import exceptions, status
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response

logger = logging.getLogger(__name__)


class ValidationError(exceptions.APIException):
    """Rejected input: duplicate department/nurse selection or a blank field."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid input.'
    default_code = 'validation_error'


class NotFoundError(exceptions.APIException):
    """The record addressed by the request no longer exists."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


def _error_code(exc) -> str:
    code = getattr(exc, 'default_code', None)
    if isinstance(exc, exceptions.ValidationError):
        return 'validation_error'
    if code and code not in ('error', 'invalid'):
        return code
    return 'api_error'


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception("unhandled error in %s", context.get('view'), exc_info=exc)
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize body, keep status and auth headers
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data if isinstance(resp.data, list) else str(resp.data)
    resp.data = {'ok': False, 'error': {'code': _error_code(exc), 'message': detail}}
    return resp

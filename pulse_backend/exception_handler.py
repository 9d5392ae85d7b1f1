import logging

from rest_framework.views import exception_handler

from matching.exceptions import MatchingError

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 1


def custom_exception_handler(exc, context):
    """
    DRF's handler plus two things for matching errors: the body carries the
    error `code` and a `retryable` flag, and retryable errors get a
    Retry-After header. Every error response is logged once here.
    """
    response = exception_handler(exc, context)
    view = context.get('view')
    request = context.get('request')
    where = (
        view.__class__.__name__ if view else 'UnknownView',
        request.method if request else 'unknown',
        request.path if request else 'unknown',
    )

    if response is None:
        logger.exception('Unhandled API exception: view=%s method=%s path=%s', *where)
        return None

    if isinstance(exc, MatchingError):
        response.data = {
            'detail': response.data.get('detail', str(exc.detail)),
            'code': exc.get_codes(),
            'retryable': exc.retryable,
        }
        if exc.retryable:
            response['Retry-After'] = str(RETRY_AFTER_SECONDS)

    if response.status_code >= 500:
        logger.error(
            'Server error response: view=%s method=%s path=%s status=%s detail=%s',
            *where, response.status_code, response.data
        )
    elif response.status_code >= 400:
        logger.warning(
            'Client error response: view=%s method=%s path=%s status=%s detail=%s',
            *where, response.status_code, response.data
        )
    return response

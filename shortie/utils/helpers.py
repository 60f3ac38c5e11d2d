"""Helper utilities for the boundary handlers.

Functions:
    short_url(token, settings) -> str
        Public short URL for a token
    guarantee_500_response(handler) -> Callable
        Decorator: turn unexpected handler errors into a JSON 500 response

Example:
    >>> from shortie.utils.config import Settings
    >>> short_url('aZ3kP9qLm0', Settings(proto='https', domain='sho.rt', port=443, path='s/'))
    'https://sho.rt/s/aZ3kP9qLm0'
    >>> short_url('aZ3kP9qLm0', Settings(proto='http', domain='localhost', port=8080))
    'http://localhost:8080/aZ3kP9qLm0'
"""

import logging
import functools
from collections.abc import Callable

from shortie.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from shortie.utils.config import Settings
from shortie.utils.responses import response_500
from shortie.utils.runtime import running_locally


logger = logging.getLogger(__name__)

DEFAULT_PORTS = {'http': 80, 'https': 443}


def short_url(token: str, settings: Settings) -> str:
    """Build the public short URL for `token`

    The port is omitted when it is the default port of the configured
    protocol (80 for http, 443 for https).
    """
    port = '' if DEFAULT_PORTS.get(settings.proto) == settings.port else f':{settings.port}'
    return f'{settings.proto}://{settings.domain}{port}/{settings.path}{token}'


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with a JSON 500 when a handler raises unexpectedly

    When running locally the exception is re-raised instead, so tracebacks
    reach the developer.

    Example:
        >>> @guarantee_500_response
        ... def handler(event, service):
        ...     raise RuntimeError('boom')
        >>> handler({}, None)['statusCode']
        500
    """

    @functools.wraps(handler)
    def wrapper(*args, **kwargs):
        try:
            return handler(*args, **kwargs)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled exception in handler. Responding with 500.', extra={'handler': handler.__name__})
            return response_500(error_code=UNKNOWN_INTERNAL_SERVER_ERROR)

    return wrapper

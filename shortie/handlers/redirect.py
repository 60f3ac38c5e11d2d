import logging

from shortie.constants import TOKEN_NOT_FOUND
from shortie.dao.exceptions import TokenNotFoundError
from shortie.utils.responses import response_302, response_404
from shortie.service import ShortenService
from shortie.types import HandlerEvent, HandlerResponse
from shortie.utils.helpers import guarantee_500_response


logger = logging.getLogger(__name__)


@guarantee_500_response
def redirect_handler(event: HandlerEvent, service: ShortenService) -> HandlerResponse:
    """Handle requests to follow a short URL

    The token is read from the `token` path parameter, falling back to the
    raw request path. ShortenService.resolve() strips the configured prefix
    and any stray characters around the token.

    HTTP responses:
        302: Successful redirect (Location: target URL)
        404: Token absent or expired

    Example:
        >>> event = {'pathParameters': {'token': 'aZ3kP9qLm0'}}
        >>> response = redirect_handler(event, service)
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    raw = (event.get('pathParameters') or {}).get('token') or event.get('path', '')

    try:
        location = service.resolve(raw)
    except TokenNotFoundError:
        logger.info('Token not found. Responding with 404.', extra={'raw': raw, 'event': TOKEN_NOT_FOUND})
        return response_404(message=f"short url '{raw}' doesn't exist", error_code=TOKEN_NOT_FOUND)

    logger.debug('Redirecting client to target URL. Responding with 302.', extra={'raw': raw})
    return response_302(location=location)

import json
import base64
import logging
from urllib.parse import parse_qs

from shortie.constants import INVALID_URL, MISSING_URL, TOKEN_SPACE_EXHAUSTED
from shortie.exceptions import InvalidURLError, TokenSpaceExhaustedError
from shortie.utils.responses import response_200, response_400, response_500
from shortie.service import ShortenService
from shortie.types import HandlerEvent, HandlerResponse
from shortie.utils.helpers import guarantee_500_response
from shortie.utils.urls import normalize_url


logger = logging.getLogger(__name__)


def _request_body(event: HandlerEvent) -> str:
    body = event.get('body') or ''
    if event.get('isBase64Encoded'):
        body = base64.b64decode(body).decode('utf-8')
    return body


def _submitted_url(event: HandlerEvent) -> str | None:
    """Read `url` from a JSON body, falling back to a form-encoded body."""
    body = _request_body(event)
    try:
        payload = json.loads(body) if body else {}
    except json.JSONDecodeError:
        payload = {key: values[0] for key, values in parse_qs(body).items()}

    if not isinstance(payload, dict):
        return None
    url = payload.get('url')
    return url if isinstance(url, str) and url else None


@guarantee_500_response
def shorten_handler(event: HandlerEvent, service: ShortenService) -> HandlerResponse:
    """Handle requests to shorten a URL

    Procedure:
    - Step 1: Extract the URL from the request body (JSON or form-encoded)
    - Step 2: Shorten it via ShortenService
    - Step 3: Respond with the token and the public short URL

    HTTP responses:
        200: Successful URL shortening
            token: newly generated token
            short_url: public short URL
            target: normalized target URL
        400: Missing or malformed URL
        500: Token space exhausted or internal server error

    Example:
        >>> event = {'body': '{"url": "https://example.com"}'}
        >>> response = shorten_handler(event, service)
        >>> response['statusCode']
        200
    """
    # 1- Extract URL from request body
    url = _submitted_url(event)
    if url is None:
        logger.info('Missing "url" in request body. Responding with 400.', extra={'event': MISSING_URL})
        return response_400(message="missing 'url' in request body", error_code=MISSING_URL)

    # 2- Shorten it
    try:
        token = service.shorten(url)
    except InvalidURLError:
        logger.info('Malformed URL submitted. Responding with 400.', extra={'event': INVALID_URL, 'url': url})
        return response_400(message=f'invalid url {url}', error_code=INVALID_URL)
    except TokenSpaceExhaustedError:
        return response_500(message='no free token available', error_code=TOKEN_SPACE_EXHAUSTED)

    # 3- Respond with the short URL
    return response_200(
        {
            'token': token,
            'short_url': service.short_url(token),
            'target': normalize_url(url),
        }
    )

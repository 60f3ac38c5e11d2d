import json
from typing import Any

from shortie.types import HandlerResponse


JSON_HEADERS = {'Content-Type': 'application/json'}


def _json_response(status: int, body: Any, headers: dict[str, str] | None = None) -> HandlerResponse:
    return {
        'statusCode': status,
        'headers': {**JSON_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def _error_body(base: str, message: str | None, error_code: str | None) -> dict:
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return body


def response_200(body: Any) -> HandlerResponse:
    return _json_response(200, body)


def response_302(*, location: str) -> HandlerResponse:
    return {
        'statusCode': 302,
        'headers': {'Location': location},
        'body': '',  # no body needed for redirects
    }


def response_400(message: str | None = None, error_code: str | None = None) -> HandlerResponse:
    return _json_response(400, _error_body('Bad Request', message, error_code))


def response_404(message: str | None = None, error_code: str | None = None) -> HandlerResponse:
    return _json_response(404, _error_body('Not Found', message, error_code))


def response_500(message: str | None = None, error_code: str | None = None) -> HandlerResponse:
    return _json_response(500, _error_body('Internal Server Error', message, error_code))


def response_503(message: str | None = None) -> HandlerResponse:
    return _json_response(503, _error_body('Service Unavailable', message, None))

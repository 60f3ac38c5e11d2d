"""Administrative handlers: entry count, dump, export and import.

Every snapshot failure is answered with a 500 carrying the SNAPSHOT_ERROR
code. The service has already logged the underlying cause.
"""

import base64

from shortie.constants import SNAPSHOT_ERROR
from shortie.exceptions import SnapshotError
from shortie.utils.responses import response_200, response_500
from shortie.service import ShortenService
from shortie.types import HandlerEvent, HandlerResponse
from shortie.utils.helpers import guarantee_500_response


@guarantee_500_response
def count_handler(event: HandlerEvent, service: ShortenService) -> HandlerResponse:
    return response_200({'count': service.count()})


@guarantee_500_response
def dump_handler(event: HandlerEvent, service: ShortenService) -> HandlerResponse:
    return response_200(service.dump())


@guarantee_500_response
def dump_to_file_handler(event: HandlerEvent, service: ShortenService) -> HandlerResponse:
    location = service.settings.dump_file
    try:
        count = service.export_to(location)
    except SnapshotError as e:
        return response_500(message=str(e), error_code=SNAPSHOT_ERROR)
    return response_200({'message': f'Exported {count} items to {location}', 'count': count})


@guarantee_500_response
def load_from_file_handler(event: HandlerEvent, service: ShortenService) -> HandlerResponse:
    location = service.settings.dump_file
    try:
        count = service.import_from(location)
    except SnapshotError as e:
        return response_500(message=str(e), error_code=SNAPSHOT_ERROR)
    return response_200({'message': f'Imported {count} items to the DB', 'count': count})


@guarantee_500_response
def load_from_post_handler(event: HandlerEvent, service: ShortenService) -> HandlerResponse:
    body = event.get('body') or ''
    if event.get('isBase64Encoded'):
        body = base64.b64decode(body)
    try:
        count = service.import_payload(body)
    except SnapshotError as e:
        return response_500(message=str(e), error_code=SNAPSHOT_ERROR)
    return response_200({'message': f'Imported {count} items to the DB', 'count': count})

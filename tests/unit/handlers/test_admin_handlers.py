"""Unit tests for the administrative and health handlers.

Test coverage includes:

1. count / dump
2. Export to and import from the configured snapshot location
3. Import from a submitted snapshot (plain and base64-encoded)
4. Snapshot failures answered with HTTP 500 SNAPSHOT_ERROR
5. Health probe (HTTP 200 / 503)
"""

import json
import base64
import dataclasses
from unittest.mock import MagicMock

from shortie.handlers import (
    count_handler,
    dump_handler,
    dump_to_file_handler,
    health_handler,
    load_from_file_handler,
    load_from_post_handler,
)
from shortie.service import ShortenService


# -------------------------------
# 1. count / dump
# -------------------------------


def test_count(service):
    service.shorten('https://example.com/a')
    service.shorten('https://example.com/b')

    response = count_handler({}, service)

    assert response['statusCode'] == 200
    assert json.loads(response['body']) == {'count': 2}


def test_dump(service):
    service.store.set('abc123', 'https://example.com', ttl=0)

    response = dump_handler({}, service)

    assert json.loads(response['body']) == {'abc123': {'target': 'https://example.com', 'expires_at': None}}


# -------------------------------
# 2. Export / import via the snapshot location
# -------------------------------


def test_dump_to_file_and_load_from_file(service, settings):
    token = service.shorten('https://example.com')

    response = dump_to_file_handler({}, service)
    assert response['statusCode'] == 200
    assert json.loads(response['body']) == {'message': f'Exported 1 items to {settings.dump_file}', 'count': 1}

    service.store.flush()
    response = load_from_file_handler({}, service)

    assert response['statusCode'] == 200
    assert json.loads(response['body']) == {'message': 'Imported 1 items to the DB', 'count': 1}
    assert service.resolve(token) == 'https://example.com'


# -------------------------------
# 3. Import from a submitted snapshot
# -------------------------------


def test_load_from_post(service):
    body = json.dumps({'abc123': {'target': 'https://example.com', 'expires_at': None}})

    response = load_from_post_handler({'body': body}, service)

    assert response['statusCode'] == 200
    assert service.resolve('abc123') == 'https://example.com'


def test_load_from_post_base64(service):
    body = base64.b64encode(json.dumps({'abc123': {'Object': 'https://example.com', 'Expiration': 0}}).encode('utf-8')).decode('ascii')

    response = load_from_post_handler({'body': body, 'isBase64Encoded': True}, service)

    assert response['statusCode'] == 200
    assert service.resolve('abc123') == 'https://example.com'


# -------------------------------
# 4. Snapshot failures
# -------------------------------


def test_load_from_missing_file(service):
    token = service.shorten('https://example.com')

    response = load_from_file_handler({}, service)

    assert response['statusCode'] == 500
    assert json.loads(response['body'])['errorCode'] == 'SNAPSHOT_ERROR'
    assert service.resolve(token) == 'https://example.com'


def test_load_from_post_malformed(service):
    response = load_from_post_handler({'body': 'not json'}, service)

    assert response['statusCode'] == 500
    assert json.loads(response['body'])['errorCode'] == 'SNAPSHOT_ERROR'


def test_dump_to_unwritable_location(service, tmp_path):
    service.settings = dataclasses.replace(service.settings, dump_file=str(tmp_path / 'missing' / 'urls.json'))

    response = dump_to_file_handler({}, service)

    assert response['statusCode'] == 500
    assert json.loads(response['body'])['errorCode'] == 'SNAPSHOT_ERROR'


# -------------------------------
# 5. Health probe
# -------------------------------


def test_health_ok(service):
    response = health_handler({}, service)

    assert response['statusCode'] == 200
    assert json.loads(response['body']) == {'status': 'ok'}


def test_health_degraded():
    service = MagicMock(spec=ShortenService)
    service.health.return_value = False

    response = health_handler({}, service)

    assert response['statusCode'] == 503
    assert json.loads(response['body']) == {'message': 'Service Unavailable (token store degraded)'}

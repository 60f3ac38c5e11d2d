"""Unit tests for the application factory in app.py.

Test coverage includes:

1. create_store()
   - Memory backend honours the TTL and cleanup settings.
   - Redis backend forwards connection settings and namespaces keys per environment.

2. create_service()
   - Builds a working service from explicit or loaded settings.
"""

from unittest.mock import patch

import pytest

from shortie.app import create_service, create_store
from shortie.dao.memory import TokenMemoryDAO
from shortie.dao.redis import TokenRedisDAO
from shortie.utils.config import Settings


# -------------------------------
# 1. create_store()
# -------------------------------


def test_create_memory_store():
    store = create_store(Settings(default_ttl=60, cleanup_interval=0))
    try:
        assert isinstance(store, TokenMemoryDAO)
        assert store.default_ttl == 60
        assert store.cleanup_interval == 0
    finally:
        store.close()


def test_create_redis_store(monkeypatch):
    monkeypatch.setenv('APP_ENV', 'test')
    settings = Settings(backend='redis', default_ttl=60, redis={'host': 'redis', 'port': 6380, 'db': 1, 'password': 'secret'})

    with patch('shortie.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        store = create_store(settings)

    assert isinstance(store, TokenRedisDAO)
    assert store.default_ttl == 60
    assert store.keys.prefix == 'shortie:test'
    redis_mock.assert_called_once_with(host='redis', port=6380, db=1, decode_responses=True, username=None, password='secret')


def test_create_redis_store_with_prefix():
    settings = Settings(backend='redis', redis={'prefix': 'shortie:custom'})

    with patch('shortie.dao.redis.mixins.redis.Redis', autospec=True):
        store = create_store(settings)

    assert store.keys.prefix == 'shortie:custom'


# -------------------------------
# 2. create_service()
# -------------------------------


def test_create_service_with_settings():
    service = create_service(Settings(cleanup_interval=0, domain='sho.rt', port=443), configure_logging=False)
    try:
        token = service.shorten('https://example.com')
        assert service.resolve(token) == 'https://example.com'
        assert service.short_url(token) == f'https://sho.rt/{token}'
    finally:
        service.close()


def test_create_service_loads_config(monkeypatch, tmp_path):
    config_file = tmp_path / 'shortie.yml'
    config_file.write_text('token_length: 6\ncleanup_interval: 0\n', encoding='utf-8')
    monkeypatch.setenv('SHORTIE_CONFIG', str(config_file))

    service = create_service(configure_logging=False)
    try:
        assert service.settings.token_length == 6
        assert len(service.shorten('https://example.com')) == 6
    finally:
        service.close()


@pytest.mark.parametrize('configure_logging', [True, False])
def test_create_service_logging(configure_logging):
    with patch('shortie.app.initialize_logging') as initialize_logging_mock:
        service = create_service(Settings(cleanup_interval=0), configure_logging=configure_logging)
    service.close()

    assert initialize_logging_mock.called is configure_logging

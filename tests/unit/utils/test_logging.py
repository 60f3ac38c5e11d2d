"""Unit tests for logging initialization in logging.py.

Test coverage includes:

1. JsonFormatter output
   - Standard fields, `extra` fields, exception tracebacks and stacks.
   - `extra` keys never replace the fixed fields.

2. resolve_level()
   - Explicit level, then LOG_LEVEL, then INFO; unknown names are rejected.

3. initialize_logging()
   - Installs the JSON handler at the resolved level.
   - Quiets chatty third-party loggers.
"""

import sys
import json
import logging

import pytest

from shortie.exceptions import BadConfigurationError
from shortie.utils.logging import NOISY_LOGGERS, JsonFormatter, initialize_logging, resolve_level


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    noisy_levels = {name: logging.getLogger(name).level for name in NOISY_LOGGERS}
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, noisy_level in noisy_levels.items():
        logging.getLogger(name).setLevel(noisy_level)


def make_record(msg='Shortened URL.', exc_info=None, **extra):
    record = logging.LogRecord('shortie.service', logging.INFO, __file__, 42, msg, None, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# -------------------------------
# 1. JsonFormatter output
# -------------------------------


def test_json_formatter_fields():
    log = json.loads(JsonFormatter().format(make_record(token='aZ3kP9qLm0', attempts=1)))

    assert log['level'] == 'INFO'
    assert log['logger'] == 'shortie.service'
    assert log['message'] == 'Shortened URL.'
    assert log['token'] == 'aZ3kP9qLm0'
    assert log['attempts'] == 1
    assert log['timestamp'].endswith('Z')
    assert 'pathname' not in log


def test_json_formatter_serializes_unknown_types():
    log = json.loads(JsonFormatter().format(make_record(location=object())))
    assert log['location'].startswith('<object object')


def test_json_formatter_exception():
    try:
        raise ValueError('bad snapshot')
    except ValueError:
        record = make_record('Failed to import snapshot.', exc_info=sys.exc_info())

    log = json.loads(JsonFormatter().format(record))

    assert 'ValueError: bad snapshot' in log['exception']


def test_json_formatter_stack_info():
    record = make_record()
    record.stack_info = 'Stack (most recent call last):\n  File "service.py"'

    log = json.loads(JsonFormatter().format(record))

    assert log['stack'].startswith('Stack (most recent call last)')


def test_json_formatter_keeps_fixed_fields():
    log = json.loads(JsonFormatter().format(make_record(level='bogus', logger='bogus', url='https://example.com')))

    assert log['level'] == 'INFO'
    assert log['logger'] == 'shortie.service'
    assert log['url'] == 'https://example.com'


# -------------------------------
# 2. resolve_level()
# -------------------------------


@pytest.mark.parametrize(
    'level, env, expected',
    [
        ('warning', 'DEBUG', logging.WARNING),
        (logging.ERROR, None, logging.ERROR),
        (None, 'debug', logging.DEBUG),
        (None, '', logging.INFO),
        (None, None, logging.INFO),
    ],
)
def test_resolve_level(monkeypatch, level, env, expected):
    if env is None:
        monkeypatch.delenv('LOG_LEVEL', raising=False)
    else:
        monkeypatch.setenv('LOG_LEVEL', env)

    assert resolve_level(level) == expected


def test_resolve_level_rejects_unknown_names():
    with pytest.raises(BadConfigurationError, match="Unknown log level 'LOUD'"):
        resolve_level('LOUD')


# -------------------------------
# 3. initialize_logging()
# -------------------------------


def test_initialize_logging(monkeypatch, restore_root_logger):
    monkeypatch.setenv('LOG_LEVEL', 'debug')

    initialize_logging()

    assert restore_root_logger.level == logging.DEBUG
    assert any(isinstance(handler.formatter, JsonFormatter) for handler in restore_root_logger.handlers)


def test_initialize_logging_default_level(monkeypatch, restore_root_logger):
    monkeypatch.delenv('LOG_LEVEL', raising=False)

    initialize_logging()

    assert restore_root_logger.level == logging.INFO


def test_initialize_logging_explicit_level(monkeypatch, restore_root_logger):
    monkeypatch.setenv('LOG_LEVEL', 'DEBUG')

    initialize_logging('error')

    assert restore_root_logger.level == logging.ERROR


def test_initialize_logging_quiets_third_party_loggers(restore_root_logger):
    initialize_logging('DEBUG')

    assert all(logging.getLogger(name).level == logging.WARNING for name in NOISY_LOGGERS)

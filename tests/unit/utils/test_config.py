"""Unit tests for configuration utilities in config.py

Test coverage includes:

1. Environment resolution
   - Ensures app_env() reads APP_ENV and defaults to 'local'.

2. Settings validation
   - Ensures path prefixes are normalized with a trailing slash.
   - Ensures out-of-range values raise BadConfigurationError.

3. Configuration loading behavior
   - Ensures defaults apply without a file or environment overrides.
   - Ensures YAML files (explicit or via SHORTIE_CONFIG) are applied.
   - Ensures SHORTIE_* environment variables win over the file.
   - Ensures malformed files, unknown keys and bad values raise BadConfigurationError.
"""

import pytest

from shortie.constants import ENV, TTL, Defaults
from shortie.exceptions import BadConfigurationError
from shortie.utils.config import Settings, app_env, load_config


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Isolate tests from SHORTIE_* variables set on the host."""
    for name in ENV.Settings:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv(ENV.App.CONFIG, raising=False)
    monkeypatch.delenv(ENV.App.APP_ENV, raising=False)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / 'shortie.yml'
    path.write_text(
        'token_length: 7\n'
        'default_ttl: 0\n'
        'path: s\n'
        'domain: sho.rt\n'
        'port: 443\n'
        'backend: redis\n'
        'redis:\n'
        '  host: redis\n'
        '  port: 6380\n'
        '  prefix: shortie:test\n',
        encoding='utf-8',
    )
    return path


# -------------------------------
# 1. Environment resolution
# -------------------------------


def test_app_env_default():
    assert app_env() == 'local'


def test_app_env(monkeypatch):
    monkeypatch.setenv('APP_ENV', 'PROD')
    assert app_env() == 'prod'


# -------------------------------
# 2. Settings validation
# -------------------------------


def test_settings_defaults():
    settings = Settings()
    assert settings.token_length == Defaults.TOKEN_LENGTH
    assert settings.default_ttl == TTL.DEFAULT
    assert settings.cleanup_interval == TTL.CLEANUP_INTERVAL
    assert settings.path == ''
    assert settings.dump_file == 'urls.json'
    assert settings.port == 8080
    assert settings.backend == 'memory'
    assert settings.redis == {}


@pytest.mark.parametrize('path, expected', [('s', 's/'), ('s/', 's/'), ('', '')])
def test_settings_path_normalization(path, expected):
    assert Settings(path=path).path == expected


@pytest.mark.parametrize(
    'overrides, message',
    [
        ({'token_length': 0}, 'token_length must be a positive integer'),
        ({'max_attempts': 0}, 'max_attempts must be a positive integer'),
        ({'port': 0}, 'port must be between 1 and 65535'),
        ({'port': 70000}, 'port must be between 1 and 65535'),
        ({'proto': 'ftp'}, 'proto must be one of'),
        ({'backend': 'sqlite'}, 'backend must be one of'),
        ({'default_ttl': -1}, 'must be non-negative'),
        ({'cleanup_interval': -1}, 'must be non-negative'),
    ],
)
def test_settings_validation(overrides, message):
    with pytest.raises(BadConfigurationError, match=message):
        Settings(**overrides)


# -------------------------------
# 3. Configuration loading behavior
# -------------------------------


def test_load_config_defaults():
    assert load_config() == Settings()


def test_load_config_from_file(config_file):
    settings = load_config(config_file)

    assert settings.token_length == 7
    assert settings.default_ttl == 0
    assert settings.path == 's/'
    assert settings.domain == 'sho.rt'
    assert settings.port == 443
    assert settings.backend == 'redis'
    assert settings.redis == {'host': 'redis', 'port': 6380, 'prefix': 'shortie:test'}
    # Untouched keys keep their defaults
    assert settings.dump_file == Defaults.DUMP_FILE


def test_load_config_from_config_env(monkeypatch, config_file):
    monkeypatch.setenv('SHORTIE_CONFIG', str(config_file))
    assert load_config().token_length == 7


def test_environment_overrides_file(monkeypatch, config_file):
    monkeypatch.setenv('SHORTIE_TOKEN_LENGTH', '12')
    monkeypatch.setenv('SHORTIE_PROTO', 'HTTP')
    monkeypatch.setenv('SHORTIE_PORT', '')  # empty values are ignored

    settings = load_config(config_file)

    assert settings.token_length == 12
    assert settings.proto == 'http'
    assert settings.port == 443


def test_invalid_environment_value(monkeypatch):
    monkeypatch.setenv('SHORTIE_PORT', 'eighty')

    with pytest.raises(BadConfigurationError, match="Invalid value for SHORTIE_PORT: 'eighty'."):
        load_config()


def test_empty_file_uses_defaults(tmp_path):
    path = tmp_path / 'empty.yml'
    path.write_text('', encoding='utf-8')
    assert load_config(path) == Settings()


@pytest.mark.parametrize(
    'content, message',
    [
        ('token_length: [unclosed\n', 'Malformed YAML'),
        ('- a\n- b\n', 'must contain a mapping'),
        ('colour: blue\n', 'Unknown configuration keys: colour'),
        ('token_length: ten\n', 'Invalid configuration value'),
    ],
)
def test_bad_configuration_file(tmp_path, content, message):
    path = tmp_path / 'bad.yml'
    path.write_text(content, encoding='utf-8')

    with pytest.raises(BadConfigurationError, match=message):
        load_config(path)


def test_missing_configuration_file(tmp_path):
    with pytest.raises(BadConfigurationError, match="Can't read configuration file"):
        load_config(tmp_path / 'missing.yml')

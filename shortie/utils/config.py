"""Utility functions for application configuration management.

Settings are resolved in three layers, later layers winning:

    1. Built-in defaults (see shortie.constants);
    2. An optional YAML file, given explicitly or via `SHORTIE_CONFIG`;
    3. `SHORTIE_*` environment variables.

The YAML file follows this structure (every key optional):

    token_length: 10
    default_ttl: 864000
    cleanup_interval: 3600
    path: s/
    dump_file: urls.json
    proto: https
    domain: sho.rt
    port: 443
    max_attempts: 100
    backend: redis
    redis:
        host: localhost
        port: 6379
        db: 0
        prefix: shortie:prod

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    load_config(path: str | Path | None = None) -> Settings
        Build validated Settings from defaults, YAML and environment.

Example:
    >>> from shortie.utils.config import load_config
    >>> settings = load_config('config/prod.yml')
    >>> settings.token_length
    10
"""

import os
import logging
import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from shortie.constants import ENV, TTL, Defaults
from shortie.exceptions import BadConfigurationError
from shortie.types import RedisConfiguration


logger = logging.getLogger(__name__)

BACKENDS = frozenset({'memory', 'redis'})
PROTOCOLS = frozenset({'http', 'https'})


# fmt: off
@dataclass(frozen=True)
class Settings:
    token_length: int = Defaults.TOKEN_LENGTH         # Characters per generated token
    default_ttl: int = TTL.DEFAULT                    # Seconds until a shortened URL expires (0 = never)
    cleanup_interval: int = TTL.CLEANUP_INTERVAL      # Seconds between expired entry sweeps (0 = no sweep)
    path: str = ''                                    # Path prefix of short URLs, e.g. 's/'
    dump_file: str = Defaults.DUMP_FILE               # Snapshot location (file path or s3://bucket/key)
    proto: str = Defaults.PROTO                       # Scheme of generated short URLs
    domain: str = Defaults.DOMAIN                     # Domain of generated short URLs
    port: int = Defaults.PORT                         # Public port of generated short URLs
    max_attempts: int = Defaults.MAX_ATTEMPTS         # Token draws per shorten request before giving up
    backend: str = Defaults.BACKEND                   # 'memory' or 'redis'
    redis: RedisConfiguration = field(default_factory=dict)  # host/port/db/username/password/prefix
# fmt: on

    def __post_init__(self):
        # Short URL paths always end with a slash so tokens append cleanly
        if self.path and not self.path.endswith('/'):
            object.__setattr__(self, 'path', f'{self.path}/')

        if self.token_length < 1:
            raise BadConfigurationError(f'token_length must be a positive integer (given value: {self.token_length}).')
        if self.max_attempts < 1:
            raise BadConfigurationError(f'max_attempts must be a positive integer (given value: {self.max_attempts}).')
        if not 1 <= self.port <= 65535:
            raise BadConfigurationError(f'port must be between 1 and 65535 (given value: {self.port}).')
        if self.proto not in PROTOCOLS:
            raise BadConfigurationError(f'proto must be one of {sorted(PROTOCOLS)} (given value: {self.proto!r}).')
        if self.backend not in BACKENDS:
            raise BadConfigurationError(f'backend must be one of {sorted(BACKENDS)} (given value: {self.backend!r}).')
        if self.default_ttl < 0 or self.cleanup_interval < 0:
            raise BadConfigurationError('default_ttl and cleanup_interval must be non-negative.')


# Environment variable -> (settings field, parser)
_ENV_OVERRIDES = {
    ENV.Settings.TOKEN_LENGTH: ('token_length', int),
    ENV.Settings.DEFAULT_TTL: ('default_ttl', int),
    ENV.Settings.CLEANUP_INTERVAL: ('cleanup_interval', int),
    ENV.Settings.PATH: ('path', str),
    ENV.Settings.DUMP_FILE: ('dump_file', str),
    ENV.Settings.PROTO: ('proto', str.lower),
    ENV.Settings.DOMAIN: ('domain', str),
    ENV.Settings.PORT: ('port', int),
    ENV.Settings.MAX_ATTEMPTS: ('max_attempts', int),
    ENV.Settings.BACKEND: ('backend', str.lower),
}


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Example:
        >>> os.environ['APP_ENV'] = 'prod'
        >>> app_env()
        'prod'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open('r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise BadConfigurationError(f"Can't read configuration file {path}.") from e
    except yaml.YAMLError as e:
        raise BadConfigurationError(f'Malformed YAML in configuration file {path}.') from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadConfigurationError(f'Configuration file {path} must contain a mapping (given type: {type(data).__name__}).')
    return data


def _env_overrides() -> dict[str, Any]:
    overrides = {}
    for name, (key, parse) in _ENV_OVERRIDES.items():
        raw = os.environ.get(name)
        if raw is None or raw == '':
            continue
        try:
            overrides[key] = parse(raw)
        except ValueError as e:
            raise BadConfigurationError(f'Invalid value for {name}: {raw!r}.') from e
    return overrides


def load_config(path: str | Path | None = None) -> Settings:
    """Load validated settings from defaults, an optional YAML file and the environment

    Args:
        path (str | Path | None):
            YAML configuration file. Falls back to `SHORTIE_CONFIG`;
            no file is read if neither is set.

    Returns:
        Settings: The merged, validated configuration.

    Raises:
        BadConfigurationError:
            If the file is unreadable or malformed, contains unknown keys,
            or any value fails validation.
    """
    path = path or os.environ.get(ENV.App.CONFIG)
    values: dict[str, Any] = {}

    if path:
        values.update(_load_yaml(Path(path)))
        logger.debug('Loaded configuration file.', extra={'path': str(path)})

    values.update(_env_overrides())

    known = {f.name for f in dataclasses.fields(Settings)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise BadConfigurationError(f'Unknown configuration keys: {", ".join(unknown)}')

    try:
        return Settings(**values)
    except TypeError as e:
        raise BadConfigurationError(f'Invalid configuration value: {e}') from e

import math
from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    # Short URL TTL duration (10 days)
    DEFAULT = 864_000  # 60 * 60 * 24 * 10
    # Janitor sweep interval (1 hour)
    CLEANUP_INTERVAL = 3_600
    # Passing NEVER (or 0) as ttl stores an entry which never expires
    NEVER = math.inf


class Defaults:
    """Default settings values."""

    TOKEN_LENGTH = 10
    MAX_ATTEMPTS = 100  # Collision redraws before giving up on a shorten request
    DUMP_FILE = 'urls.json'
    PROTO = 'https'
    DOMAIN = 'localhost'
    PORT = 8080
    BACKEND = 'memory'
    LOCK_STRIPES = 64


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        LOG_LEVEL = 'LOG_LEVEL'
        CONFIG = 'SHORTIE_CONFIG'

    class Settings(StrEnum):
        TOKEN_LENGTH = 'SHORTIE_TOKEN_LENGTH'
        DEFAULT_TTL = 'SHORTIE_DEFAULT_TTL'
        CLEANUP_INTERVAL = 'SHORTIE_CLEANUP_INTERVAL'
        PATH = 'SHORTIE_PATH'
        DUMP_FILE = 'SHORTIE_DUMP_FILE'
        PROTO = 'SHORTIE_PROTO'
        DOMAIN = 'SHORTIE_DOMAIN'
        PORT = 'SHORTIE_PORT'
        MAX_ATTEMPTS = 'SHORTIE_MAX_ATTEMPTS'
        BACKEND = 'SHORTIE_BACKEND'


# Sentinel key written by the health probe (not alphanumeric, so never resolvable)
HEALTH_KEY = '__health__'

# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
INVALID_URL = 'INVALID_URL'
TOKEN_NOT_FOUND = 'TOKEN_NOT_FOUND'
MISSING_URL = 'MISSING_URL'
SNAPSHOT_ERROR = 'SNAPSHOT_ERROR'
TOKEN_SPACE_EXHAUSTED = 'TOKEN_SPACE_EXHAUSTED'

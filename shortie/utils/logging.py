"""Structured JSON logging for shortie

Every record becomes one JSON object per line on stdout. Keyword data passed
through `extra=` is flattened into the object next to the fixed fields, so a
call like

    logger.info('Shortened URL.', extra={'token': 'aZ3kP9qLm0', 'attempts': 1})

is written as

    {"timestamp": "2026-10-19T12:00:00.000Z", "level": "INFO",
     "logger": "shortie.service", "message": "Shortened URL.",
     "token": "aZ3kP9qLm0", "attempts": 1}

The level comes from the `level` argument, else the LOG_LEVEL environment
variable, else INFO. shortie.app.create_service() calls initialize_logging()
unless told not to.
"""

import os
import json
import time
import logging
import logging.config

from shortie.constants import ENV
from shortie.exceptions import BadConfigurationError


# Attributes every LogRecord carries; anything else on a record came from `extra`
RESERVED_ATTRS = frozenset(vars(logging.LogRecord('', logging.NOTSET, '', 0, '', None, None))) | {'message', 'asctime'}

# Third-party loggers that are too chatty below WARNING
NOISY_LOGGERS = ('botocore', 'boto3', 'urllib3', 's3transfer')


class JsonFormatter(logging.Formatter):
    """Render a LogRecord, its `extra` data and any traceback as one JSON line"""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        return time.strftime('%Y-%m-%dT%H:%M:%S', time.gmtime(record.created)) + f'.{int(record.msecs):03d}Z'

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        # Fixed fields win over `extra` keys of the same name
        log |= {key: value for key, value in vars(record).items() if key not in RESERVED_ATTRS and key not in log}

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        return json.dumps(log, default=str)


def resolve_level(level: str | int | None = None) -> int:
    """Numeric logging level from an explicit value, LOG_LEVEL or INFO

    Raises:
        BadConfigurationError:
            If the name is not a known logging level.
    """
    if level is None:
        level = os.getenv(ENV.App.LOG_LEVEL) or 'INFO'
    if isinstance(level, int):
        return level

    levels = logging.getLevelNamesMapping()
    try:
        return levels[level.strip().upper()]
    except KeyError:
        raise BadConfigurationError(f"Unknown log level '{level}' (expected one of: {', '.join(sorted(levels))}).") from None


def initialize_logging(level: str | int | None = None) -> None:
    """Send all logging through a single JSON handler on stdout

    Call once at process start, before anything logs.
    """
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in NOISY_LOGGERS},
            'root': {
                'level': resolve_level(level),
                'handlers': ['stdout'],
            },
        }
    )

"""Application factory.

Build the token store and ShortenService once at startup and hand the
service to the request handlers:

    >>> from shortie.app import create_service
    >>> from shortie.handlers import redirect_handler
    >>> service = create_service()
    >>> response = redirect_handler({'pathParameters': {'token': 'aZ3kP9qLm0'}}, service)
    >>> service.close()
"""

import logging

from shortie.dao.base import TokenBaseDAO
from shortie.dao.memory import TokenMemoryDAO
from shortie.service import ShortenService
from shortie.utils.config import Settings, app_env, load_config
from shortie.utils.logging import initialize_logging


logger = logging.getLogger(__name__)


def create_store(settings: Settings) -> TokenBaseDAO:
    """Construct the token store selected by `settings.backend`"""
    if settings.backend == 'redis':
        # Imported lazily: the redis client is only needed for this backend
        from shortie.dao.redis import TokenRedisDAO

        redis_config = {f'redis_{k}': v for k, v in settings.redis.items() if k != 'prefix'}
        prefix = settings.redis.get('prefix', f'shortie:{app_env()}')
        logger.debug('Using Redis token store.', extra={'prefix': prefix})
        return TokenRedisDAO(default_ttl=settings.default_ttl, prefix=prefix, **redis_config)

    logger.debug('Using in-memory token store.')
    return TokenMemoryDAO(default_ttl=settings.default_ttl, cleanup_interval=settings.cleanup_interval)


def create_service(settings: Settings | None = None, configure_logging: bool = True) -> ShortenService:
    """Build a ready-to-use ShortenService

    Args:
        settings (Settings | None):
            Explicit settings. Loaded with load_config() when None.
        configure_logging (bool):
            Install the JSON logging configuration. Defaults to True.

    Returns:
        ShortenService: Service wrapping a freshly constructed store.
            Call close() on shutdown to stop the store's sweep.
    """
    if configure_logging:
        initialize_logging()

    settings = settings or load_config()
    service = ShortenService(create_store(settings), settings)
    logger.info(
        'Service ready.',
        extra={'backend': settings.backend, 'domain': settings.domain, 'proto': settings.proto, 'token_length': settings.token_length},
    )
    return service

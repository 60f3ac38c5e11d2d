import functools
from typing import TypeVar, Any
from collections.abc import Callable

import redis

from shortie.dao.exceptions import DataStoreError
from shortie.dao.redis.mixins import redis_endpoint


__all__ = ['translate_redis_errors']

F = TypeVar('F', bound=Callable[..., Any])


def translate_redis_errors[F](method: F) -> F:
    """Re-raise any redis-py failure inside a store method as DataStoreError

    Callers of a token store only ever handle DAO exceptions. Lost connections
    and timeouts name the endpoint so the message points at the misconfigured
    server. Every other RedisError (WRONGTYPE replies, aborted transactions,
    auth failures) keeps the server's message.

    Example:
        >>> @translate_redis_errors
        ... def count(self):
        ...     return self.redis.dbsize()
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise DataStoreError(f"Can't connect to Redis at {redis_endpoint(self.redis)}.") from e
        except redis.exceptions.RedisError as e:
            raise DataStoreError(f'Redis command failed: {e}') from e

    return wrapper

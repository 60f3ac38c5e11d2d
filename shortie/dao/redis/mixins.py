"""Connection handling shared by the Redis-backed token stores.

RedisClientMixin sits in front of TokenBaseDAO in the MRO. It either adopts
a caller-supplied `redis.Redis` or builds one from host/port/db settings,
pings it once on construction and owns the key schema used to namespace
every token key.

Ownership matters on shutdown: `close()` disconnects the connection pool
only when the mixin built the client itself. An injected client belongs to
the caller, who may share it with other components.

Example:
    >>> class TokenRedisDAO(RedisClientMixin, TokenBaseDAO):
    ...     pass
    >>> store = TokenRedisDAO(redis_host='redis', prefix='shortie:prod')
    >>> store.ping()
    True
    >>> store.close()
"""

from typing import Optional

import redis

from shortie.dao.redis.redis_key_schema import RedisKeySchema
from shortie.dao.exceptions import DataStoreError


def redis_endpoint(client: redis.Redis) -> str:
    """`host:port/db` of the server `client` talks to, for error messages."""
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


class RedisClientMixin:
    """Give a token store a Redis client, a key schema and a liveness check.

    Attributes:
        redis (redis.Redis):
            Client used for every store command.
        keys (RedisKeySchema):
            Builds `<prefix>:token:<token>` key names.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
        **kwargs,
    ):
        """Connect to Redis and verify the server answers

        Connection settings are ignored when `redis_client` is given.
        Keyword arguments the mixin does not know (TTL settings and the
        like) continue down the MRO to the store base class.

        Raises:
            DataStoreError:
                If the server does not answer the initial PING.
        """
        super().__init__(**kwargs)

        self._owns_client = redis_client is None
        if self._owns_client:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self.ping()

    def ping(self, raise_error: bool = True) -> bool:
        """Check that the Redis server answers

        Returns False on failure when `raise_error` is off; otherwise a
        DataStoreError naming the endpoint is raised.
        """
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if not raise_error:
                return False
            raise DataStoreError(f"Redis at {redis_endpoint(self.redis)} is unreachable. Check the connection settings.") from e
        return True

    def close(self) -> None:
        """Release the connection pool if this store created the client."""
        if self._owns_client:
            self.redis.close()
        super().close()

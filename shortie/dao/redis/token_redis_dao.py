"""Data Access Object (DAO) implementation for storing token entries in Redis

This module provides a Redis-based implementation of TokenBaseDAO. Redis
enforces entry TTLs natively, so the sweep is a no-op and count() never
includes expired entries.

Responsibilities:
    - Insert and retrieve token entries from Redis;
    - Insert-if-absent via SET NX;
    - Export all entries and replace them in a single MULTI/EXEC transaction;
    - Translate Redis failures into DAO exceptions.

Classes:
    TokenRedisDAO:
        DAO for storing and retrieving token entries in a Redis datastore.

Example:
    >>> dao = TokenRedisDAO(redis_host='localhost', prefix='shortie:dev', default_ttl=864_000)
    >>> dao.add('aZ3kP9qLm0', 'https://example.com/page')
    Entry(token='aZ3kP9qLm0', target='https://example.com/page', expires_at=datetime(...))
    >>> dao.get('aZ3kP9qLm0').target
    'https://example.com/page'
"""

import logging
from collections.abc import Mapping
from datetime import datetime, timedelta, UTC

from beartype import beartype

from shortie.models import Entry
from shortie.constants import TTL
from shortie.dao.base import TokenBaseDAO
from shortie.dao.redis.mixins import RedisClientMixin
from shortie.dao.redis.helpers import translate_redis_errors
from shortie.dao.exceptions import TokenAlreadyExistsError, TokenNotFoundError


logger = logging.getLogger(__name__)


class TokenRedisDAO(RedisClientMixin, TokenBaseDAO):
    """Redis-based Data Access Object (DAO) for token entries

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        See TokenBaseDAO. Every method raises DataStoreError on
        connectivity issues with Redis.
    """

    def __init__(self, default_ttl: float = TTL.DEFAULT, **kwargs):
        # Redis expires keys itself, there is nothing to sweep
        super().__init__(default_ttl=default_ttl, cleanup_interval=0, **kwargs)

    @translate_redis_errors
    @beartype
    def get(self, token: str) -> Entry:
        """Retrieve a stored entry by token

        Fetches the target and its remaining TTL in a single transaction
        and converts the TTL into an absolute expiry.

        Raises:
            TokenNotFoundError:
                If the token does not exist in Redis (absent or expired).
        """
        key = self.keys.token_key(token)
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.get(key)
            pipe.pttl(key)
            target, pttl = pipe.execute()

        if target is None:
            raise TokenNotFoundError(f"Token '{token}' not found.")

        return Entry(token=token, target=target, expires_at=_expires_at_from_pttl(pttl))

    @translate_redis_errors
    @beartype
    def set(self, token: str, target: str, ttl: int | float | None = None) -> Entry:
        entry = Entry(token=token, target=target, expires_at=self._expires_at(ttl))
        self.redis.set(self.keys.token_key(token), target, **_expiry_kwargs(entry))
        return entry

    @translate_redis_errors
    @beartype
    def add(self, token: str, target: str, ttl: int | float | None = None) -> Entry:
        """Insert a token entry only if the token is not already live

        NOTE: SET NX performs the existence check and the write as one
              command, so two concurrent callers can never both claim the
              same token.
        """
        entry = Entry(token=token, target=target, expires_at=self._expires_at(ttl))
        if not self.redis.set(self.keys.token_key(token), target, nx=True, **_expiry_kwargs(entry)):
            raise TokenAlreadyExistsError(f"Token '{token}' already exists.")
        return entry

    @translate_redis_errors
    def count(self) -> int:
        return sum(1 for _ in self.redis.scan_iter(match=self.keys.token_pattern()))

    @translate_redis_errors
    def export_all(self) -> dict[str, Entry]:
        keys = list(self.redis.scan_iter(match=self.keys.token_pattern()))
        if not keys:
            return {}

        with self.redis.pipeline(transaction=True) as pipe:
            for key in keys:
                pipe.get(key)
                pipe.pttl(key)
            results = pipe.execute()

        entries = {}
        for key, target, pttl in zip(keys, results[::2], results[1::2]):
            if target is None:
                # Expired between SCAN and GET
                continue
            token = self.keys.token_from_key(key)
            entries[token] = Entry(token=token, target=target, expires_at=_expires_at_from_pttl(pttl))
        return entries

    @translate_redis_errors
    @beartype
    def replace_all(
        self,
        entries: Mapping[str, Entry],
        default_ttl: int | float | None = None,
        cleanup_interval: int | float | None = None,
    ) -> int:
        """Replace every token entry in one MULTI/EXEC transaction

        Old keys are deleted and new keys written inside the same transaction,
        so no client observes a mix of old and new entries. Entries which are
        already expired are skipped. `cleanup_interval` is accepted for
        interface compatibility and ignored.
        """
        if default_ttl is not None:
            self.default_ttl = default_ttl

        now = datetime.now(UTC)
        live = {token: entry for token, entry in entries.items() if not entry.expired(now)}
        old_keys = list(self.redis.scan_iter(match=self.keys.token_pattern()))

        with self.redis.pipeline(transaction=True) as pipe:
            if old_keys:
                pipe.delete(*old_keys)
            for token, entry in live.items():
                pipe.set(self.keys.token_key(token), entry.target, **_expiry_kwargs(entry))
            pipe.execute()

        logger.info('Replaced store contents.', extra={'entries': len(live), 'skipped': len(entries) - len(live)})
        return len(live)

    @translate_redis_errors
    def flush(self) -> None:
        keys = list(self.redis.scan_iter(match=self.keys.token_pattern()))
        if keys:
            self.redis.delete(*keys)

    def delete_expired(self) -> int:
        return 0


def _expiry_kwargs(entry: Entry) -> dict:
    if entry.expires_at is None:
        return {}
    return {'pxat': int(entry.expires_at.timestamp() * 1000)}


def _expires_at_from_pttl(pttl: int | None) -> datetime | None:
    # PTTL: -1 means no expiry, -2 means the key is gone
    if pttl is None or pttl < 0:
        return None
    return datetime.now(UTC) + timedelta(milliseconds=pttl)

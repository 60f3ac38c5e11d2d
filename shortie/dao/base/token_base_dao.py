"""Abstract base class for token store data access objects (DAOs).

This class establishes a consistent contract for all token store implementations,
regardless of the underlying storage mechanism (e.g., in-process memory, Redis).

Responsibilities:
    - Provide an interface for inserting, conditionally inserting and retrieving entries.
    - Provide bulk export and atomic bulk replacement for snapshots.
    - Standardize expiry semantics: expired entries are never returned by get().

Example:
    Typical usage with a datastore-specific implementation:

        >>> from shortie.dao.memory import TokenMemoryDAO

        >>> with TokenMemoryDAO(default_ttl=3600, cleanup_interval=60) as store:
        ...     store.add("a1b2c3", "https://example.com/blog/article-123")
        ...     store.get("a1b2c3").target
        'https://example.com/blog/article-123'
"""

import math
from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import datetime, timedelta, UTC

from shortie.models import Entry
from shortie.dao.exceptions import TokenNotFoundError


class TokenBaseDAO(ABC):
    """Interface for token store data access objects (DAOs).

    Attributes:
        default_ttl (float):
            TTL in seconds applied when set()/add() receive ttl=None.
            0 or math.inf means entries never expire.
        cleanup_interval (float):
            Seconds between background sweeps. 0 or less disables the sweep.

    Methods:
        get(token: str) -> Entry:
            Retrieve the live entry for a token.
            Raises TokenNotFoundError if absent or expired.

        set(token: str, target: str, ttl: int | float | None = None) -> Entry:
            Insert or overwrite the entry for a token.

        add(token: str, target: str, ttl: int | float | None = None) -> Entry:
            Insert only if no live entry holds the token.
            Raises TokenAlreadyExistsError otherwise.

        count() -> int:
            Number of tracked entries, including expired ones pending sweep.

        export_all() -> dict[str, Entry]:
            Every tracked entry with its expiration metadata.

        replace_all(entries, default_ttl=None, cleanup_interval=None) -> int:
            Atomically swap the whole store contents for `entries`.

        flush() -> None:
            Remove every entry.

        delete_expired() -> int:
            Run one sweep pass, return the number of removed entries.

        close() -> None:
            Stop background work.

    Subclassing:
        Datastore-specific implementations (e.g., TokenMemoryDAO or
        TokenRedisDAO) must extend this class and implement all
        abstract methods.
    """

    def __init__(self, default_ttl: float = 0, cleanup_interval: float = 0):
        self.default_ttl = default_ttl
        self.cleanup_interval = cleanup_interval

    @abstractmethod
    def get(self, token: str) -> Entry:
        """Retrieve the live entry stored under `token`.

        Args:
            token (str):
                The token of the entry to be retrieved.

        Returns:
            Entry: The live entry.

        Raises:
            TokenNotFoundError:
                If no entry exists for the token, or the entry has expired.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def set(self, token: str, target: str, ttl: int | float | None = None) -> Entry:
        """Insert or overwrite the entry stored under `token`.

        Args:
            token (str):
                The token to write.

            target (str):
                The URL the token resolves to.

            ttl (float | None):
                Seconds until expiry. None applies the store's default TTL,
                0 or math.inf marks the entry as never-expiring.

        Returns:
            Entry: The entry as written.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def add(self, token: str, target: str, ttl: int | float | None = None) -> Entry:
        """Insert the entry only if no live entry holds `token`.

        The check and the write happen atomically with respect to
        concurrent callers using the same token.

        Raises:
            TokenAlreadyExistsError:
                If a live entry already holds the token.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def count(self) -> int:
        pass

    @abstractmethod
    def export_all(self) -> dict[str, Entry]:
        pass

    @abstractmethod
    def replace_all(
        self,
        entries: Mapping[str, Entry],
        default_ttl: int | float | None = None,
        cleanup_interval: int | float | None = None,
    ) -> int:
        """Atomically discard the current contents and install `entries`.

        This is a full replace, never a merge: tokens absent from `entries`
        become unreachable. No reader observes a mix of old and new entries.

        Args:
            entries (Mapping[str, Entry]):
                The new store contents, keyed by token.

            default_ttl (float | None):
                New default TTL for later inserts. None keeps the current one.

            cleanup_interval (float | None):
                New sweep interval. None keeps the current one.

        Returns:
            int: Number of entries installed.
        """
        pass

    @abstractmethod
    def flush(self) -> None:
        pass

    @abstractmethod
    def delete_expired(self) -> int:
        pass

    def close(self) -> None:
        """Stop background work. Stores without background work do nothing."""
        pass

    def lookup(self, token: str) -> str | None:
        """Return the live target for `token`, or None if absent or expired."""
        try:
            return self.get(token).target
        except TokenNotFoundError:
            return None

    def _expires_at(self, ttl: int | float | None, now: datetime | None = None) -> datetime | None:
        """Translate a relative TTL into an absolute UTC expiry (None for never)."""
        if ttl is None:
            ttl = self.default_ttl
        if ttl <= 0 or math.isinf(ttl):
            return None
        return (now or datetime.now(UTC)) + timedelta(seconds=ttl)

    def __enter__(self) -> 'TokenBaseDAO':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

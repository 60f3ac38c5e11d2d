"""In-process, thread-safe implementation of the token store

Responsibilities:
    - Hold token -> Entry mappings in a dict shared by all request threads;
    - Serialize writes per token with striped locks (no store-wide lock);
    - Enforce expiry lazily on read and reclaim memory with a janitor sweep;
    - Swap the whole table atomically on import.

Classes:
    TokenMemoryDAO:
        DAO storing entries in process memory.

Example:
    >>> store = TokenMemoryDAO(default_ttl=864_000, cleanup_interval=3_600)
    >>> store.add('aZ3kP9qLm0', 'https://example.com/page')
    Entry(token='aZ3kP9qLm0', target='https://example.com/page', expires_at=datetime(...))
    >>> store.get('aZ3kP9qLm0').target
    'https://example.com/page'
    >>> store.close()
"""

import logging
import threading
from collections.abc import Mapping
from datetime import datetime, UTC

import xxhash
from beartype import beartype

from shortie.models import Entry
from shortie.constants import TTL, Defaults
from shortie.dao.base import TokenBaseDAO
from shortie.dao.memory.janitor import Janitor
from shortie.dao.exceptions import TokenAlreadyExistsError, TokenNotFoundError


logger = logging.getLogger(__name__)


class _Table:
    """A dict of entries plus the lock stripes guarding it.

    Tables are never cleared in place. flush() and replace_all() build a new
    table and swap the reference, so a reader holding the old one still sees
    a consistent (if stale) view.
    """

    __slots__ = ('items', 'locks')

    def __init__(self, stripes: int, items: Mapping[str, Entry] | None = None):
        self.items: dict[str, Entry] = dict(items or {})
        self.locks = [threading.Lock() for _ in range(stripes)]

    def lock_for(self, token: str) -> threading.Lock:
        return self.locks[xxhash.xxh64_intdigest(token.encode('utf-8')) % len(self.locks)]


class TokenMemoryDAO(TokenBaseDAO):
    """Thread-safe in-memory token store with TTL semantics

    Attributes:
        default_ttl (float):
            TTL in seconds used when callers pass ttl=None (0 = never expire).
        cleanup_interval (float):
            Seconds between janitor sweeps (0 or less disables the janitor).

    Methods:
        See TokenBaseDAO.

    NOTE:
        - Entries are immutable, so get() reads the dict without locking: a
          single dict lookup sees either the old or the new entry, never a
          partial one.
        - add() holds the token's stripe lock across check and write, which
          makes it the insert-if-absent primitive used by ShortenService.
    """

    def __init__(
        self,
        default_ttl: float = TTL.DEFAULT,
        cleanup_interval: float = TTL.CLEANUP_INTERVAL,
        entries: Mapping[str, Entry] | None = None,
        stripes: int = Defaults.LOCK_STRIPES,
    ):
        """Initialize an in-memory token store

        Args:
            default_ttl (float):
                Default TTL in seconds. Defaults to 10 days.

            cleanup_interval (float):
                Janitor sweep interval in seconds. Defaults to 1 hour.

            entries (Optional[Mapping[str, Entry]]):
                Initial store contents, keyed by token.

            stripes (int):
                Number of lock stripes. Defaults to 64.
        """
        if stripes < 1:
            raise ValueError(f'Lock stripes must be a positive integer (given value: {stripes}).')

        super().__init__(default_ttl=default_ttl, cleanup_interval=cleanup_interval)
        self._stripes = stripes
        self._table = _Table(stripes, _keyed_by_token(entries or {}))
        self._janitor: Janitor | None = None
        self._admin_lock = threading.Lock()
        self._closed = False
        self._start_janitor()

    @beartype
    def get(self, token: str) -> Entry:
        entry = self._table.items.get(token)
        if entry is None or entry.expired():
            raise TokenNotFoundError(f"Token '{token}' not found.")
        return entry

    @beartype
    def set(self, token: str, target: str, ttl: int | float | None = None) -> Entry:
        entry = Entry(token=token, target=target, expires_at=self._expires_at(ttl))
        table = self._table
        with table.lock_for(token):
            table.items[token] = entry
        return entry

    @beartype
    def add(self, token: str, target: str, ttl: int | float | None = None) -> Entry:
        now = datetime.now(UTC)
        entry = Entry(token=token, target=target, expires_at=self._expires_at(ttl, now))
        table = self._table
        with table.lock_for(token):
            existing = table.items.get(token)
            if existing is not None and not existing.expired(now):
                raise TokenAlreadyExistsError(f"Token '{token}' already exists.")
            table.items[token] = entry
        return entry

    def count(self) -> int:
        return len(self._table.items)

    def export_all(self) -> dict[str, Entry]:
        # dict.copy() is atomic with respect to concurrent writers
        return self._table.items.copy()

    @beartype
    def replace_all(
        self,
        entries: Mapping[str, Entry],
        default_ttl: int | float | None = None,
        cleanup_interval: int | float | None = None,
    ) -> int:
        table = _Table(self._stripes, _keyed_by_token(entries))

        with self._admin_lock:
            if default_ttl is not None:
                self.default_ttl = default_ttl
            restart = cleanup_interval is not None and cleanup_interval != self.cleanup_interval
            if restart:
                self.cleanup_interval = cleanup_interval
            # Single reference assignment: readers see the old table or the new one
            self._table = table
            if restart:
                self._stop_janitor()
                if not self._closed:
                    self._start_janitor()

        logger.info('Replaced store contents.', extra={'entries': len(table.items)})
        return len(table.items)

    def flush(self) -> None:
        self._table = _Table(self._stripes)

    def delete_expired(self) -> int:
        table = self._table
        now = datetime.now(UTC)
        removed = 0
        for token, entry in table.items.copy().items():
            if not entry.expired(now):
                continue
            with table.lock_for(token):
                # Skip tokens rewritten since the scan
                if table.items.get(token) is entry:
                    del table.items[token]
                    removed += 1
        return removed

    def close(self) -> None:
        with self._admin_lock:
            self._closed = True
            self._stop_janitor()

    def _start_janitor(self) -> None:
        if self.cleanup_interval > 0:
            self._janitor = Janitor(self.cleanup_interval, self.delete_expired).start()

    def _stop_janitor(self) -> None:
        if self._janitor is not None:
            self._janitor.stop()
            self._janitor = None


def _keyed_by_token(entries: Mapping[str, Entry]) -> dict[str, Entry]:
    # The mapping key is authoritative; realign entries imported under a different key
    return {
        key: entry if entry.token == key else Entry(token=key, target=entry.target, expires_at=entry.expires_at)
        for key, entry in entries.items()
    }

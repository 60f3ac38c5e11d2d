"""Shorten and resolve URLs against a token store.

Classes:
    ShortenService:
        Allocates unused tokens for new URLs, resolves tokens back to URLs
        and exposes the administrative snapshot operations.

Example:
    >>> from shortie.dao.memory import TokenMemoryDAO
    >>> from shortie.utils.config import Settings
    >>> service = ShortenService(TokenMemoryDAO(), Settings())
    >>> token = service.shorten('https://example.com')
    >>> service.resolve(token)
    'https://example.com'
    >>> service.resolve('doesnotexist')
    Traceback (most recent call last):
        ...
    shortie.dao.exceptions.TokenNotFoundError: Token 'doesnotexist' not found.
"""

import random
import logging
from datetime import datetime, UTC

from shortie.constants import HEALTH_KEY, TTL
from shortie.dao.base import TokenBaseDAO
from shortie.dao.exceptions import DAOError, TokenAlreadyExistsError, TokenNotFoundError
from shortie.exceptions import InvalidURLError, TokenSpaceExhaustedError
from shortie.snapshot import encode_snapshot, dumps_snapshot, loads_snapshot, read_snapshot, write_snapshot
from shortie.types import SnapshotPayload
from shortie.utils.config import Settings
from shortie.utils.helpers import short_url
from shortie.utils.tokens import generate_token
from shortie.utils.urls import is_url, normalize_url, with_default_scheme, extract_token


logger = logging.getLogger(__name__)


class ShortenService:
    """Business logic for shortening and resolving URLs

    The service owns no global state: it is built once at startup around a
    store and passed explicitly to whoever handles requests.

    Attributes:
        store (TokenBaseDAO):
            Token store shared by every request.
        settings (Settings):
            Token length, retry budget, short URL layout and snapshot location.
        rng (random.Random | None):
            Random source for token generation (None = process-wide SystemRandom).
    """

    def __init__(self, store: TokenBaseDAO, settings: Settings | None = None, rng: random.Random | None = None):
        self.store = store
        self.settings = settings or Settings()
        self.rng = rng

    def shorten(self, url: str, token_length: int | None = None) -> str:
        """Register `url` under a fresh token and return the token

        Tokens are claimed with the store's insert-if-absent primitive, so a
        collision (with a live entry or a concurrent request) just triggers
        a full redraw.

        Args:
            url (str):
                The URL to shorten. Must pass the URL well-formedness check.
            token_length (int | None):
                Characters in the token. Defaults to settings.token_length.

        Returns:
            str: The newly registered token.

        Raises:
            InvalidURLError:
                If `url` is not a well-formed absolute URL. Nothing is stored.
            TokenSpaceExhaustedError:
                If settings.max_attempts draws all collided.
        """
        if not is_url(url):
            logger.info('Rejected malformed URL.', extra={'url': url})
            raise InvalidURLError(f'Invalid URL: {url!r}')

        target = normalize_url(url)
        length = self.settings.token_length if token_length is None else token_length

        for attempt in range(1, self.settings.max_attempts + 1):
            token = generate_token(length, rng=self.rng)
            try:
                self.store.add(token, target)
            except TokenAlreadyExistsError:
                logger.debug('Token collision, drawing again.', extra={'token': token, 'attempt': attempt})
                continue
            logger.info('Shortened URL.', extra={'token': token, 'target': target, 'attempts': attempt})
            return token

        logger.error(
            'Token space exhausted.',
            extra={'token_length': length, 'attempts': self.settings.max_attempts, 'entries': self.store.count()},
        )
        raise TokenSpaceExhaustedError(f'No free token of length {length} after {self.settings.max_attempts} attempts.')

    def resolve(self, raw: str) -> str:
        """Resolve a raw path segment to the URL to redirect to

        Steps:
            1. Strip the configured path prefix (first occurrence).
            2. Keep the first alphanumeric run as the lookup key.
            3. Look the key up (expired entries count as absent).
            4. Default a scheme-less target to https.

        Raises:
            TokenNotFoundError:
                If no live entry exists for the extracted key.
        """
        token = extract_token(raw, self.settings.path)
        if token is None:
            raise TokenNotFoundError(f"No token in path segment '{raw}'.")

        entry = self.store.get(token)
        logger.debug('Resolved token.', extra={'token': token, 'target': entry.target})
        return with_default_scheme(entry.target)

    def short_url(self, token: str) -> str:
        return short_url(token, self.settings)

    def count(self) -> int:
        return self.store.count()

    def dump(self) -> SnapshotPayload:
        return encode_snapshot(self.store.export_all())

    def export_to(self, location: str | None = None) -> int:
        """Write a snapshot of every tracked entry to `location`

        Args:
            location (str | None):
                File path or s3:// URI. Defaults to settings.dump_file.

        Returns:
            int: Number of exported entries.

        Raises:
            SnapshotError:
                If the snapshot cannot be written. The store is untouched.
        """
        location = location or self.settings.dump_file
        entries = self.store.export_all()
        try:
            write_snapshot(location, dumps_snapshot(entries))
        except Exception:
            logger.exception('Failed to export snapshot.', extra={'location': location})
            raise
        logger.info('Exported snapshot.', extra={'location': location, 'entries': len(entries)})
        return len(entries)

    def import_from(self, location: str | None = None) -> int:
        """Replace the store with the snapshot stored at `location`

        The snapshot is read and fully decoded before the store is touched,
        so a failed import leaves the previous contents in place.

        Raises:
            SnapshotError:
                If the snapshot cannot be read or decoded.
        """
        location = location or self.settings.dump_file
        try:
            entries = loads_snapshot(read_snapshot(location))
        except Exception:
            logger.exception('Failed to import snapshot.', extra={'location': location})
            raise
        count = self._replace(entries)
        logger.info('Imported snapshot.', extra={'location': location, 'entries': count})
        return count

    def import_payload(self, data: bytes | str) -> int:
        """Replace the store with a submitted snapshot document

        Raises:
            SnapshotError:
                If the payload is not a valid snapshot. The store is untouched.
        """
        try:
            entries = loads_snapshot(data)
        except Exception:
            logger.exception('Failed to import submitted snapshot.')
            raise
        count = self._replace(entries)
        logger.info('Imported submitted snapshot.', extra={'entries': count})
        return count

    def health(self) -> bool:
        """Write the current timestamp under the health key and read it back

        Returns:
            bool: True if the value read back matches, False if the store
                  errored or returned something else.
        """
        stamp = datetime.now(UTC).isoformat()
        try:
            self.store.set(HEALTH_KEY, stamp, ttl=TTL.NEVER)
            observed = self.store.get(HEALTH_KEY).target
        except DAOError:
            logger.exception('Health probe failed.')
            return False

        if observed != stamp:
            logger.warning('Health probe mismatch.', extra={'expected': stamp, 'observed': observed})
            return False
        return True

    def close(self) -> None:
        self.store.close()

    def _replace(self, entries) -> int:
        return self.store.replace_all(
            entries,
            default_ttl=self.settings.default_ttl,
            cleanup_interval=self.settings.cleanup_interval,
        )

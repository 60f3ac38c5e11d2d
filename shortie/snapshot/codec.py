"""Snapshot encoding and decoding.

A snapshot is a JSON document mapping each token to its entry:

    {
        "aZ3kP9qLm0": {"target": "https://example.com", "expires_at": "2026-10-29T12:00:00.000000+00:00"},
        "__health__": {"target": "2026-10-19T12:00:00+00:00", "expires_at": null}
    }

`expires_at` is an ISO-8601 UTC timestamp, or null for entries which never
expire. dumps_snapshot() and loads_snapshot() are exact inverses for token,
target and expiry.

For compatibility with dumps produced by earlier releases, the decoder
also accepts its entry shape:

    {"aZ3kP9qLm0": {"Object": "https://example.com", "Expiration": 1793275200000000000}}

where `Expiration` is a Unix timestamp in nanoseconds and 0 means never.

Functions:
    encode_snapshot(entries) -> SnapshotPayload
    decode_snapshot(payload) -> dict[str, Entry]
    dumps_snapshot(entries) -> bytes
    loads_snapshot(data) -> dict[str, Entry]
"""

import json
from collections.abc import Mapping
from datetime import datetime, timedelta, UTC
from typing import Any

from shortie.models import Entry
from shortie.types import SnapshotPayload
from shortie.exceptions import SnapshotError


NANOSECONDS = 1_000_000_000


def _format_expiry(expires_at: datetime | None) -> str | None:
    return None if expires_at is None else expires_at.astimezone(UTC).isoformat(timespec='microseconds')


def _parse_expiry(token: str, value: Any) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise SnapshotError(f"Entry '{token}': expires_at must be a string or null (given type: {type(value).__name__}).")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise SnapshotError(f"Entry '{token}': malformed expires_at {value!r}.") from e
    # Naive timestamps are taken as UTC
    return parsed.replace(tzinfo=UTC) if parsed.tzinfo is None else parsed.astimezone(UTC)


def _parse_legacy_expiry(token: str, value: Any) -> datetime | None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise SnapshotError(f"Entry '{token}': Expiration must be an integer (given type: {type(value).__name__}).")
    if value <= 0:
        return None
    seconds, nanos = divmod(value, NANOSECONDS)
    return datetime.fromtimestamp(seconds, UTC) + timedelta(microseconds=nanos // 1000)


def _decode_entry(token: Any, item: Any) -> Entry:
    if not isinstance(token, str) or not token:
        raise SnapshotError(f'Snapshot keys must be non-empty strings (given value: {token!r}).')
    if not isinstance(item, dict):
        raise SnapshotError(f"Entry '{token}' must be an object (given type: {type(item).__name__}).")

    if 'target' in item:
        target = item['target']
        expires_at = _parse_expiry(token, item.get('expires_at'))
    elif 'Object' in item:
        target = item['Object']
        expires_at = _parse_legacy_expiry(token, item.get('Expiration', 0))
    else:
        raise SnapshotError(f"Entry '{token}' has no target.")

    if not isinstance(target, str):
        raise SnapshotError(f"Entry '{token}': target must be a string (given type: {type(target).__name__}).")
    return Entry(token=token, target=target, expires_at=expires_at)


def encode_snapshot(entries: Mapping[str, Entry]) -> SnapshotPayload:
    return {token: {'target': entry.target, 'expires_at': _format_expiry(entry.expires_at)} for token, entry in entries.items()}


def decode_snapshot(payload: Any) -> dict[str, Entry]:
    """Decode a parsed snapshot document into entries

    The whole payload is validated before anything is returned, so callers
    never act on a partially decoded snapshot.

    Raises:
        SnapshotError: If the payload or any entry is malformed.
    """
    if not isinstance(payload, dict):
        raise SnapshotError(f'Snapshot must be a JSON object (given type: {type(payload).__name__}).')
    return {token: _decode_entry(token, item) for token, item in payload.items()}


def dumps_snapshot(entries: Mapping[str, Entry]) -> bytes:
    return json.dumps(encode_snapshot(entries), sort_keys=True).encode('utf-8')


def loads_snapshot(data: bytes | str) -> dict[str, Entry]:
    try:
        payload = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SnapshotError('Snapshot is not valid JSON.') from e
    return decode_snapshot(payload)

"""URL helpers shared by the shorten and resolve paths.

Functions:
    is_url(value) -> bool
        Predicate: is `value` a well-formed absolute URL (scheme optional)
    normalize_url(value) -> str
        Canonical parse/re-serialize form of a URL
    has_scheme(value) -> bool
        True if `value` starts with a `<scheme>:` prefix
    with_default_scheme(value, scheme='https') -> str
        Prefix a scheme-less target with a default scheme
    extract_token(raw, prefix='') -> str | None
        Pull the lookup key out of a raw path segment

Example:
    >>> is_url('https://example.com/a?b=c')
    True
    >>> is_url('not a url')
    False
    >>> with_default_scheme('example.com/page')
    'https://example.com/page'
    >>> extract_token('s/aZ3kP9qLm0?utm=1', prefix='s/')
    'aZ3kP9qLm0'
"""

import re
import ipaddress
from urllib.parse import urlsplit, urlunsplit


MAX_URL_LENGTH = 2083
ALLOWED_SCHEMES = frozenset({'http', 'https', 'ftp', 'ws', 'wss', 'tcp', 'udp'})

SCHEME_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.\-]*:')
# What follows `host:` in a bare host:port value
PORT_PATTERN = re.compile(r'^\d+(/|$)')
TOKEN_PATTERN = re.compile(r'[a-zA-Z0-9]+')
HOST_LABEL_PATTERN = re.compile(r'^(?!-)[a-zA-Z0-9\-_]{1,63}(?<!-)$')
TLD_PATTERN = re.compile(r'^[a-zA-Z]{2,63}$|^xn--[a-zA-Z0-9\-]{1,59}$')


def has_scheme(value: str) -> bool:
    """True if `value` starts with a URL scheme (`https:`, `mailto:`, ...).

    A bare `host:port` prefix such as `example.com:8080/x` is not a scheme.
    """
    match = SCHEME_PATTERN.match(value)
    return match is not None and PORT_PATTERN.match(value[match.end() :]) is None


def _valid_host(host: str) -> bool:
    if host == 'localhost':
        return True
    try:
        ipaddress.ip_address(host)
    except ValueError:
        pass
    else:
        return True

    labels = host.rstrip('.').split('.')
    if len(labels) < 2:
        return False
    return all(HOST_LABEL_PATTERN.match(label) for label in labels) and TLD_PATTERN.match(labels[-1]) is not None


def is_url(value: str) -> bool:
    """Check whether `value` is a well-formed absolute URL.

    A missing scheme is tolerated (validated as http), but the host must be
    `localhost`, an IP address, or a dotted DNS name with an alphabetic TLD.
    Whitespace anywhere in the value is rejected.
    """
    if not isinstance(value, str) or not value or len(value) > MAX_URL_LENGTH:
        return False
    if any(char.isspace() for char in value):
        return False

    candidate = value if has_scheme(value) else f'http://{value}'
    try:
        parts = urlsplit(candidate)
        # Accessing .port validates it (raises ValueError when out of range)
        parts.port
    except ValueError:
        return False

    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        return False
    return bool(parts.hostname) and _valid_host(parts.hostname)


def normalize_url(value: str) -> str:
    """Return the canonical form of `value` (lowercase scheme, redundant separators dropped)."""
    return urlunsplit(urlsplit(value))


def with_default_scheme(value: str, scheme: str = 'https') -> str:
    if has_scheme(value):
        return value
    return f'{scheme}://{value.lstrip("/")}'


def extract_token(raw: str, prefix: str = '') -> str | None:
    """Return the first alphanumeric run of `raw` after removing `prefix`.

    Stray path separators or query strings leaking into the token segment
    are dropped. Returns None if no alphanumeric character is left.
    """
    if prefix:
        raw = raw.replace(prefix, '', 1)
    match = TOKEN_PATTERN.search(raw)
    return match.group(0) if match else None

from dataclasses import dataclass
from datetime import datetime, UTC


@dataclass(frozen=True)
class Entry:
    """Represent a stored token to target URL mapping.

    Attributes:
        token (str):
            The unique short identifier substituted for the long URL.
        target (str):
            The absolute URL the token resolves to.
        expires_at (Optional[datetime]):
            Absolute UTC time after which the entry is logically absent.
            None if the entry never expires.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> entry = Entry(
        ...     token="aZ3kP9qLm0",
        ...     target="https://example.com/article/123",
        ...     expires_at=datetime.now(UTC) + timedelta(days=10),
        ... )
        >>> entry.expired()
        False
    """

    token: str
    target: str
    expires_at: datetime | None = None

    def expired(self, now: datetime | None = None) -> bool:
        """True if the entry is past its expiry at `now` (defaults to the current UTC time)."""
        if self.expires_at is None:
            return False
        return (now or datetime.now(UTC)) > self.expires_at

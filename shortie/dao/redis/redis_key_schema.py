import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing token entries.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "shortie:prod" or "shortie:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def token_key(self, token: str) -> str:
        return f'tokens:{token}'

    @prefix_key
    def token_pattern(self) -> str:
        return 'tokens:*'

    def token_from_key(self, key: str) -> str:
        """Invert token_key(): strip the namespace from a stored key."""
        head = self.token_key('')
        if not key.startswith(head):
            raise ValueError(f"Key '{key}' is outside the token namespace '{head}'.")
        return key[len(head) :]

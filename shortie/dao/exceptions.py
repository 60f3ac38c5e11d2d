"""Exceptions related to token store (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    TokenNotFoundError:
        Raised when no live entry exists for a token.

    TokenAlreadyExistsError:
        Raised when a conditional insert finds a live entry holding the token.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

Example:
    >>> from shortie.dao.exceptions import TokenNotFoundError
    >>> raise TokenNotFoundError("Token 'abc123' not found.")
    Traceback (most recent call last):
        ...
    shortie.dao.exceptions.TokenNotFoundError: Token 'abc123' not found.
"""

from shortie.exceptions import ShortieError


class DAOError(ShortieError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class TokenNotFoundError(DAOError):
    """Exception raised when a token is absent or expired in the data store."""

    error_code = 'dao:token_not_found_error'


class TokenAlreadyExistsError(DAOError):
    """Exception raised when attempting to add a token which is already live in the data store."""

    error_code = 'dao:token_already_exists_error'


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    error_code = 'dao:data_store_error'

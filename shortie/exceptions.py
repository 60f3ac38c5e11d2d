class ShortieError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:shortie_error'


class InvalidURLError(ShortieError):
    """Raised when a submitted URL is not a well-formed absolute URL."""

    error_code = 'app:invalid_url_error'


class TokenSpaceExhaustedError(ShortieError):
    """Raised when no free token could be drawn within the retry budget."""

    error_code = 'app:token_space_exhausted_error'


class SnapshotError(ShortieError):
    """Raised when a snapshot cannot be read, written or decoded."""

    error_code = 'storage:snapshot_error'


class ConfigurationError(ShortieError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'

from shortie.utils.config import Settings, app_env, load_config
from shortie.utils.helpers import short_url, guarantee_500_response
from shortie.utils.tokens import generate_token
from shortie.utils.urls import is_url, normalize_url, with_default_scheme, extract_token
from shortie.utils.logging import initialize_logging


__all__ = [
    'Settings',
    'app_env',
    'load_config',
    'short_url',
    'guarantee_500_response',
    'generate_token',
    'is_url',
    'normalize_url',
    'with_default_scheme',
    'extract_token',
    'initialize_logging',
]

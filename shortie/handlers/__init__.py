from shortie.handlers.shorten import shorten_handler
from shortie.handlers.redirect import redirect_handler
from shortie.handlers.admin import (
    count_handler,
    dump_handler,
    dump_to_file_handler,
    load_from_file_handler,
    load_from_post_handler,
)
from shortie.handlers.health import health_handler


__all__ = [
    'shorten_handler',
    'redirect_handler',
    'count_handler',
    'dump_handler',
    'dump_to_file_handler',
    'load_from_file_handler',
    'load_from_post_handler',
    'health_handler',
]

"""Utility modules"""

from .logging import get_logger, setup_logging
from .time import get_now, format_datetime
from .text import slugify, strip_markers, truncate
from .http import create_http_client

__all__ = [
    "get_logger",
    "setup_logging",
    "get_now",
    "format_datetime",
    "slugify",
    "strip_markers",
    "truncate",
    "create_http_client",
]

"""Common utilities for URL shortener."""

from .clock import utc_now, isoformat_z
from .validators import is_valid_url, is_valid_short_code, is_well_formed
from .headers import extract_forwarded_headers, build_base_url, build_short_url, get_client_ip
from .logging_config import setup_logging, get_logger

__all__ = [
    "utc_now",
    "isoformat_z",
    "is_valid_url",
    "is_valid_short_code",
    "is_well_formed",
    "extract_forwarded_headers",
    "build_base_url",
    "build_short_url",
    "get_client_ip",
    "setup_logging",
    "get_logger",
]

"""Validation utilities for URL shortener."""

import re
from urllib.parse import urlparse
from typing import Iterable, Tuple

MAX_URL_LENGTH = 2048
SHORTCODE_MIN_LENGTH = 3
SHORTCODE_MAX_LENGTH = 10

_SHORTCODE_RE = re.compile(
    rf"^[A-Za-z0-9]{{{SHORTCODE_MIN_LENGTH},{SHORTCODE_MAX_LENGTH}}}$"
)


def is_well_formed(short_code) -> bool:
    """Check a shortcode against ^[A-Za-z0-9]{3,10}$.

    Args:
        short_code: Candidate shortcode (non-strings are never well formed)

    Returns:
        True if the code is 3-10 ASCII letters and digits
    """
    if not isinstance(short_code, str):
        return False
    return _SHORTCODE_RE.fullmatch(short_code) is not None


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if any(c.isspace() for c in url):
        return False, "URL must not contain whitespace"

    try:
        result = urlparse(url)

        # Check if scheme is http or https
        if result.scheme not in ("http", "https"):
            return False, "URL must use http or https protocol"

        # Check if netloc (domain) exists
        if not result.netloc or not result.hostname:
            return False, "URL must have a valid domain"

        # .port raises ValueError on out-of-range or non-numeric ports
        _ = result.port

        return True, ""

    except ValueError as e:
        return False, f"Invalid URL format: {str(e)}"


def is_valid_short_code(
    short_code: str,
    reserved_words: Iterable[str] = (),
) -> Tuple[bool, str]:
    """Validate a requested shortcode.

    Args:
        short_code: The short code to validate
        reserved_words: Codes that collide with service routes

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code or not isinstance(short_code, str):
        return False, "Shortcode is required"

    if not is_well_formed(short_code):
        return False, (
            f"Shortcode must be alphanumeric and "
            f"{SHORTCODE_MIN_LENGTH}-{SHORTCODE_MAX_LENGTH} characters long"
        )

    if short_code.lower() in {w.lower() for w in reserved_words}:
        return False, f"'{short_code}' is a reserved word and cannot be used"

    return True, ""

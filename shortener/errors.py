"""
Error classes for the URL shortener core.

Every failure the core reports is a ShortenerError subclass carrying the
HTTP status and machine-readable code the transport layer renders.
"""

from typing import Optional, Dict, Any


class ShortenerError(Exception):
    """
    Base error class.

    Attributes:
        status_code: HTTP status code (default: 500)
        code: Machine-readable error code
        message: Error message (default: "Internal server error")
        details: Optional additional error details
    """
    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """
        Initialize error.

        Args:
            message: Error message (overrides default)
            details: Optional additional error details
        """
        self.message = message or self.message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Render as a response body."""
        body: Dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class InvalidUrlError(ShortenerError, ValueError):
    """400 URL is not an absolute http/https URL."""
    status_code = 400
    code = "INVALID_URL"
    message = "Invalid URL format"


class MissingUrlError(InvalidUrlError):
    """400 URL was not supplied."""
    code = "MISSING_URL"
    message = "URL is required"


class InvalidValidityError(ShortenerError, ValueError):
    """400 Validity is not a positive integer number of minutes."""
    status_code = 400
    code = "INVALID_VALIDITY"
    message = "Validity must be a positive integer"


class InvalidShortcodeError(ShortenerError, ValueError):
    """400 Requested shortcode is malformed or not allowed."""
    status_code = 400
    code = "INVALID_SHORTCODE"
    message = "Shortcode must be alphanumeric and 3-10 characters long"


class ShortcodeExistsError(ShortenerError, ValueError):
    """409 Requested shortcode is already registered."""
    status_code = 409
    code = "SHORTCODE_EXISTS"
    message = "Shortcode already exists"


class NotFoundError(ShortenerError, KeyError):
    """404 Shortcode was never created or has been swept."""
    status_code = 404
    code = "SHORTCODE_NOT_FOUND"
    message = "Shortcode not found"

    def __str__(self) -> str:
        # KeyError would quote the message
        return self.message


class ExpiredError(ShortenerError):
    """410 Shortcode exists but its validity window has passed."""
    status_code = 410
    code = "URL_EXPIRED"
    message = "URL has expired"


class InternalError(ShortenerError):
    """500 Broken invariant inside the core."""

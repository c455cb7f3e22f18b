"""Core of the URL shortener: shortcode registry and click ledger."""

from .errors import (
    ShortenerError,
    InvalidUrlError,
    MissingUrlError,
    InvalidValidityError,
    InvalidShortcodeError,
    ShortcodeExistsError,
    NotFoundError,
    ExpiredError,
    InternalError,
)
from .models import UrlRecord, ClickEvent, UrlListing
from .shortcode import ShortCodeGenerator
from .ledger import ClickLedger
from .registry import Registry
from .sweeper import ExpirySweeper
from .service import URLShortenerService

__all__ = [
    "ShortenerError",
    "InvalidUrlError",
    "MissingUrlError",
    "InvalidValidityError",
    "InvalidShortcodeError",
    "ShortcodeExistsError",
    "NotFoundError",
    "ExpiredError",
    "InternalError",
    "UrlRecord",
    "ClickEvent",
    "UrlListing",
    "ShortCodeGenerator",
    "ClickLedger",
    "Registry",
    "ExpirySweeper",
    "URLShortenerService",
]

"""Data models for URL shortener."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .common.clock import isoformat_z

DIRECT_REFERRER = "Direct"


@dataclass(frozen=True)
class UrlRecord:
    """Represents a shortcode registration. Immutable once created."""

    shortcode: str
    target_url: str
    created_at: datetime
    expires_at: datetime
    validity_minutes: int

    def is_expired(self, now: datetime) -> bool:
        """Check expiry against a point in time.

        Args:
            now: Time to evaluate at

        Returns:
            True once now has reached expires_at
        """
        return now >= self.expires_at


@dataclass(frozen=True)
class ClickEvent:
    """One recorded visit to a shortcode."""

    timestamp: datetime
    source_ip: str
    location: str
    referrer: Optional[str] = None
    user_agent: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to the public click representation."""
        return {
            "timestamp": isoformat_z(self.timestamp),
            "referrer": self.referrer or DIRECT_REFERRER,
            "userAgent": self.user_agent,
            "location": self.location,
            "ip": self.source_ip,
        }


@dataclass(frozen=True)
class UrlListing:
    """A record annotated with its expiry state at listing time."""

    record: UrlRecord
    is_expired: bool

    @property
    def status(self) -> str:
        return "expired" if self.is_expired else "active"

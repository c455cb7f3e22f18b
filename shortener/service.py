"""Business logic service for URL shortener."""

import logging
from typing import Optional, Dict, Any, List

from .common.clock import isoformat_z
from .common.headers import build_short_url
from .errors import InvalidShortcodeError
from .geo import LocationResolver, SimulatedLocationResolver, UNKNOWN_LOCATION
from .ledger import ClickLedger
from .models import ClickEvent
from .registry import Registry
from .sweeper import ExpirySweeper


class URLShortenerService:
    """Service layer composing the registry, the click ledger and geolocation."""

    def __init__(
        self,
        registry: Registry,
        ledger: ClickLedger,
        location_resolver: Optional[LocationResolver] = None,
        sweeper: Optional[ExpirySweeper] = None,
        base_url: str = "http://localhost:5000",
        path_prefix: str = "",
        enable_custom_codes: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize URL shortener service.

        Args:
            registry: Shortcode registry
            ledger: Click ledger shared with the registry
            location_resolver: Callable mapping an IP to a location label
            sweeper: Optional background sweeper (reported by health_check)
            base_url: Fallback base URL for shortlinks
            path_prefix: Path prefix for shortlinks (e.g. /s)
            enable_custom_codes: Whether to allow requested shortcodes
            logger: Optional logger
        """
        if registry.ledger is not ledger:
            raise ValueError("registry and service must share one click ledger")
        self.registry = registry
        self.ledger = ledger
        self.location_resolver = location_resolver or SimulatedLocationResolver()
        self.sweeper = sweeper
        self.base_url = base_url
        self.path_prefix = path_prefix
        self.enable_custom_codes = enable_custom_codes
        self.logger = logger or logging.getLogger("url_shortener.service")

    def create_short_url(
        self,
        url: str,
        validity: Optional[int] = None,
        shortcode: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a new short URL.

        Args:
            url: The original long URL
            validity: Optional validity in minutes
            shortcode: Optional requested shortcode
            base_url: Base URL for the shortlink (service default if None)

        Returns:
            Dictionary with shortcode, shortlink, created_at and expiry

        Raises:
            ShortenerError: On validation failure or shortcode conflict
        """
        if shortcode is not None and not self.enable_custom_codes:
            raise InvalidShortcodeError("Custom short codes are not enabled")

        record = self.registry.create(url, validity_minutes=validity, shortcode=shortcode)

        return {
            "shortcode": record.shortcode,
            "shortlink": self.build_shortlink(record.shortcode, base_url),
            "created_at": isoformat_z(record.created_at),
            "expiry": isoformat_z(record.expires_at),
        }

    def get_statistics(self, shortcode: str, base_url: Optional[str] = None) -> Dict[str, Any]:
        """Get the record and click history of a live shortcode.

        Raises:
            NotFoundError: If the shortcode is unknown
            ExpiredError: If the shortcode has expired
        """
        record = self.registry.lookup(shortcode)
        clicks = self.ledger.list(shortcode)

        self.logger.info(f"Statistics retrieved for {shortcode}: {len(clicks)} clicks")

        return {
            "shortcode": shortcode,
            "originalUrl": record.target_url,
            "shortlink": self.build_shortlink(shortcode, base_url),
            "createdAt": isoformat_z(record.created_at),
            "expiry": isoformat_z(record.expires_at),
            "totalClicks": len(clicks),
            "clicks": [click.to_dict() for click in clicks],
        }

    def resolve_and_record_click(
        self,
        shortcode: str,
        referrer: Optional[str] = None,
        user_agent: Optional[str] = None,
        source_ip: Optional[str] = None,
    ) -> str:
        """Resolve a shortcode for redirect and record the visit.

        Args:
            shortcode: The visited shortcode
            referrer: Referer header, if any
            user_agent: User-Agent header, if any
            source_ip: Best-effort client IP

        Returns:
            The target URL

        Raises:
            NotFoundError: If the shortcode is unknown or was swept mid-visit
            ExpiredError: If the shortcode has expired
            InternalError: If the ledger lost a live shortcode's history
        """
        record = self.registry.lookup(shortcode)

        ip = source_ip or "unknown"
        event = ClickEvent(
            timestamp=self.registry.clock(),
            source_ip=ip,
            location=self._resolve_location(ip),
            referrer=referrer or None,
            user_agent=user_agent or None,
        )

        # Appends only if the looked-up record is still the registered one
        total = self.registry.record_click(record, event)

        self.logger.info(f"URL accessed: {shortcode} -> {record.target_url} (click #{total})")
        return record.target_url

    def list_all_urls(self, base_url: Optional[str] = None) -> List[Dict[str, Any]]:
        """List every registered URL, newest first, including expired unswept ones."""
        urls = []
        for listing in self.registry.list_all():
            record = listing.record
            urls.append({
                "shortcode": record.shortcode,
                "originalUrl": record.target_url,
                "shortlink": self.build_shortlink(record.shortcode, base_url),
                "createdAt": isoformat_z(record.created_at),
                "expiry": isoformat_z(record.expires_at),
                "totalClicks": self.ledger.count(record.shortcode),
                "isExpired": listing.is_expired,
                "status": listing.status,
            })

        self.logger.info(f"All URLs retrieved: {len(urls)}")
        return urls

    def sweep_expired(self, now=None) -> int:
        """Evict expired URLs now.

        Returns:
            Number of URLs removed
        """
        removed = self.registry.sweep(now)
        if removed:
            self.logger.info(f"Cleaned {removed} expired URLs")
        return removed

    def get_summary(self) -> Dict[str, Any]:
        """Get service-wide counters."""
        listings = self.registry.list_all()
        expired = sum(1 for listing in listings if listing.is_expired)

        return {
            "total_urls": len(listings),
            "active_urls": len(listings) - expired,
            "expired_urls": expired,
            "total_clicks": sum(self.ledger.count(listing.record.shortcode) for listing in listings),
            "custom_codes_enabled": self.enable_custom_codes,
        }

    def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        registry_healthy = self.registry.is_coherent()
        sweeper_healthy = self.sweeper is None or self.sweeper.running

        return {
            "registry": registry_healthy,
            "sweeper": sweeper_healthy,
            "overall": registry_healthy and sweeper_healthy,
        }

    def build_shortlink(self, shortcode: str, base_url: Optional[str] = None) -> str:
        """Build the public short URL for a shortcode."""
        return build_short_url(
            short_code=shortcode,
            base_url=base_url or self.base_url,
            path_prefix=self.path_prefix,
        )

    def _resolve_location(self, ip: str) -> str:
        try:
            return self.location_resolver(ip)
        except Exception as e:
            self.logger.warning(f"Location lookup failed for {ip}: {e}")
            return UNKNOWN_LOCATION

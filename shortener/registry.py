"""Shortcode registry: allocation, uniqueness and expiry of URL records."""

import logging
import threading
from datetime import datetime, timedelta
from typing import Dict, FrozenSet, Iterable, List, Optional

from .common.clock import Clock, utc_now
from .common.validators import is_valid_url, is_valid_short_code
from .errors import (
    ExpiredError,
    InternalError,
    InvalidShortcodeError,
    InvalidUrlError,
    InvalidValidityError,
    MissingUrlError,
    NotFoundError,
    ShortcodeExistsError,
)
from .ledger import ClickLedger
from .models import ClickEvent, UrlListing, UrlRecord
from .shortcode import ShortCodeGenerator

DEFAULT_VALIDITY_MINUTES = 30


class Registry:
    """Owns the shortcode -> UrlRecord map.

    Every read-check-write sequence (create, record_click, sweep) runs under
    a single registry lock for the whole logical operation. The ledger is
    only ever locked after the registry lock. Expiry is evaluated at
    read time with the same comparison the sweep uses, so a record reads as
    expired the instant now >= expires_at whether or not it was swept.
    """

    def __init__(
        self,
        ledger: ClickLedger,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        clock: Clock = utc_now,
        default_validity_minutes: int = DEFAULT_VALIDITY_MINUTES,
        max_collision_retries: int = 1000,
        reserved_shortcodes: Iterable[str] = (),
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize registry.

        Args:
            ledger: Click ledger kept coherent with this registry
            short_code_generator: Optional short code generator
            clock: Callable returning the current UTC datetime
            default_validity_minutes: Validity applied when none is requested
            max_collision_retries: Generation attempts before giving up
            reserved_shortcodes: Codes that may not be requested
            logger: Optional logger
        """
        if default_validity_minutes < 1:
            raise ValueError("default_validity_minutes must be positive")
        self.ledger = ledger
        self.generator = short_code_generator or ShortCodeGenerator()
        self.clock = clock
        self.default_validity_minutes = default_validity_minutes
        self.max_collision_retries = max_collision_retries
        self.reserved_shortcodes: FrozenSet[str] = frozenset(reserved_shortcodes)
        self.logger = logger or logging.getLogger("url_shortener.registry")
        self._lock = threading.Lock()
        self._records: Dict[str, UrlRecord] = {}

    def create(
        self,
        target_url: str,
        validity_minutes: Optional[int] = None,
        shortcode: Optional[str] = None,
    ) -> UrlRecord:
        """Register a new short URL.

        Args:
            target_url: Absolute http/https URL to redirect to
            validity_minutes: Minutes until expiry (default applies if None)
            shortcode: Optional requested shortcode

        Returns:
            The created record

        Raises:
            MissingUrlError: If no URL was given
            InvalidUrlError: If the URL is not a valid http/https URL
            InvalidValidityError: If validity is not a positive integer
            InvalidShortcodeError: If the requested code is malformed or reserved
            ShortcodeExistsError: If the requested code is already registered
            InternalError: If no free code was found within the retry budget
        """
        if not target_url:
            raise MissingUrlError()
        is_valid, error = is_valid_url(target_url)
        if not is_valid:
            raise InvalidUrlError(f"Invalid URL: {error}", details={"url": target_url})

        validity = self._validate_validity(validity_minutes)

        if shortcode is not None:
            is_valid, error = is_valid_short_code(shortcode, self.reserved_shortcodes)
            if not is_valid:
                raise InvalidShortcodeError(error, details={"shortcode": shortcode})

        with self._lock:
            if shortcode is not None:
                # Expired-but-unswept records still hold their code
                if shortcode in self._records:
                    raise ShortcodeExistsError(
                        f"Shortcode '{shortcode}' already exists",
                        details={"shortcode": shortcode},
                    )
                code = shortcode
            else:
                code = self._generate_unique_code()

            created_at = self.clock()
            try:
                expires_at = created_at + timedelta(minutes=validity)
            except OverflowError:
                # Expiry would fall past datetime.max
                raise InvalidValidityError(
                    "Validity is too large", details={"validity": validity}
                )
            record = UrlRecord(
                shortcode=code,
                target_url=target_url,
                created_at=created_at,
                expires_at=expires_at,
                validity_minutes=validity,
            )
            # Click storage exists before the record is visible to readers
            self.ledger.open(code)
            self._records[code] = record

        self.logger.info(
            f"Created short URL: {code} -> {target_url} (expires {record.expires_at.isoformat()})"
        )
        return record

    def resolve(self, shortcode: str) -> str:
        """Get the target URL of a live shortcode.

        Does not record a click.

        Raises:
            NotFoundError: If the code was never created or has been swept
            ExpiredError: If the code's validity window has passed
        """
        record = self.lookup(shortcode)
        self.logger.info(f"Resolved {shortcode} -> {record.target_url}")
        return record.target_url

    def lookup(self, shortcode: str) -> UrlRecord:
        """Get the full record of a live shortcode.

        Raises:
            NotFoundError: If the code was never created or has been swept
            ExpiredError: If the code's validity window has passed
        """
        with self._lock:
            record = self._records.get(shortcode)
        if record is None:
            self.logger.warning(f"Shortcode not found: {shortcode}")
            raise NotFoundError(f"Shortcode '{shortcode}' not found")
        if record.is_expired(self.clock()):
            self.logger.warning(f"Shortcode expired: {shortcode}")
            raise ExpiredError(f"Shortcode '{shortcode}' has expired")
        return record

    def record_click(self, record: UrlRecord, event: ClickEvent) -> int:
        """Append a click to the history of a previously looked-up record.

        The append happens only while that exact record is still registered,
        so a click can never land in the history of a later record that
        reuses the same shortcode.

        Args:
            record: Record returned by lookup for the visited shortcode
            event: The click to append

        Returns:
            Total number of clicks after the append

        Raises:
            NotFoundError: If the record has been swept (or swept and replaced)
            InternalError: If the record is live but has no click history
        """
        shortcode = record.shortcode
        with self._lock:
            if self._records.get(shortcode) is not record:
                self.logger.warning(f"Shortcode swept before click was recorded: {shortcode}")
                raise NotFoundError(f"Shortcode '{shortcode}' not found")
            try:
                return self.ledger.record(shortcode, event)
            except NotFoundError:
                self.logger.error(f"Click ledger missing history for live shortcode {shortcode}")
                raise InternalError(
                    "Click history unavailable", details={"shortcode": shortcode}
                )

    def list_all(self) -> List[UrlListing]:
        """List every registered record, newest first, with its expiry state."""
        with self._lock:
            records = list(self._records.values())
        now = self.clock()
        records.sort(key=lambda r: r.created_at, reverse=True)
        return [UrlListing(record=r, is_expired=r.is_expired(now)) for r in records]

    def sweep(self, now: Optional[datetime] = None) -> int:
        """Evict expired records and their click histories.

        Args:
            now: Evaluation time (defaults to the registry clock)

        Returns:
            Number of records removed
        """
        now = now or self.clock()
        with self._lock:
            expired = [code for code, r in self._records.items() if r.is_expired(now)]
            for code in expired:
                del self._records[code]
                # Purge under the registry lock so a re-create of the same
                # code cannot open a fresh history that this purge deletes
                self.ledger.purge(code)
        if expired:
            self.logger.debug(f"Swept {len(expired)} expired records")
        return len(expired)

    def is_coherent(self) -> bool:
        """Check that every registered shortcode has click storage."""
        with self._lock:
            return all(code in self.ledger for code in self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, shortcode: str) -> bool:
        with self._lock:
            return shortcode in self._records

    def _validate_validity(self, validity_minutes) -> int:
        if validity_minutes is None:
            return self.default_validity_minutes
        if isinstance(validity_minutes, bool) or not isinstance(validity_minutes, int):
            raise InvalidValidityError(details={"validity": validity_minutes})
        if validity_minutes <= 0:
            raise InvalidValidityError(details={"validity": validity_minutes})
        return validity_minutes

    def _generate_unique_code(self) -> str:
        """Generate a code not present in the registry. Caller holds the lock."""
        for attempt in range(self.max_collision_retries):
            code = self.generator.generate_random()
            if code not in self._records:
                if attempt:
                    self.logger.debug(f"Generated code after {attempt + 1} attempts: {code}")
                return code

        self.logger.error(
            f"Unable to generate unique short code after {self.max_collision_retries} attempts"
        )
        raise InternalError("Unable to generate unique short code")

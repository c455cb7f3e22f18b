"""Per-shortcode click history."""

import logging
import threading
from typing import Dict, List, Optional

from .errors import NotFoundError
from .models import ClickEvent


class _ClickLog:
    """Append-only event list guarded by its own lock."""

    __slots__ = ("lock", "events")

    def __init__(self):
        self.lock = threading.Lock()
        self.events: List[ClickEvent] = []


class ClickLedger:
    """Append-only click lists keyed by shortcode.

    The map lock only guards insertion and removal of per-shortcode logs;
    appends to one shortcode serialize on that shortcode's own lock, so a
    stats snapshot of one link never blocks clicks on another.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """Initialize an empty ledger.

        Args:
            logger: Optional logger
        """
        self.logger = logger or logging.getLogger("url_shortener.ledger")
        self._lock = threading.Lock()
        self._logs: Dict[str, _ClickLog] = {}

    def open(self, shortcode: str) -> None:
        """Create an empty click list for a newly registered shortcode.

        Only the registry calls this, inside its create critical section.
        """
        with self._lock:
            self._logs[shortcode] = _ClickLog()

    def record(self, shortcode: str, event: ClickEvent) -> int:
        """Append a click.

        Args:
            shortcode: Shortcode that was visited
            event: The click to append

        Returns:
            Total number of clicks after the append

        Raises:
            NotFoundError: If no click list exists for the shortcode
        """
        log = self._get_log(shortcode)
        with log.lock:
            log.events.append(event)
            return len(log.events)

    def list(self, shortcode: str) -> List[ClickEvent]:
        """Get clicks in arrival order, earliest first.

        Raises:
            NotFoundError: If no click list exists for the shortcode
        """
        log = self._get_log(shortcode)
        with log.lock:
            return list(log.events)

    def count(self, shortcode: str) -> int:
        """Number of clicks recorded for a shortcode (0 if unknown)."""
        with self._lock:
            log = self._logs.get(shortcode)
        if log is None:
            return 0
        with log.lock:
            return len(log.events)

    def purge(self, shortcode: str) -> bool:
        """Delete the click history of a shortcode.

        Only Registry.sweep calls this. Purging an absent shortcode is a no-op.

        Returns:
            True if a history was deleted
        """
        with self._lock:
            removed = self._logs.pop(shortcode, None)
        if removed is not None:
            self.logger.debug(f"Purged click history for {shortcode}")
        return removed is not None

    def __contains__(self, shortcode: str) -> bool:
        with self._lock:
            return shortcode in self._logs

    def __len__(self) -> int:
        with self._lock:
            return len(self._logs)

    def _get_log(self, shortcode: str) -> _ClickLog:
        with self._lock:
            log = self._logs.get(shortcode)
        if log is None:
            raise NotFoundError(f"No click history for shortcode '{shortcode}'")
        return log

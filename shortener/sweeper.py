"""Background task that evicts expired short URLs on a fixed cadence."""

import asyncio
import logging
from typing import Optional

from .registry import Registry


class ExpirySweeper:
    """Periodically call Registry.sweep for the lifetime of the event loop.

    Eviction only reclaims memory; reads check expiry themselves, so a
    lagging or failed sweep never changes what callers observe.
    """

    def __init__(
        self,
        registry: Registry,
        interval_seconds: float = 60.0,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize sweeper.

        Args:
            registry: Registry to sweep
            interval_seconds: Seconds between sweeps
            logger: Optional logger
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.registry = registry
        self.interval_seconds = interval_seconds
        self.logger = logger or logging.getLogger("url_shortener.sweeper")
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the sweep loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        self.logger.info(f"Expiry sweeper started (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self.logger.info("Expiry sweeper stopped")

    def run_once(self) -> int:
        """Run a single sweep now.

        Returns:
            Number of records removed
        """
        removed = self.registry.sweep()
        if removed > 0:
            self.logger.info(f"Cleaned {removed} expired URLs")
        return removed

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.run_once()
            except Exception:
                # Keep the schedule alive; the next tick retries
                self.logger.exception("Expiry sweep failed")

"""Geolocation resolvers for click events.

The service accepts any callable mapping an IP string to a location label.
"""

import random
import threading
from typing import Callable, Optional, Sequence

LocationResolver = Callable[[str], str]

UNKNOWN_LOCATION = "Unknown"

DEFAULT_LOCATIONS = (
    "New York, US",
    "London, UK",
    "Tokyo, JP",
    "Mumbai, IN",
    "Sydney, AU",
)


class SimulatedLocationResolver:
    """Pick a location at random, standing in for a real GeoIP lookup."""

    def __init__(self, locations: Sequence[str] = DEFAULT_LOCATIONS, seed: Optional[int] = None):
        if not locations:
            raise ValueError("locations must not be empty")
        self.locations = tuple(locations)
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    def __call__(self, ip: str) -> str:
        if not ip or ip == "unknown":
            return UNKNOWN_LOCATION
        with self._lock:
            return self._rng.choice(self.locations)

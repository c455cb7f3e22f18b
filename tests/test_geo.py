"""Tests for location resolvers."""

import pytest
from shortener.geo import DEFAULT_LOCATIONS, UNKNOWN_LOCATION, SimulatedLocationResolver


def test_picks_from_known_locations():
    resolver = SimulatedLocationResolver()
    assert all(resolver("203.0.113.1") in DEFAULT_LOCATIONS for _ in range(20))


def test_seeded_resolvers_agree():
    first = SimulatedLocationResolver(seed=42)
    second = SimulatedLocationResolver(seed=42)

    assert [first("1.2.3.4") for _ in range(10)] == [second("1.2.3.4") for _ in range(10)]


@pytest.mark.parametrize("ip", ["", "unknown"])
def test_unknown_ip(ip):
    assert SimulatedLocationResolver()(ip) == UNKNOWN_LOCATION


def test_rejects_empty_location_list():
    with pytest.raises(ValueError):
        SimulatedLocationResolver(locations=())

"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from shortener.common.logging_config import setup_logging
from shortener.ledger import ClickLedger
from shortener.registry import Registry
from shortener.service import URLShortenerService
from shortener.shortcode import ShortCodeGenerator
from web_app import create_app


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


def fixed_location(ip: str) -> str:
    """Deterministic location stub."""
    return f"Test City ({ip})"


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ledger(logger):
    return ClickLedger(logger=logger)


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
def registry(ledger, short_code_generator, clock, logger):
    return Registry(
        ledger=ledger,
        short_code_generator=short_code_generator,
        clock=clock,
        reserved_shortcodes={"health", "shorturls"},
        logger=logger,
    )


@pytest.fixture
def service(registry, ledger, logger) -> URLShortenerService:
    """Create service instance."""
    return URLShortenerService(
        registry=registry,
        ledger=ledger,
        location_resolver=fixed_location,
        base_url="http://testserver",
        logger=logger,
    )


@pytest.fixture
def config():
    return Config(base_url="http://testserver")


@pytest.fixture
def app(service, config, logger):
    """Create test FastAPI app."""
    return create_app(service_instance=service, config=config, logger=logger)


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]

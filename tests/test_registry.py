"""Tests for the shortcode registry."""

import re
from datetime import timedelta

import pytest
from shortener.errors import (
    ExpiredError,
    InternalError,
    InvalidShortcodeError,
    InvalidUrlError,
    InvalidValidityError,
    MissingUrlError,
    NotFoundError,
    ShortcodeExistsError,
)
from shortener.ledger import ClickLedger
from shortener.models import ClickEvent
from shortener.registry import Registry

SHORTCODE_RE = re.compile(r"^[A-Za-z0-9]{3,10}$")


class StubGenerator:
    """Hands out a fixed sequence of codes."""

    def __init__(self, *codes):
        self.codes = list(codes)
        self.calls = 0

    def generate_random(self, length=None):
        self.calls += 1
        return self.codes.pop(0)


def click(clock, ip="198.51.100.1"):
    return ClickEvent(timestamp=clock(), source_ip=ip, location="Test City")


class TestCreate:

    @pytest.mark.parametrize("validity", [1, 30, 61, 1440])
    def test_expiry_is_created_plus_validity(self, registry, validity):
        record = registry.create("https://example.com", validity)

        assert SHORTCODE_RE.match(record.shortcode)
        assert record.expires_at == record.created_at + timedelta(minutes=validity)
        assert record.expires_at > record.created_at
        assert record.validity_minutes == validity

    def test_default_validity_is_thirty_minutes(self, registry):
        record = registry.create("https://example.com")

        assert record.validity_minutes == 30
        assert record.expires_at - record.created_at == timedelta(minutes=30)

    def test_generated_code_is_six_characters(self, registry):
        record = registry.create("https://example.com")
        assert len(record.shortcode) == 6

    def test_created_at_comes_from_clock(self, registry, clock):
        record = registry.create("https://example.com")
        assert record.created_at == clock()

    def test_record_is_immutable(self, registry):
        record = registry.create("https://example.com")
        with pytest.raises(AttributeError):
            record.target_url = "https://evil.example"

    def test_requested_shortcode(self, registry):
        record = registry.create("https://example.com", 5, "mycode")
        assert record.shortcode == "mycode"

    def test_initializes_click_history(self, registry, ledger):
        record = registry.create("https://example.com")
        assert ledger.list(record.shortcode) == []

    @pytest.mark.parametrize("url", ["not-a-url", "ftp://example.com/file", "https://", "example.com"])
    def test_invalid_url(self, registry, url):
        with pytest.raises(InvalidUrlError):
            registry.create(url)

    @pytest.mark.parametrize("url", ["", None])
    def test_missing_url(self, registry, url):
        with pytest.raises(MissingUrlError) as exc_info:
            registry.create(url)
        assert exc_info.value.code == "MISSING_URL"
        assert isinstance(exc_info.value, InvalidUrlError)

    @pytest.mark.parametrize("validity", [0, -1, 1.5, "30", True])
    def test_invalid_validity(self, registry, validity):
        with pytest.raises(InvalidValidityError):
            registry.create("https://example.com", validity)

    @pytest.mark.parametrize("validity", [10**10, 10**15, 10**30])
    def test_validity_past_max_datetime(self, registry, validity):
        with pytest.raises(InvalidValidityError, match="too large"):
            registry.create("https://example.com", validity, "huge")

        assert "huge" not in registry
        assert len(registry.ledger) == 0

    @pytest.mark.parametrize("code", ["ab", "abcdefghijk", "bad-code", "with space", ""])
    def test_invalid_shortcode(self, registry, code):
        with pytest.raises(InvalidShortcodeError):
            registry.create("https://example.com", 30, code)

    def test_reserved_shortcode(self, registry):
        with pytest.raises(InvalidShortcodeError, match="reserved"):
            registry.create("https://example.com", 30, "health")

    def test_duplicate_shortcode(self, registry):
        registry.create("https://example.com", 30, "mycode")

        with pytest.raises(ShortcodeExistsError, match="already exists"):
            registry.create("https://other.example.com", 30, "mycode")

    def test_failed_create_leaves_no_trace(self, registry, ledger):
        with pytest.raises(InvalidUrlError):
            registry.create("nope", 30, "ghost")

        assert "ghost" not in registry
        assert "ghost" not in ledger

    def test_expired_unswept_code_is_still_taken(self, registry, clock):
        registry.create("https://example.com", 1, "mycode")
        clock.advance(minutes=2)

        with pytest.raises(ShortcodeExistsError):
            registry.create("https://other.example.com", 1, "mycode")

    def test_swept_code_is_reusable(self, registry, ledger, clock):
        registry.create("https://example.com", 1, "mycode")
        ledger.record("mycode", click(clock))
        clock.advance(minutes=2)
        registry.sweep()

        record = registry.create("https://other.example.com", 5, "mycode")

        assert record.target_url == "https://other.example.com"
        assert ledger.list("mycode") == []

    def test_retries_generation_on_collision(self, ledger, clock, logger):
        generator = StubGenerator("taken1", "taken1", "fresh1")
        registry = Registry(ledger=ledger, short_code_generator=generator, clock=clock, logger=logger)
        registry.create("https://example.com")

        record = registry.create("https://other.example.com")

        assert record.shortcode == "fresh1"
        assert generator.calls == 3

    def test_gives_up_after_retry_budget(self, ledger, clock, logger):
        generator = StubGenerator(*(["same01"] * 4))
        registry = Registry(
            ledger=ledger,
            short_code_generator=generator,
            clock=clock,
            max_collision_retries=3,
            logger=logger,
        )
        registry.create("https://example.com")

        with pytest.raises(InternalError):
            registry.create("https://other.example.com")

    def test_rejects_non_positive_default_validity(self, ledger):
        with pytest.raises(ValueError):
            Registry(ledger=ledger, default_validity_minutes=0)


class TestResolveAndLookup:

    def test_resolve_returns_target(self, registry):
        record = registry.create("https://example.com/page", 5)
        assert registry.resolve(record.shortcode) == "https://example.com/page"

    def test_lookup_returns_record(self, registry):
        record = registry.create("https://example.com/page", 5)
        assert registry.lookup(record.shortcode) == record

    def test_resolve_does_not_record_click(self, registry, ledger):
        record = registry.create("https://example.com")
        registry.resolve(record.shortcode)
        assert ledger.count(record.shortcode) == 0

    @pytest.mark.parametrize("op", ["resolve", "lookup"])
    def test_never_created(self, registry, op):
        with pytest.raises(NotFoundError):
            getattr(registry, op)("nothere")

    @pytest.mark.parametrize("op", ["resolve", "lookup"])
    def test_expired_without_sweep(self, registry, clock, op):
        record = registry.create("https://example.com", 1)
        clock.advance(seconds=61)

        with pytest.raises(ExpiredError):
            getattr(registry, op)(record.shortcode)
        assert record.shortcode in registry

    def test_expiry_boundary(self, registry, clock):
        record = registry.create("https://example.com", 1)

        clock.now = record.expires_at - timedelta(microseconds=1)
        assert registry.resolve(record.shortcode) == "https://example.com"

        clock.now = record.expires_at
        with pytest.raises(ExpiredError):
            registry.resolve(record.shortcode)

    def test_swept_code_is_not_found(self, registry, clock):
        record = registry.create("https://example.com", 1)
        clock.advance(minutes=1)
        registry.sweep()

        with pytest.raises(NotFoundError):
            registry.resolve(record.shortcode)


class TestRecordClick:

    def test_appends_to_live_record(self, registry, ledger, clock):
        record = registry.create("https://example.com", 5)

        assert registry.record_click(record, click(clock)) == 1
        assert registry.record_click(record, click(clock)) == 2
        assert ledger.count(record.shortcode) == 2

    def test_swept_record(self, registry, ledger, clock):
        record = registry.create("https://example.com", 1)
        clock.advance(minutes=1)
        registry.sweep()

        with pytest.raises(NotFoundError):
            registry.record_click(record, click(clock))

    def test_replaced_record_gets_no_click(self, registry, ledger, clock):
        old = registry.create("https://old.example.com", 1, "mycode")
        clock.advance(minutes=2)
        registry.sweep()
        registry.create("https://new.example.com", 10, "mycode")

        with pytest.raises(NotFoundError):
            registry.record_click(old, click(clock))
        assert ledger.count("mycode") == 0

    def test_live_record_without_history(self, registry, ledger, clock):
        record = registry.create("https://example.com", 5)
        ledger.purge(record.shortcode)

        with pytest.raises(InternalError):
            registry.record_click(record, click(clock))


class TestListAll:

    def test_newest_first_with_expiry_flag(self, registry, clock):
        old = registry.create("https://example.com/old", 1)
        clock.advance(seconds=30)
        new = registry.create("https://example.com/new", 10)
        clock.advance(seconds=31)

        listings = registry.list_all()

        assert [listing.record for listing in listings] == [new, old]
        assert [listing.is_expired for listing in listings] == [False, True]
        assert [listing.status for listing in listings] == ["active", "expired"]

    def test_empty(self, registry):
        assert registry.list_all() == []


class TestSweep:

    def test_removes_expired_records_and_clicks(self, registry, ledger, clock):
        expiring = registry.create("https://example.com/a", 1)
        lasting = registry.create("https://example.com/b", 10)
        ledger.record(expiring.shortcode, click(clock))
        clock.advance(minutes=2)

        assert registry.sweep() == 1

        assert expiring.shortcode not in registry
        assert expiring.shortcode not in ledger
        assert lasting.shortcode in registry
        assert lasting.shortcode in ledger
        assert registry.is_coherent()

    def test_idempotent(self, registry, clock):
        registry.create("https://example.com/a", 1)
        registry.create("https://example.com/b", 1)
        now = clock.advance(minutes=5)

        assert registry.sweep(now) == 2
        assert registry.sweep(now) == 0

    def test_uses_same_boundary_as_lookup(self, registry, clock):
        record = registry.create("https://example.com", 1)

        assert registry.sweep(record.expires_at - timedelta(microseconds=1)) == 0
        assert registry.sweep(record.expires_at) == 1

    def test_empty_registry(self, registry):
        assert registry.sweep() == 0

    def test_isolated_registries(self, clock):
        first = Registry(ledger=ClickLedger(), clock=clock)
        second = Registry(ledger=ClickLedger(), clock=clock)
        first.create("https://example.com", 5, "shared")

        second.create("https://example.com", 5, "shared")

        assert len(first) == 1
        assert len(second) == 1

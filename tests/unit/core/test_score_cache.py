"""Unit tests for the optimistic score cache."""

import pytest

from cloutscore.score_cache import ScoreCache

pytestmark = pytest.mark.unit


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ScoreCache(ttl_seconds=300, clock=clock)


class TestScoreCache:
    def test_get_missing(self, cache):
        assert cache.get("a") is None

    def test_get_within_ttl(self, cache, clock):
        cache.set("a", 1050)
        clock.now = 300

        assert cache.get("a") == 1050

    def test_expired_entry_removed_on_read(self, cache, clock):
        cache.set("a", 1050)
        clock.now = 301

        assert cache.get("a") is None
        assert len(cache) == 0

    def test_set_refreshes_entry(self, cache, clock):
        cache.set("a", 1050)
        clock.now = 200
        cache.set("a", 1086)
        clock.now = 450

        assert cache.get("a") == 1086

    def test_clear_expired(self, cache, clock):
        cache.set("a", 1)
        clock.now = 100
        cache.set("b", 2)
        clock.now = 350

        assert cache.clear_expired() == 1
        assert cache.get("b") == 2

    def test_clear(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)
        cache.clear()

        assert len(cache) == 0

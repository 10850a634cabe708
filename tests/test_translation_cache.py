"""Tests for the expiring in-memory translation cache."""
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from mealcoach.services.translation_cache import DEFAULT_EXPIRY_SECONDS, TranslationCache


class FakeClock:
    """Controllable replacement for time.time."""

    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return TranslationCache(clock=clock, cleanup_interval=None)


class TestGetAndSet:

    def test_missing_key_is_absent(self, cache):
        assert cache.get('りんご') is None

    def test_returns_stored_translation(self, cache):
        cache.set('りんご', 'apple')
        assert cache.get('りんご') == 'apple'

    def test_keys_are_exact_strings(self, cache):
        cache.set('Apple', 'りんご')
        assert cache.get('apple') is None
        assert cache.get('Apple ') is None

    def test_overwrite_replaces_value(self, cache):
        cache.set('さけ', 'sake')
        cache.set('さけ', 'salmon')
        assert cache.get('さけ') == 'salmon'
        assert len(cache) == 1

    def test_default_expiry_is_24_hours(self):
        assert TranslationCache().expiry_seconds == DEFAULT_EXPIRY_SECONDS == 86400


class TestExpiry:

    def test_entry_valid_just_before_expiry(self, cache, clock):
        cache.set('りんご', 'apple')
        clock.advance(DEFAULT_EXPIRY_SECONDS - 1)
        assert cache.get('りんご') == 'apple'

    def test_entry_absent_at_expiry(self, cache, clock):
        cache.set('りんご', 'apple')
        clock.advance(DEFAULT_EXPIRY_SECONDS)
        assert cache.get('りんご') is None
        assert 'りんご' not in cache

    def test_overwrite_refreshes_timestamp(self, cache, clock):
        cache.set('りんご', 'apple')
        clock.advance(DEFAULT_EXPIRY_SECONDS - 10)
        cache.set('りんご', 'apple')
        clock.advance(20)
        assert cache.get('りんご') == 'apple'

    def test_cleanup_removes_only_expired(self, cache, clock):
        cache.set('old', 'x')
        clock.advance(DEFAULT_EXPIRY_SECONDS)
        cache.set('new', 'y')

        removed = cache.cleanup_expired()

        assert removed == 1
        assert len(cache) == 1
        assert cache.get('new') == 'y'

    def test_set_sweeps_after_cleanup_interval(self, clock):
        cache = TranslationCache(expiry_seconds=100, cleanup_interval=3600, clock=clock)
        cache.set('old', 'x')
        clock.advance(200)
        cache.set('newer', 'y')
        # interval not reached yet: the expired entry is still stored
        assert len(cache) == 2

        clock.advance(3600)
        cache.set('newest', 'z')

        assert len(cache) == 1
        assert cache.get('newest') == 'z'


class TestIsolationAndConcurrency:

    def test_instances_do_not_share_entries(self, clock):
        ja_to_en = TranslationCache(clock=clock)
        en_to_ja = TranslationCache(clock=clock)

        ja_to_en.set('sake', 'sake')
        en_to_ja.set('sake', '鮭')

        assert ja_to_en.get('sake') == 'sake'
        assert en_to_ja.get('sake') == '鮭'

    def test_concurrent_writes_are_all_stored(self):
        cache = TranslationCache()

        def write(i):
            cache.set(f'food {i}', f'食品 {i}')
            return cache.get(f'food {i}')

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(write, range(200)))

        assert len(cache) == 200
        assert results == [f'食品 {i}' for i in range(200)]

    def test_concurrent_overwrites_keep_one_value(self):
        cache = TranslationCache()
        barrier = threading.Barrier(4)

        def write(value):
            barrier.wait()
            cache.set('race', value)

        threads = [threading.Thread(target=write, args=(f'v{i}',)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(cache) == 1
        assert cache.get('race') in {'v0', 'v1', 'v2', 'v3'}

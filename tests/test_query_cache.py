import threading

import pytest

from services.query_cache import QueryCache, make_key


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_make_key_normalizes_strings_and_params():
    assert make_key("blogs") == ("blogs",)
    assert make_key(["blogs", 3]) == ("blogs", 3)
    assert make_key(("comments",), {"blog": 2}) == ("comments", (("blog", 2),))
    assert make_key(("comments",), {"b": 1, "a": 2}) == make_key(("comments",), {"a": 2, "b": 1})


def test_fresh_until_stale_time_elapses():
    clock = FakeClock()
    cache = QueryCache(stale_time=300, clock=clock)
    key = make_key("blogs")

    assert cache.is_fresh(key) is False
    cache.set_data(key, [1])
    assert cache.is_fresh(key) is True


def test_fetch_started_before_invalidate_stays_stale():
    cache = QueryCache()
    key = make_key(("blogs", 1))
    started_at = cache.generation(key)

    cache.invalidate(("blogs",))
    cache.set_data(key, {"title": "old"}, started_at)

    assert cache.is_fresh(key) is False
    assert cache.get(key).data == {"title": "old"}

    cache.set_data(key, {"title": "new"}, cache.generation(key))
    assert cache.is_fresh(key) is True

    clock.now += 299
    assert cache.is_fresh(key) is True
    clock.now += 1
    assert cache.is_fresh(key) is False
    assert cache.get(key).data == [1]


def test_per_call_stale_time_override():
    clock = FakeClock()
    cache = QueryCache(stale_time=300, clock=clock)
    key = make_key("blogs")
    cache.set_data(key, [])
    clock.now += 10
    assert cache.is_fresh(key, stale_time=5) is False
    assert cache.is_fresh(key, stale_time=60) is True


def test_error_entry_is_never_fresh_but_keeps_data():
    cache = QueryCache()
    key = make_key("blogs")
    cache.set_data(key, ["old"])
    cache.set_error(key, RuntimeError("down"))

    assert cache.is_fresh(key) is False
    assert cache.get(key).data == ["old"]


def test_invalidate_by_prefix():
    cache = QueryCache()
    cache.set_data(make_key("blogs"), [])
    cache.set_data(make_key(("blogs", 1)), {})
    cache.set_data(make_key("comments"), [])

    assert cache.invalidate(("blogs",)) == 2

    assert cache.is_fresh(make_key("blogs")) is False
    assert cache.is_fresh(make_key(("blogs", 1))) is False
    assert cache.is_fresh(make_key("comments")) is True


def test_set_data_after_invalidate_is_fresh_again():
    cache = QueryCache()
    key = make_key("stories")
    cache.set_data(key, [])
    cache.invalidate("stories")
    cache.set_data(key, [1])
    assert cache.is_fresh(key) is True


def test_dedupe_joins_in_flight_fetch():
    cache = QueryCache()
    key = make_key("blogs")
    started = threading.Event()
    release = threading.Event()
    calls = []

    def slow_fetch():
        calls.append(1)
        started.set()
        release.wait(timeout=5)
        return ["shared"]

    def unexpected_fetch():
        raise AssertionError("joined request must not fetch again")

    results = []
    owner = threading.Thread(target=lambda: results.append(cache.dedupe(key, slow_fetch)))
    owner.start()
    assert started.wait(timeout=5)
    assert key in cache._in_flight

    timer = threading.Timer(0.2, release.set)
    timer.start()
    joined = cache.dedupe(key, unexpected_fetch)
    owner.join(timeout=5)

    assert joined == ["shared"]
    assert results == [["shared"]]
    assert len(calls) == 1
    assert key not in cache._in_flight


def test_dedupe_propagates_errors_and_releases_key():
    cache = QueryCache()
    key = make_key("blogs")

    def failing():
        raise ValueError("boom")

    with pytest.raises(ValueError):
        cache.dedupe(key, failing)
    assert key not in cache._in_flight
    assert cache.dedupe(key, lambda: "ok") == "ok"


def test_clear_drops_entries():
    cache = QueryCache()
    cache.set_data(make_key("blogs"), [])
    cache.clear()
    assert cache.get(make_key("blogs")) is None


def test_clear_outdates_running_fetches():
    cache = QueryCache()
    key = make_key("blogs")
    started_at = cache.generation(key)

    cache.clear()
    cache.set_data(key, ["previous user"], started_at)

    assert cache.is_fresh(key) is False

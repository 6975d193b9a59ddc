"""
Unit tests for the fixed window rate limiter
"""
import threading

from app.core.rate_limiter import FixedWindowRateLimiter


def test_allows_up_to_limit_then_refuses(clock):
    limiter = FixedWindowRateLimiter(max_requests=60, window_seconds=60, clock=clock)

    results = [limiter.allow("1.2.3.4") for _ in range(61)]

    assert all(results[:60])
    assert results[60] is False


def test_window_reset_after_elapsed(clock):
    limiter = FixedWindowRateLimiter(max_requests=2, window_seconds=60, clock=clock)
    assert limiter.allow("client")
    assert limiter.allow("client")
    assert not limiter.allow("client")

    clock.advance(30)
    assert not limiter.allow("client")

    clock.advance(31)
    assert limiter.allow("client")
    assert limiter.remaining("client") == 1


def test_clients_are_independent(clock):
    limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60, clock=clock)
    assert limiter.allow("a")
    assert not limiter.allow("a")
    assert limiter.allow("b")


def test_retry_after_counts_down(clock):
    limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60, clock=clock)
    assert limiter.retry_after("unknown") == 0

    limiter.allow("a")
    clock.advance(20)
    assert limiter.retry_after("a") == 41


def test_cleanup_expired(clock):
    limiter = FixedWindowRateLimiter(max_requests=5, window_seconds=60, clock=clock)
    limiter.allow("old")
    clock.advance(45)
    limiter.allow("new")
    clock.advance(20)

    assert limiter.cleanup_expired() == 1
    assert limiter.remaining("new") == 4


def test_concurrent_allow_does_not_lose_updates():
    limiter = FixedWindowRateLimiter(max_requests=1000, window_seconds=60)
    allowed = []

    def worker():
        for _ in range(100):
            allowed.append(limiter.allow("shared"))

    threads = [threading.Thread(target=worker) for _ in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert allowed.count(True) == 1000
    assert allowed.count(False) == 1000

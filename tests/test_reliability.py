"""
Tests for reliability — the fixed-window rate limiter.
"""

import threading

from paygen.core.reliability.rate_limiter import RateLimiter


class _FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


# ── Rate limiter ─────────────────────────────────────────────────────


class TestRateLimiter:
    def test_allows_up_to_limit(self):
        limiter = RateLimiter(max_requests=3, window_seconds=60, clock=_FakeClock())
        decisions = [limiter.check("a") for _ in range(3)]
        assert all(d.allowed for d in decisions)
        assert [d.remaining for d in decisions] == [2, 1, 0]

    def test_rejects_over_limit(self):
        clock = _FakeClock()
        limiter = RateLimiter(max_requests=2, window_seconds=60, clock=clock)
        limiter.check("a")
        limiter.check("a")
        clock.now = 15.0
        decision = limiter.check("a")
        assert not decision.allowed
        assert decision.retry_after == 45
        assert limiter.total_rejections == 1

    def test_window_resets(self):
        clock = _FakeClock()
        limiter = RateLimiter(max_requests=1, window_seconds=10, clock=clock)
        assert limiter.check("a").allowed
        assert not limiter.check("a").allowed
        clock.now = 10.0
        assert limiter.check("a").allowed

    def test_keys_independent(self):
        limiter = RateLimiter(max_requests=1, window_seconds=60, clock=_FakeClock())
        assert limiter.check("a").allowed
        assert limiter.check("b").allowed
        assert not limiter.check("a").allowed

    def test_reset(self):
        limiter = RateLimiter(max_requests=1, window_seconds=60, clock=_FakeClock())
        limiter.check("a")
        limiter.reset("a")
        assert limiter.check("a").allowed
        limiter.reset()
        assert limiter.to_dict()["clients"] == 0

    def test_thread_safety(self):
        limiter = RateLimiter(max_requests=50, window_seconds=60)
        allowed = []

        def worker():
            for _ in range(20):
                allowed.append(limiter.check("shared").allowed)

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert allowed.count(True) == 50
        assert allowed.count(False) == 50

    def test_to_dict(self):
        limiter = RateLimiter(max_requests=5, window_seconds=30)
        data = limiter.to_dict()
        assert data["max_requests"] == 5
        assert data["window_seconds"] == 30

    def test_expired_clients_evicted(self):
        clock = _FakeClock()
        limiter = RateLimiter(max_requests=5, window_seconds=60, clock=clock)
        for i in range(1000):
            limiter.check(f"10.0.{i // 256}.{i % 256}")
        assert limiter.to_dict()["clients"] == 1000

        clock.now = 10_000.0
        limiter.check("10.9.9.9")
        assert limiter.to_dict()["clients"] == 1

    def test_live_windows_survive_sweep(self):
        clock = _FakeClock()
        limiter = RateLimiter(max_requests=1, window_seconds=60, clock=clock)
        limiter.check("old")
        clock.now = 50.0
        limiter.check("recent")
        clock.now = 70.0
        limiter.check("new")
        assert limiter.to_dict()["clients"] == 2
        assert not limiter.check("recent").allowed

"""
Tests for the sliding window rate limiter and its router dependency.

Run from the project root:
    pytest tests/test_rate_limit.py -v
"""

import pytest

from event_management_api.app.core.rate_limit import RateLimiter, rate_limiter

from .helpers import MEETUP


class TestRateLimiter:

    def test_allows_up_to_limit(self):
        limiter = RateLimiter(limit=3, window=60)
        results = [limiter.hit("k", now=100.0 + i) for i in range(3)]
        assert [allowed for allowed, _, _ in results] == [True, True, True]
        assert [remaining for _, remaining, _ in results] == [2, 1, 0]

    def test_rejects_over_limit_with_retry_after(self):
        limiter = RateLimiter(limit=2, window=60)
        limiter.hit("k", now=100.0)
        limiter.hit("k", now=110.0)
        allowed, remaining, retry_after = limiter.hit("k", now=130.0)
        assert (allowed, remaining) == (False, 0)
        assert retry_after == 30

    def test_window_slides(self):
        limiter = RateLimiter(limit=1, window=60)
        assert limiter.hit("k", now=0.0)[0]
        assert not limiter.hit("k", now=59.0)[0]
        assert limiter.hit("k", now=60.0)[0]

    def test_keys_are_independent(self):
        limiter = RateLimiter(limit=1, window=60)
        assert limiter.hit("a", now=0.0)[0]
        assert limiter.hit("b", now=0.0)[0]
        assert not limiter.hit("a", now=1.0)[0]

    def test_idle_keys_are_evicted(self):
        limiter = RateLimiter(limit=5, window=60)
        limiter.hit("a", now=0.0)
        limiter.hit("b", now=30.0)
        assert len(limiter) == 2
        limiter.hit("c", now=61.0)
        # "a" left the window, "b" is still in it.
        assert len(limiter) == 2
        limiter.hit("d", now=200.0)
        assert len(limiter) == 1

    def test_eviction_keeps_limit_for_active_key(self):
        limiter = RateLimiter(limit=1, window=60)
        assert limiter.hit("other", now=0.0)[0]
        assert limiter.hit("k", now=30.0)[0]
        assert limiter.hit("x", now=61.0)[0]
        assert not limiter.hit("k", now=62.0)[0]

    def test_reset(self):
        limiter = RateLimiter(limit=1, window=60)
        limiter.hit("k", now=0.0)
        limiter.reset()
        assert limiter.hit("k", now=1.0)[0]


@pytest.fixture()
def low_limit(monkeypatch):
    monkeypatch.setattr(rate_limiter, "limit", 3)


class TestRateLimitedApi:

    def test_anonymous_requests_limited(self, client, low_limit):
        statuses = [client.get("/api/events").status_code for _ in range(4)]
        assert statuses == [200, 200, 200, 429]

    def test_429_body_and_headers(self, client, low_limit):
        for _ in range(3):
            ok = client.get("/api/events")
        assert ok.headers["X-RateLimit-Limit"] == "3"
        assert ok.headers["X-RateLimit-Remaining"] == "0"
        resp = client.get("/api/events")
        assert resp.json() == {"message": "Too Many Attempts."}
        assert int(resp.headers["Retry-After"]) >= 1

    def test_limit_applies_before_authentication(self, client, low_limit):
        for _ in range(3):
            client.get("/api/events")
        assert client.post("/api/events", json=MEETUP).status_code == 429

    def test_authenticated_user_has_own_bucket(self, client, low_limit, alice_headers):
        # alice_headers used one anonymous request (login).
        client.get("/api/events")
        client.get("/api/events")
        assert client.get("/api/events").status_code == 429
        assert client.get("/api/events", headers=alice_headers).status_code == 200

    def test_health_is_not_limited(self, client, low_limit):
        assert all(client.get("/health").status_code == 200 for _ in range(5))

    def test_disabled_with_zero(self, client, monkeypatch):
        monkeypatch.setattr(rate_limiter, "limit", 0)
        assert all(client.get("/api/events").status_code == 200 for _ in range(5))

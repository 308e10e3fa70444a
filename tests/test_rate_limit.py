from dataclasses import replace

from fastapi.testclient import TestClient

from api.middleware import TokenBucketLimiter
from main import create_app


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_bucket_allows_burst_then_refills():
    clock = FakeClock()
    limiter = TokenBucketLimiter(rps=2, burst=4, clock=clock)

    assert [limiter.allow("1.2.3.4") for _ in range(5)] == [True, True, True, True, False]

    clock.now += 0.5
    assert limiter.allow("1.2.3.4") is True
    assert limiter.allow("1.2.3.4") is False


def test_clients_have_separate_buckets():
    limiter = TokenBucketLimiter(rps=1, burst=1, clock=FakeClock())

    assert limiter.allow("10.0.0.1") is True
    assert limiter.allow("10.0.0.1") is False
    assert limiter.allow("10.0.0.2") is True


def test_idle_clients_are_swept():
    clock = FakeClock()
    limiter = TokenBucketLimiter(rps=1, burst=1, clock=clock)
    limiter.allow("10.0.0.1")

    clock.now += 600
    limiter.allow("10.0.0.2")

    assert set(limiter.buckets) == {"10.0.0.2"}


def test_middleware_returns_429(settings, mailer):
    app = create_app(settings=replace(settings, limiter_enabled=True, limiter_rps=0.001, limiter_burst=2), mailer=mailer)

    with TestClient(app) as client:
        statuses = [client.get("/v1/healthcheck").status_code for _ in range(3)]
        res = client.get("/v1/healthcheck")

    assert statuses == [200, 200, 429]
    assert res.status_code == 429
    assert res.json() == {"error": "rate limit exceeded"}

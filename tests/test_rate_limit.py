"""Лимит заказов в фиксированном окне."""

import asyncio

import pytest
from fastapi import Request

from storefront.exceptions import RateLimited
from storefront.utils.rate_limit import FixedWindowRateLimiter, client_address


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock) -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(max_requests=10, window_seconds=60, clock=clock)


class TestFixedWindow:
    """Десять запросов в окне проходят, одиннадцатый: нет."""

    async def test_eleventh_request_rejected(self, limiter, clock) -> None:
        for _ in range(10):
            assert await limiter.hit("1.2.3.4")
            clock.now += 1
        assert not await limiter.hit("1.2.3.4")

    async def test_check_raises(self, limiter) -> None:
        for _ in range(10):
            await limiter.check("1.2.3.4")
        with pytest.raises(RateLimited) as exc:
            await limiter.check("1.2.3.4")
        assert exc.value.status_code == 429

    async def test_new_window_after_expiry(self, limiter, clock) -> None:
        for _ in range(11):
            await limiter.hit("1.2.3.4")
        clock.now += 61
        assert await limiter.hit("1.2.3.4")

    async def test_window_does_not_slide(self, limiter, clock) -> None:
        for _ in range(10):
            await limiter.hit("1.2.3.4")
        # запросы сверх лимита в конце окна не продлевают его
        clock.now += 59
        assert not await limiter.hit("1.2.3.4")
        clock.now += 2
        assert await limiter.hit("1.2.3.4")

    async def test_boundary_is_inclusive(self, limiter, clock) -> None:
        for _ in range(10):
            await limiter.hit("1.2.3.4")
        clock.now += 60
        assert not await limiter.hit("1.2.3.4")

    async def test_keys_are_independent(self, limiter) -> None:
        for _ in range(10):
            await limiter.hit("1.2.3.4")
        assert not await limiter.hit("1.2.3.4")
        assert await limiter.hit("5.6.7.8")

    async def test_concurrent_hits_counted_once_each(self, limiter) -> None:
        results = await asyncio.gather(*[limiter.hit("1.2.3.4") for _ in range(25)])
        assert results.count(True) == 10

    async def test_reset(self, limiter) -> None:
        for _ in range(11):
            await limiter.hit("1.2.3.4")
        await limiter.reset()
        assert await limiter.hit("1.2.3.4")

    async def test_expired_keys_pruned(self, limiter, clock) -> None:
        for n in range(50):
            await limiter.hit(f"10.0.0.{n}")
        assert len(limiter.hits) == 50

        clock.now += 61
        await limiter.hit("1.2.3.4")
        assert list(limiter.hits) == ["1.2.3.4"]

    async def test_prune_keeps_live_windows(self, limiter, clock) -> None:
        for _ in range(10):
            await limiter.hit("1.2.3.4")
        clock.now += 30
        await limiter.hit("5.6.7.8")
        clock.now += 31
        # окно 1.2.3.4 истекло и вычищено, окно 5.6.7.8 живо и заполнено дальше
        for _ in range(9):
            await limiter.hit("5.6.7.8")
        assert "1.2.3.4" not in limiter.hits
        assert not await limiter.hit("5.6.7.8")


def make_request(forwarded: str | None = None, host: str | None = "10.0.0.9") -> Request:
    headers = [(b"x-forwarded-for", forwarded.encode())] if forwarded is not None else []
    scope = {"type": "http", "method": "POST", "path": "/order", "headers": headers}
    if host is not None:
        scope["client"] = (host, 5000)
    return Request(scope)


class TestClientAddress:
    """Ключ лимита: адрес клиента."""

    def test_first_forwarded_entry(self) -> None:
        assert client_address(make_request("203.0.113.7, 10.0.0.1")) == "203.0.113.7"

    def test_socket_address_without_header(self) -> None:
        assert client_address(make_request()) == "10.0.0.9"

    def test_forwarded_ignored_when_untrusted(self) -> None:
        request = make_request("203.0.113.7")
        assert client_address(request, trust_forwarded=False) == "10.0.0.9"

    def test_unknown(self) -> None:
        assert client_address(make_request(host=None)) == "unknown"

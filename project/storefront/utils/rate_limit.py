# storefront/utils/rate_limit.py

import asyncio
import time
from typing import Callable, Dict

from fastapi import Request

from storefront.exceptions import RateLimited


class FixedWindowRateLimiter:
    """
    Счётчик запросов в фиксированном окне на ключ (адрес клиента).

    Окно открывается первым запросом и сбрасывается лениво: первым запросом
    после истечения, без таймеров. Запросы сверх лимита тоже считаются,
    начало окна при этом не сдвигается. Истёкшие окна других ключей
    вычищаются не чаще раза за окно.
    """

    def __init__(self, max_requests: int = 10, window_seconds: float = 60,
                 clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self.hits: Dict[str, dict] = {}
        self.last_prune = clock()
        self.lock = asyncio.Lock()

    def prune(self, now: float):
        expired = [key for key, entry in self.hits.items() if now - entry["start"] > self.window_seconds]
        for key in expired:
            del self.hits[key]
        self.last_prune = now

    async def hit(self, key: str) -> bool:
        async with self.lock:
            now = self.clock()
            if now - self.last_prune > self.window_seconds:
                self.prune(now)

            entry = self.hits.get(key)
            if entry is None or now - entry["start"] > self.window_seconds:
                self.hits[key] = {"count": 1, "start": now}
                return True

            entry["count"] += 1
            return entry["count"] <= self.max_requests

    async def check(self, key: str):
        if not await self.hit(key):
            raise RateLimited()

    async def reset(self):
        async with self.lock:
            self.hits.clear()


def client_address(request: Request, trust_forwarded: bool = True) -> str:
    """
    Адрес клиента для лимита. x-forwarded-for пишет прокси перед
    приложением; без прокси заголовок задаёт сам клиент, тогда
    trust_forwarded=False (TRUST_FORWARDED_FOR=0) и берётся адрес сокета.
    """
    if trust_forwarded:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            first = forwarded.split(",")[0].strip()
            if first:
                return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"

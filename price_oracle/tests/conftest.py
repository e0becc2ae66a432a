"""Shared fixtures: a scripted HTTP feed server, test feeds and a manual clock."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

import httpx
import pytest

from price_oracle.src.Clock import ManualClock
from price_oracle.src.feeds import FeedDescriptor

Route = Callable[[httpx.Request], Awaitable[httpx.Response]]


class FakeFeedServer:
    """Answers feed requests by host and records every host contacted."""

    def __init__(self) -> None:
        self.routes: dict[str, Route] = {}
        self.calls: list[str] = []

    def price(self, host: str, value: object) -> None:
        """Serve {"price": value} for host."""

        async def route(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"price": value})

        self.routes[host] = route

    def json(self, host: str, body: object, status: int = 200) -> None:
        """Serve an arbitrary JSON body for host."""

        async def route(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, json=body)

        self.routes[host] = route

    def text(self, host: str, body: str, status: int = 200) -> None:
        """Serve a raw text body for host."""

        async def route(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, text=body)

        self.routes[host] = route

    def down(self, host: str) -> None:
        """Refuse connections to host."""

        async def route(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        self.routes[host] = route

    def hang(self, host: str, seconds: float, value: object = 1.0) -> None:
        """Answer host only after a delay."""

        async def route(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(seconds)
            return httpx.Response(200, json={"price": value})

        self.routes[host] = route

    async def handler(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        self.calls.append(host)
        route = self.routes.get(host)
        if route is None:
            return httpx.Response(404, text=f"no route for {host}")
        return await route(request)

    def client(self) -> httpx.AsyncClient:
        """Create an AsyncClient backed by this server."""
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


def make_feed(name: str, priority: int) -> FeedDescriptor:
    """Feed served by FakeFeedServer at https://<name>/price."""
    return FeedDescriptor(
        name=name,
        endpoint=f"https://{name}/price",
        parse=lambda data: float(data["price"]),
        priority=priority,
    )


@pytest.fixture
def feed_server() -> FakeFeedServer:
    return FakeFeedServer()


@pytest.fixture
def feeds() -> list[FeedDescriptor]:
    """Three test feeds with priorities 1, 2 and 3."""
    return [make_feed("feed-1", 1), make_feed("feed-2", 2), make_feed("feed-3", 3)]


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(1000.0)

# File: tests/test_fetcher.py
from __future__ import annotations

import asyncio

import pytest
from aiohttp import ClientSession, web
from course_digest.config import ScraperConfig
from course_digest.crawler.fetcher import FetchError, Fetcher

from tests.conftest import serve_app


def make_config(**overrides) -> ScraperConfig:
    values = dict(timeout=2.0, user_agent="TestAgent/1.0", rate_limit=100.0, retry_times=0, backoff=0.0)
    values.update(overrides)
    return ScraperConfig(**values)


@pytest.mark.asyncio()
async def test_fetch_sends_user_agent(unused_tcp_port: int):
    app = web.Application()

    async def echo(request):
        return web.Response(text=request.headers["User-Agent"], content_type="text/html")

    app.router.add_get("/", echo)
    async for base in serve_app(app, unused_tcp_port):
        async with Fetcher(make_config()) as fetcher:
            page = await fetcher.fetch(f"{base}/")
    assert page.content == "TestAgent/1.0"
    assert page.url == f"{base}/"


@pytest.mark.asyncio()
async def test_retry_on_server_error(unused_tcp_port: int):
    app = web.Application()
    call_count = {"n": 0}

    async def flaky(_):
        call_count["n"] += 1
        if call_count["n"] <= 2:
            return web.Response(status=500)
        return web.Response(text="<h1>Recover</h1>", content_type="text/html")

    app.router.add_get("/flaky", flaky)
    async for base in serve_app(app, unused_tcp_port):
        async with Fetcher(make_config(retry_times=3)) as fetcher:
            text = await fetcher.get_text(f"{base}/flaky")
    assert text == "<h1>Recover</h1>"
    assert call_count["n"] == 3


@pytest.mark.asyncio()
async def test_server_error_after_retries(unused_tcp_port: int):
    app = web.Application()
    call_count = {"n": 0}

    async def broken(_):
        call_count["n"] += 1
        return web.Response(status=503)

    app.router.add_get("/broken", broken)
    async for base in serve_app(app, unused_tcp_port):
        async with Fetcher(make_config(retry_times=1)) as fetcher:
            with pytest.raises(FetchError) as info:
                await fetcher.fetch(f"{base}/broken")
    assert info.value.kind == "server"
    assert call_count["n"] == 2


@pytest.mark.asyncio()
async def test_not_found_is_not_retried(unused_tcp_port: int):
    app = web.Application()
    call_count = {"n": 0}

    async def missing(_):
        call_count["n"] += 1
        raise web.HTTPNotFound()

    app.router.add_get("/missing", missing)
    async for base in serve_app(app, unused_tcp_port):
        async with Fetcher(make_config(retry_times=3)) as fetcher:
            with pytest.raises(FetchError, match="HTTP 404"):
                await fetcher.fetch(f"{base}/missing")
    assert call_count["n"] == 1


@pytest.mark.asyncio()
async def test_network_error(unused_tcp_port: int):
    async with Fetcher(make_config()) as fetcher:
        with pytest.raises(FetchError) as info:
            await fetcher.fetch(f"http://localhost:{unused_tcp_port}/")
    assert info.value.kind == "network"


@pytest.mark.asyncio()
async def test_timeout_reason_names_exception(monkeypatch):
    def timed_out(self, url, **kwargs):
        raise asyncio.TimeoutError()

    monkeypatch.setattr(ClientSession, "get", timed_out)
    async with Fetcher(make_config()) as fetcher:
        with pytest.raises(FetchError) as info:
            await fetcher.fetch("http://localhost/slow")
    assert info.value.kind == "network"
    assert str(info.value) == "Network error on http://localhost/slow: TimeoutError"


@pytest.mark.asyncio()
async def test_slow_server_times_out(unused_tcp_port: int):
    app = web.Application()

    async def slow(_):
        await asyncio.sleep(0.5)
        return web.Response(text="late", content_type="text/html")

    app.router.add_get("/slow", slow)
    async for base in serve_app(app, unused_tcp_port):
        async with Fetcher(make_config(timeout=0.1)) as fetcher:
            with pytest.raises(FetchError) as info:
                await fetcher.fetch(f"{base}/slow")
    assert info.value.kind == "network"
    assert "timeout" in str(info.value).lower()


@pytest.mark.asyncio()
async def test_fetch_requires_session():
    with pytest.raises(RuntimeError):
        await Fetcher(make_config()).fetch("http://localhost/")

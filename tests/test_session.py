# File: tests/test_session.py
from __future__ import annotations

import asyncio

import pytest
from aiohttp import web

from conftest import make_config, serve_app
from note_scout.client.session import HTTPResult, SessionClient
from note_scout.errors import TransientHTTPError


def _flaky_app(failures: int, status: int = 500):
    calls = {"n": 0}
    app = web.Application()

    async def flaky(_):
        calls["n"] += 1
        if calls["n"] <= failures:
            return web.Response(status=status)
        return web.Response(text="recovered")

    async def missing(_):
        calls["n"] += 1
        return web.Response(status=404, text="nope")

    app.router.add_get("/flaky", flaky)
    app.router.add_get("/missing", missing)
    return app, calls


@pytest.mark.asyncio()
async def test_two_transient_failures_then_success(unused_tcp_port: int):
    app, calls = _flaky_app(failures=2)
    async for base in serve_app(app, unused_tcp_port):
        async with SessionClient(make_config(base)) as client:
            resp = await client.get(f"{base}/flaky")

    assert resp.ok
    assert resp.text == "recovered"
    assert calls["n"] == 3


@pytest.mark.asyncio()
async def test_retries_exhausted_after_four_attempts(unused_tcp_port: int):
    app, calls = _flaky_app(failures=100, status=502)
    async for base in serve_app(app, unused_tcp_port):
        async with SessionClient(make_config(base, retry_times=3)) as client:
            with pytest.raises(TransientHTTPError) as info:
                await client.get(f"{base}/flaky")

    assert calls["n"] == 4
    assert info.value.attempts == 4
    assert "502" in info.value.reason


@pytest.mark.asyncio()
async def test_fourth_attempt_success_is_still_within_budget(unused_tcp_port: int):
    app, calls = _flaky_app(failures=3, status=429)
    async for base in serve_app(app, unused_tcp_port):
        async with SessionClient(make_config(base, retry_times=3)) as client:
            resp = await client.get(f"{base}/flaky")

    assert resp.ok
    assert calls["n"] == 4


@pytest.mark.asyncio()
async def test_client_error_status_is_not_retried(unused_tcp_port: int):
    app, calls = _flaky_app(failures=0)
    async for base in serve_app(app, unused_tcp_port):
        async with SessionClient(make_config(base)) as client:
            resp = await client.get(f"{base}/missing")

    assert resp.status == 404
    assert not resp.ok
    assert calls["n"] == 1


@pytest.mark.asyncio()
async def test_connection_errors_are_retried_then_raised(dead_url: str):
    async with SessionClient(make_config(dead_url, retry_times=2)) as client:
        with pytest.raises(TransientHTTPError) as info:
            await client.get(f"{dead_url}/anything")
    assert info.value.attempts == 3


@pytest.mark.asyncio()
async def test_timeout_is_transient(unused_tcp_port: int):
    calls = {"n": 0}
    app = web.Application()

    async def slow_once(_):
        calls["n"] += 1
        if calls["n"] == 1:
            await asyncio.sleep(1.0)
        return web.Response(text="fast now")

    app.router.add_get("/slow", slow_once)
    async for base in serve_app(app, unused_tcp_port):
        async with SessionClient(make_config(base, timeout=0.3, retry_times=1)) as client:
            resp = await client.get(f"{base}/slow")

    assert resp.text == "fast now"
    assert calls["n"] == 2


@pytest.mark.asyncio()
async def test_cookies_persist_between_requests(unused_tcp_port: int):
    app = web.Application()

    async def set_cookie(_):
        resp = web.Response(text="set")
        resp.set_cookie("sid", "xyz")
        return resp

    async def echo_cookie(request):
        return web.Response(text=request.cookies.get("sid", "none"))

    app.router.add_get("/set", set_cookie)
    app.router.add_get("/echo", echo_cookie)
    async for base in serve_app(app, unused_tcp_port):
        async with SessionClient(make_config(base)) as client:
            await client.get(f"{base}/set")
            resp = await client.get(f"{base}/echo")

    assert resp.text == "xyz"


@pytest.mark.asyncio()
async def test_user_agent_and_extra_headers(unused_tcp_port: int):
    app = web.Application()

    async def echo_headers(request):
        return web.json_response(
            {"ua": request.headers.get("User-Agent"), "auth": request.headers.get("Authorization")}
        )

    app.router.add_get("/h", echo_headers)
    async for base in serve_app(app, unused_tcp_port):
        cfg = make_config(base)
        async with SessionClient(cfg, headers={"Authorization": "Bearer k"}) as client:
            data = (await client.get(f"{base}/h")).json()

    assert data == {"ua": "TestAgent/1.0", "auth": "Bearer k"}


def test_http_result_json_errors():
    result = HTTPResult("http://x/", 200, "{not json")
    with pytest.raises(ValueError):
        result.json()


@pytest.mark.asyncio()
async def test_request_requires_open_session():
    client = SessionClient(make_config("http://127.0.0.1:1"))
    with pytest.raises(RuntimeError):
        await client.get("http://127.0.0.1:1/")


def test_backoff_grows_and_is_capped():
    cfg = make_config("http://example.com", backoff_base=1.0, backoff_max=5.0)
    client = SessionClient(cfg)
    first = client._backoff(1)
    assert 1.0 <= first <= 2.0
    assert 4.0 <= client._backoff(3) <= 5.0
    assert client._backoff(10) == 5.0

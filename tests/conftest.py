# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections import Counter
from collections.abc import AsyncIterator
from typing import Any, Dict, List, Optional, Set

import pytest
import pytest_asyncio
from aiohttp import web

from note_scout.auth.credentials import StaticCredentials
from note_scout.config import NoteScoutConfig

CSRF_TOKEN = "csrf-abc123"
USERNAME = "alice@example.com"
PASSWORD = "s3cret"


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


def make_listing(n: int) -> List[Dict[str, Any]]:
    return [
        {"id": f"note{i}", "title": f"Note {i}", "lastchangeAt": f"2024-01-{i % 28 + 1:02d}T00:00:00Z"}
        for i in range(n)
    ]


class FakeHackMD:
    """In-process stand-in for the note service: landing, login, overview, download."""

    def __init__(self, listing: Optional[List[Dict[str, Any]]] = None) -> None:
        self.listing: List[Dict[str, Any]] = listing if listing is not None else make_listing(3)
        self.landing_html = f'<html><head><meta name="csrf-token" content="{CSRF_TOKEN}"></head></html>'
        self.overview_status = 200
        self.overview_body: Optional[str] = None
        self.failing_ids: Set[str] = set()
        self.truncated_ids: Set[str] = set()
        self.flaky: Dict[str, int] = {}
        self.delays: Dict[str, float] = {}
        self.calls: Counter = Counter()
        self.in_flight = 0
        self.max_in_flight = 0
        self.login_forms: List[Dict[str, str]] = []

    def content_of(self, page_id: str) -> str:
        return f"# {page_id}\n\nbody of {page_id}"

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/", self.handle_landing)
        app.router.add_post("/login", self.handle_login)
        app.router.add_get("/api/overview/team/{team}", self.handle_overview)
        app.router.add_get("/{id}/download", self.handle_download)
        return app

    async def handle_landing(self, request: web.Request) -> web.Response:
        self.calls["landing"] += 1
        resp = web.Response(text=self.landing_html, content_type="text/html")
        resp.set_cookie("connect.sid", "anon-session")
        return resp

    async def handle_login(self, request: web.Request) -> web.Response:
        self.calls["login"] += 1
        form = await request.post()
        self.login_forms.append({k: str(v) for k, v in form.items()})
        if request.cookies.get("connect.sid") != "anon-session":
            return web.Response(status=400, text="no session")
        if request.headers.get("X-XSRF-Token") != CSRF_TOKEN:
            return web.Response(status=403, text="bad csrf")
        if form.get("email") != USERNAME or form.get("password") != PASSWORD:
            return web.Response(status=401, text="bad credentials")
        resp = web.Response(text="ok")
        resp.set_cookie("connect.sid", "auth-session")
        return resp

    def _authorized(self, request: web.Request) -> bool:
        return request.cookies.get("connect.sid") == "auth-session"

    async def handle_overview(self, request: web.Request) -> web.Response:
        self.calls["overview"] += 1
        self.calls[f"overview:{request.match_info['team']}"] += 1
        if not self._authorized(request):
            return web.Response(status=403)
        if self.overview_status != 200:
            return web.Response(status=self.overview_status)
        if self.overview_body is not None:
            return web.Response(text=self.overview_body, content_type="application/json")
        return web.json_response(self.listing)

    async def handle_download(self, request: web.Request) -> web.StreamResponse:
        page_id = request.match_info["id"]
        self.calls[f"download:{page_id}"] += 1
        if not self._authorized(request):
            return web.Response(status=403)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(page_id, 0.005))
            if page_id in self.failing_ids:
                return web.Response(status=500)
            if page_id in self.truncated_ids:
                # promise 1000 bytes, send a few, drop the connection
                resp = web.StreamResponse(headers={"Content-Length": "1000"})
                await resp.prepare(request)
                await resp.write(b"# partial")
                request.transport.close()
                return resp
            if self.flaky.get(page_id, 0) > 0:
                self.flaky[page_id] -= 1
                return web.Response(status=503)
            return web.Response(text=self.content_of(page_id), content_type="text/markdown")
        finally:
            self.in_flight -= 1


def make_config(server_url: str, **overrides: Any) -> NoteScoutConfig:
    """Test configuration: no backoff sleeps, short timeouts."""
    data: Dict[str, Any] = {
        "server_url": server_url,
        "backoff_base": 0.0,
        "timeout": 5.0,
        "user_agent": "TestAgent/1.0",
    }
    data.update(overrides)
    return NoteScoutConfig(**data)


@pytest.fixture()
def credentials() -> StaticCredentials:
    return StaticCredentials(USERNAME, PASSWORD)


@pytest.fixture()
def fake_hackmd() -> FakeHackMD:
    return FakeHackMD()


@pytest_asyncio.fixture
async def hackmd_url(fake_hackmd: FakeHackMD, unused_tcp_port: int) -> AsyncIterator[str]:
    async for url in serve_app(fake_hackmd.app(), unused_tcp_port):
        yield url


@pytest.fixture()
def dead_url(unused_tcp_port_factory) -> str:
    """A local URL nothing listens on."""
    return f"http://127.0.0.1:{unused_tcp_port_factory()}"

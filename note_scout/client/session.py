# note_scout/client/session.py
"""
Session client: one cookie-keeping aiohttp session with retry/backoff for
transient failures (network errors, timeouts, 5xx, 429).
"""
from __future__ import annotations

import asyncio
import json as _json
import random
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout, CookieJar, TCPConnector

from note_scout.config import NoteScoutConfig
from note_scout.errors import TransientHTTPError
from note_scout.logger import get_logger

__all__ = ("HTTPResult", "SessionClient", "RETRY_STATUS")

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)


@dataclass(slots=True)
class HTTPResult:
    """Fully read response: status, decoded body and headers."""

    url: str
    status: int
    text: str
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        try:
            return _json.loads(self.text)
        except ValueError as exc:
            raise ValueError(f"malformed JSON from {self.url}: {exc}") from exc


class _RetryableStatus(Exception):
    def __init__(self, status: int) -> None:
        super().__init__(f"retryable status {status}")
        self.status = status


class SessionClient:
    """
    Wraps a single :class:`aiohttp.ClientSession`.

    All requests share one cookie jar, so the session cookie obtained with
    the landing page survives login, listing and downloads. The client is
    passed explicitly to every component; use it as an async context manager.
    """

    def __init__(
        self,
        config: NoteScoutConfig,
        *,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.config = config
        self.retry_times: int = config.retry_times
        self._headers = {"User-Agent": config.user_agent, **(headers or {})}
        self.session: Optional[ClientSession] = None
        self.logger = get_logger("session")

    async def __aenter__(self) -> SessionClient:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def open(self) -> None:
        if self.session is not None and not self.session.closed:
            return
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.config.timeout),
            headers=self._headers,
            # unsafe: keep cookies for IP-address hosts too
            cookie_jar=CookieJar(unsafe=True),
            connector=TCPConnector(keepalive_timeout=self.config.keepalive),
            raise_for_status=False,
        )

    async def close(self) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    @property
    def cookie_jar(self):
        if not self.session:
            raise RuntimeError("Session not initialized")
        return self.session.cookie_jar

    async def get(self, url: str, **kwargs: Any) -> HTTPResult:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> HTTPResult:
        return await self.request("POST", url, **kwargs)

    async def request(
        self,
        method: str,
        url: str,
        *,
        data: Any = None,
        json: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Mapping[str, str]] = None,
    ) -> HTTPResult:
        """
        Send one request, retrying transient failures.

        Returns the fully read response for any non-transient status; the
        caller decides whether it is an error. Raises TransientHTTPError
        once ``retry_times`` retries are used up.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        attempts = 0
        while True:
            attempts += 1
            try:
                async with self.session.request(
                    method, url, data=data, json=json, headers=headers, params=params
                ) as resp:
                    if resp.status in RETRY_STATUS:
                        raise _RetryableStatus(resp.status)
                    # the body is read here so truncated payloads are retried too
                    text = await resp.text()
                    return HTTPResult(str(resp.url), resp.status, text, dict(resp.headers))
            except (ClientError, asyncio.TimeoutError, _RetryableStatus) as e:
                reason = str(e) or type(e).__name__
                if attempts > self.retry_times:
                    self.logger.debug("Giving up on %s %s: %s", method, url, reason)
                    raise TransientHTTPError(url, attempts, reason) from e
                backoff = self._backoff(attempts)
                self.logger.debug(
                    "Retry %d/%d for %s %s after %.2f s (%s)",
                    attempts, self.retry_times, method, url, backoff, reason,
                )
                await asyncio.sleep(backoff)

    def _backoff(self, attempt: int) -> float:
        base = self.config.backoff_base
        return min(self.config.backoff_max, base * 2 ** (attempt - 1) + random.random() * base)

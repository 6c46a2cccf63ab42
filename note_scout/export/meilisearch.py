# note_scout/export/meilisearch.py
"""
Публикация страниц в Meilisearch через REST API.

Индекс создаётся при отсутствии (с ожиданием задачи), затем все страницы
добавляются с заменой по ключу ``id``. Ошибки публикации не трогают уже
записанный снимок.
"""
from __future__ import annotations

import asyncio
import time
from typing import Any, Dict

from note_scout.client.session import HTTPResult, SessionClient
from note_scout.crawler.models import PageCollection
from note_scout.errors import IndexPublishError, TransientHTTPError
from note_scout.logger import get_logger

_TASK_DONE = ("succeeded", "failed", "canceled")


class MeilisearchPublisher:
    """Thin adapter over the Meilisearch endpoints NoteScout needs."""

    def __init__(
        self,
        client: SessionClient,
        url: str,
        *,
        index: str = "pages",
        wait_timeout: float = 30.0,
        poll_interval: float = 0.1,
    ) -> None:
        self.client = client
        self.url = url.rstrip("/")
        self.index = index
        self.wait_timeout = wait_timeout
        self.poll_interval = poll_interval
        self.logger = get_logger("meilisearch")

    async def _call(self, method: str, path: str, **kwargs: Any) -> HTTPResult:
        try:
            return await self.client.request(method, f"{self.url}{path}", **kwargs)
        except TransientHTTPError as exc:
            raise IndexPublishError(f"Meilisearch {method} {path} failed: {exc}") from exc

    @staticmethod
    def _task(resp: HTTPResult, what: str) -> Dict[str, Any]:
        """Decode a task object; anything else in a 2xx body is a publish error."""
        try:
            task = resp.json()
        except ValueError as exc:
            raise IndexPublishError(f"{what}: malformed response: {exc}") from exc
        if not isinstance(task, dict):
            raise IndexPublishError(f"{what}: expected an object, got {type(task).__name__}")
        return task

    @classmethod
    def _task_uid(cls, resp: HTTPResult, what: str) -> int:
        task = cls._task(resp, what)
        try:
            return int(task["taskUid"])
        except (KeyError, TypeError, ValueError) as exc:
            raise IndexPublishError(f"{what}: no task uid in response") from exc

    async def health(self) -> None:
        resp = await self._call("GET", "/health")
        if not resp.ok:
            raise IndexPublishError(f"Meilisearch is unhealthy (HTTP {resp.status})")

    async def wait_for_task(self, task_uid: int) -> Dict[str, Any]:
        deadline = time.monotonic() + self.wait_timeout
        while True:
            resp = await self._call("GET", f"/tasks/{task_uid}")
            if not resp.ok:
                raise IndexPublishError(f"task {task_uid} lookup returned HTTP {resp.status}")
            task = self._task(resp, f"task {task_uid}")
            if task.get("status") in _TASK_DONE:
                return task
            if time.monotonic() > deadline:
                raise IndexPublishError(f"task {task_uid} did not finish in {self.wait_timeout} s")
            await asyncio.sleep(self.poll_interval)

    async def ensure_index(self) -> None:
        """Create the index (primary key ``id``) unless it already exists."""
        resp = await self._call("GET", f"/indexes/{self.index}")
        if resp.ok:
            return
        if resp.status != 404:
            raise IndexPublishError(f"index lookup returned HTTP {resp.status}")

        self.logger.info("Creating Meilisearch index %s", self.index)
        resp = await self._call("POST", "/indexes", json={"uid": self.index, "primaryKey": "id"})
        if not resp.ok:
            raise IndexPublishError(f"index creation returned HTTP {resp.status}: {resp.text}")
        task = await self.wait_for_task(self._task_uid(resp, "index creation"))
        if task.get("status") != "succeeded":
            error = task.get("error")
            if not isinstance(error, dict):
                error = {}
            raise IndexPublishError(
                f"index creation {task.get('status')}: {error.get('message', 'unknown error')}"
            )

    async def add_or_replace(self, pages: PageCollection) -> int:
        """Upsert *pages* keyed by ``id``; return the enqueued task uid."""
        resp = await self._call(
            "POST",
            f"/indexes/{self.index}/documents",
            params={"primaryKey": "id"},
            json=[page.to_record() for page in pages],
        )
        if not resp.ok:
            raise IndexPublishError(f"document upload returned HTTP {resp.status}: {resp.text}")
        task_uid = self._task_uid(resp, "document upload")
        self.logger.info("Queued %d page(s) for index %s (task %d)", len(pages), self.index, task_uid)
        return task_uid

    async def publish(self, pages: PageCollection) -> int:
        await self.health()
        await self.ensure_index()
        return await self.add_or_replace(pages)


async def publish_pages(
    pages: PageCollection,
    client: SessionClient,
    url: str,
    *,
    index: str = "pages",
    wait_timeout: float = 30.0,
) -> int:
    """Health check, ensure the index, upsert all pages."""
    publisher = MeilisearchPublisher(client, url, index=index, wait_timeout=wait_timeout)
    return await publisher.publish(pages)


__all__ = ["MeilisearchPublisher", "publish_pages"]

# note_scout/crawler/fetcher.py
"""
Content fetcher: downloads every page with a bounded worker pool.

Results are attached to the page at its listing index, so the collection
keeps listing order whatever order the downloads finish in. A failed
download leaves ``content`` as None and does not stop the others.
"""
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from note_scout.client.session import SessionClient
from note_scout.crawler.models import Page, PageCollection
from note_scout.errors import DocumentFetchError, TransientHTTPError
from note_scout.logger import get_logger


@dataclass(slots=True)
class FetchStats:
    """Outcome of one :meth:`ContentFetcher.fetch_all` call."""

    total: int = 0
    succeeded: int = 0
    failed_ids: List[str] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failed_ids)


class ContentFetcher:
    """Downloads page bodies with at most ``concurrency`` requests in flight."""

    def __init__(self, client: SessionClient, concurrency: Optional[int] = None) -> None:
        self.client = client
        self.concurrency: int = client.config.concurrency if concurrency is None else concurrency
        if self.concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.logger = get_logger("fetcher")

    def download_url(self, page: Page) -> str:
        return self.client.config.endpoint(page.id, "download")

    async def fetch_one(self, page: Page) -> str:
        """Return the raw content of *page* or raise DocumentFetchError."""
        url = self.download_url(page)
        self.logger.info("Downloading %s", page.id)
        try:
            resp = await self.client.get(url)
        except (TransientHTTPError, UnicodeDecodeError) as exc:
            raise DocumentFetchError(page.id, str(exc)) from exc
        if not resp.ok:
            raise DocumentFetchError(page.id, f"HTTP {resp.status}", status=resp.status)
        return resp.text

    async def fetch_all(self, pages: PageCollection) -> FetchStats:
        """Fill ``content`` of *pages* in place; never raises for a single document."""
        stats = FetchStats(total=len(pages))
        if not pages:
            return stats

        start = time.monotonic()
        queue: asyncio.Queue[Tuple[int, Page]] = asyncio.Queue()
        for item in enumerate(pages):
            queue.put_nowait(item)
        results: List[Optional[str]] = [None] * len(pages)

        workers = [
            asyncio.create_task(self._worker(queue, results, stats))
            for _ in range(min(self.concurrency, len(pages)))
        ]
        try:
            await asyncio.gather(*workers)
        finally:
            for w in workers:
                w.cancel()

        for idx, content in enumerate(results):
            if content is not None:
                pages[idx].content = content

        duration = time.monotonic() - start
        self.logger.info(
            "Downloaded %d/%d document(s) in %.2f s", stats.succeeded, stats.total, duration
        )
        if stats.failed_ids:
            self.logger.warning("Failed downloads: %s", ", ".join(stats.failed_ids))
        return stats

    async def _worker(
        self,
        queue: asyncio.Queue[Tuple[int, Page]],
        results: List[Optional[str]],
        stats: FetchStats,
    ) -> None:
        while True:
            try:
                idx, page = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            try:
                results[idx] = await self.fetch_one(page)
                stats.succeeded += 1
            except DocumentFetchError as exc:
                stats.failed_ids.append(page.id)
                self.logger.warning("Skipping %s", exc)
            finally:
                queue.task_done()


__all__ = ["ContentFetcher", "FetchStats"]

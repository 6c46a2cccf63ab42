# File: note_scout/engine.py
"""note_scout.engine: оркестрация — сборка или загрузка базы и публикация в индекс."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from note_scout.auth.credentials import CredentialProvider
from note_scout.auth.flow import authenticate
from note_scout.client.session import SessionClient
from note_scout.config import NoteScoutConfig
from note_scout.crawler.fetcher import ContentFetcher
from note_scout.crawler.listing import fetch_team_pages
from note_scout.crawler.models import PageCollection
from note_scout.errors import MissingArgument
from note_scout.export.meilisearch import publish_pages
from note_scout.logger import logger
from note_scout.store import dump_pages, load_pages

__all__ = ["build_database", "publish", "start_dump"]


async def build_database(config: NoteScoutConfig, credentials: CredentialProvider) -> PageCollection:
    """Логин → листинг команды → загрузка содержимого, всё в одной сессии."""
    if not config.team:
        raise MissingArgument("team")
    async with SessionClient(config) as client:
        await authenticate(client, credentials)
        pages = await fetch_team_pages(client, config.team)
        await ContentFetcher(client).fetch_all(pages)
    return pages


async def publish(pages: PageCollection, config: NoteScoutConfig) -> Optional[int]:
    """Публикует страницы в Meilisearch, если он настроен."""
    if config.meilisearch is None:
        return None
    url = str(config.meilisearch)
    logger.info("Publishing %d page(s) to %s", len(pages), url)
    headers = {"Authorization": f"Bearer {config.meilisearch_key}"}
    async with SessionClient(config, headers=headers) as client:
        return await publish_pages(
            pages,
            client,
            url,
            index=config.index_name,
            wait_timeout=config.index_wait_timeout,
        )


async def start_dump(config: NoteScoutConfig, credentials: CredentialProvider) -> PageCollection:
    """
    Один запуск: режим сборки (нет файла или задан update) или режим загрузки.

    Снимок записывается до публикации, поэтому ошибка индекса его не затрагивает.
    """
    if not config.database:
        raise MissingArgument("database")
    database = Path(config.database)

    if config.update or not database.is_file():
        logger.info("Building database…")
        if not config.team:
            raise MissingArgument("team")
        pages = await build_database(config, credentials)
        logger.info("Dumping database to %s", database)
        dump_pages(pages, database)
    else:
        logger.info("Loading database from %s", database)
        pages = load_pages(database)

    await publish(pages, config)
    return pages

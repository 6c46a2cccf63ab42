# note_scout/store.py
"""
Snapshot storage: the whole page collection as one JSON array.

The file is always written and read wholesale; there is no append or merge
with a previous snapshot.
"""
from __future__ import annotations

from pathlib import Path
from typing import Union

from pydantic import ValidationError

from note_scout.crawler.models import PAGE_LIST, PageCollection
from note_scout.errors import SnapshotError
from note_scout.logger import logger


def dump_pages(pages: PageCollection, output_path: Union[Path, str]) -> Path:
    """
    Сохраняет коллекцию страниц в JSON-файл, полностью перезаписывая его.

    :param pages: список Page в порядке листинга
    :param output_path: путь к файлу снимка
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    # serialise first: a failure here must not truncate an existing snapshot
    payload = PAGE_LIST.dump_json(pages, by_alias=True)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(payload)
    logger.debug("Wrote %d page(s) to %s", len(pages), output)
    return output


def load_pages(input_path: Union[Path, str]) -> PageCollection:
    """Читает снимок целиком; невалидные данные дают SnapshotError."""
    source = Path(input_path)
    raw = source.read_bytes()
    try:
        pages = PAGE_LIST.validate_json(raw)
    except ValidationError as exc:
        raise SnapshotError(f"{source} is not a valid page snapshot: {exc}") from exc
    logger.debug("Loaded %d page(s) from %s", len(pages), source)
    return pages


__all__ = ["dump_pages", "load_pages"]

# File: note_scout/export/__init__.py
"""note_scout.export: приёмники готовой коллекции страниц (поисковый индекс)."""

from .meilisearch import MeilisearchPublisher, publish_pages

__all__ = ["MeilisearchPublisher", "publish_pages"]

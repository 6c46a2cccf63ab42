"""note_scout.crawler: team listing, bounded content download and the page model."""
from .fetcher import ContentFetcher, FetchStats
from .listing import fetch_team_pages
from .models import PAGE_LIST, Page, PageCollection, index_by_id

__all__ = [
    "ContentFetcher",
    "FetchStats",
    "fetch_team_pages",
    "Page",
    "PageCollection",
    "PAGE_LIST",
    "index_by_id",
]

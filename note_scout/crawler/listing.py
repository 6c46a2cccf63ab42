# note_scout/crawler/listing.py
"""Team overview listing: one GET, JSON array of pages without content."""
from __future__ import annotations

from pydantic import ValidationError

from note_scout.client.session import SessionClient
from note_scout.crawler.models import PAGE_LIST, PageCollection
from note_scout.errors import ListingFailure, TransientHTTPError
from note_scout.logger import get_logger

logger = get_logger("listing")


def team_overview_url(client: SessionClient, team: str) -> str:
    return client.config.endpoint("api", "overview", "team", team)


async def fetch_team_pages(client: SessionClient, team: str) -> PageCollection:
    """
    Return the team's pages in listing order, every ``content`` unset.

    An empty team yields an empty list. Any HTTP or payload problem raises
    ListingFailure.
    """
    url = team_overview_url(client, team)
    try:
        resp = await client.get(url)
    except TransientHTTPError as exc:
        raise ListingFailure(f"listing for team {team!r} failed: {exc}") from exc
    if not resp.ok:
        raise ListingFailure(f"listing for team {team!r} returned HTTP {resp.status}")

    try:
        pages = PAGE_LIST.validate_python(resp.json())
    except (ValueError, ValidationError) as exc:
        raise ListingFailure(f"unexpected listing payload for team {team!r}: {exc}") from exc

    for page in pages:
        page.content = None
    logger.info("Team %s: %d document(s)", team, len(pages))
    return pages


__all__ = ["fetch_team_pages", "team_overview_url"]

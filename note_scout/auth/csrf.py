# note_scout/auth/csrf.py
"""
CSRF token extraction from the service landing page.

Two interchangeable strategies share one signature ``(html) -> token``:
the default regex scan and a BeautifulSoup ``<meta>`` lookup.
"""
from __future__ import annotations

import re
from typing import Callable

from bs4 import BeautifulSoup

from note_scout.errors import TokenNotFound

TokenExtractor = Callable[[str], str]

_CSRF_RE = re.compile(r'"csrf-token" content="([^"]+)"')


def extract_csrf_token(html: str) -> str:
    """Return the first ``"csrf-token" content="..."`` value found in *html*."""
    match = _CSRF_RE.search(html)
    if match is None:
        raise TokenNotFound("no CSRF token found")
    return match.group(1)


def extract_csrf_token_from_meta(html: str) -> str:
    """Return ``content`` of ``<meta name="csrf-token">`` parsed with BeautifulSoup."""
    soup = BeautifulSoup(html, "html.parser")
    tag = soup.find("meta", attrs={"name": "csrf-token"})
    token = tag.get("content") if tag is not None else None
    if not token:
        raise TokenNotFound("no CSRF token found")
    return str(token)


__all__ = ["TokenExtractor", "extract_csrf_token", "extract_csrf_token_from_meta"]

# note_scout/errors.py
"""
Exception hierarchy for NoteScout.

Fatal errors (everything except :class:`DocumentFetchError`) abort the run;
the CLI reports them and exits with a non-zero status.
"""
from __future__ import annotations

from typing import Optional


class NoteScoutError(Exception):
    """Base class for all NoteScout errors."""


class MissingArgument(NoteScoutError):
    """A required option is not set."""

    def __init__(self, arg: str) -> None:
        self.arg = arg
        super().__init__(f"Missing required argument: --{arg}")


class TransientHTTPError(NoteScoutError):
    """A request kept failing with transient errors until retries ran out."""

    def __init__(self, url: str, attempts: int, reason: str) -> None:
        self.url = url
        self.attempts = attempts
        self.reason = reason
        super().__init__(f"{url} failed after {attempts} attempt(s): {reason}")


class TokenNotFound(NoteScoutError):
    """The landing page carries no CSRF token."""


class LoginFailure(NoteScoutError):
    """Credentials were rejected or the login step could not complete."""


class ListingFailure(NoteScoutError):
    """The team overview could not be retrieved or parsed."""


class DocumentFetchError(NoteScoutError):
    """A single document could not be downloaded. Absorbed by the fetcher."""

    def __init__(self, page_id: str, reason: str, status: Optional[int] = None) -> None:
        self.page_id = page_id
        self.status = status
        super().__init__(f"document {page_id}: {reason}")


class SnapshotError(NoteScoutError, ValueError):
    """The snapshot file exists but does not hold a valid page list."""


class IndexPublishError(NoteScoutError):
    """The search index is unhealthy or rejected an operation."""


__all__ = [
    "NoteScoutError",
    "MissingArgument",
    "TransientHTTPError",
    "TokenNotFound",
    "LoginFailure",
    "ListingFailure",
    "DocumentFetchError",
    "SnapshotError",
    "IndexPublishError",
]

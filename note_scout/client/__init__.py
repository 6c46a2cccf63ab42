"""note_scout.client: HTTP session with cookie persistence and retry."""
from .session import RETRY_STATUS, HTTPResult, SessionClient

__all__ = ["HTTPResult", "SessionClient", "RETRY_STATUS"]

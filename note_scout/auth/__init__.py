"""note_scout.auth: CSRF token extraction, credential providers and login."""
from .credentials import (
    CredentialProvider,
    Credentials,
    EnvCredentials,
    InteractiveCredentials,
    StaticCredentials,
)
from .csrf import extract_csrf_token, extract_csrf_token_from_meta
from .flow import authenticate, fetch_csrf_token

__all__ = [
    "CredentialProvider",
    "Credentials",
    "EnvCredentials",
    "InteractiveCredentials",
    "StaticCredentials",
    "extract_csrf_token",
    "extract_csrf_token_from_meta",
    "authenticate",
    "fetch_csrf_token",
]

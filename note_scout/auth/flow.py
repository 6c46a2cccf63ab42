# note_scout/auth/flow.py
"""
Login flow: landing page → CSRF token → credentials → POST /login.

The steps are strictly ordered and none of them is retried beyond the
session client's transient policy.
"""
from __future__ import annotations

from note_scout.auth.credentials import CredentialProvider
from note_scout.auth.csrf import TokenExtractor, extract_csrf_token
from note_scout.client.session import SessionClient
from note_scout.errors import LoginFailure, TransientHTTPError
from note_scout.logger import get_logger

logger = get_logger("auth")


async def fetch_csrf_token(
    client: SessionClient, extractor: TokenExtractor = extract_csrf_token
) -> str:
    """GET the landing page and pull the CSRF token out of it."""
    url = client.config.base_url
    try:
        landing = await client.get(url)
    except TransientHTTPError as exc:
        raise LoginFailure(f"landing page unavailable: {exc}") from exc
    if not landing.ok:
        raise LoginFailure(f"landing page returned HTTP {landing.status}")
    token = extractor(landing.text)
    logger.debug("CSRF token acquired")
    return token


async def authenticate(
    client: SessionClient,
    credentials: CredentialProvider,
    extractor: TokenExtractor = extract_csrf_token,
) -> SessionClient:
    """
    Log *client* in and return it.

    Raises TokenNotFound when the landing page has no token and
    LoginFailure when the service rejects the credentials.
    """
    config = client.config
    token = await fetch_csrf_token(client, extractor)

    creds = credentials.get_credentials()
    login_url = config.endpoint("login")
    try:
        resp = await client.post(
            login_url,
            data={"email": creds.username, "password": creds.password},
            headers={config.csrf_header: token},
        )
    except TransientHTTPError as exc:
        raise LoginFailure(f"login request failed: {exc}") from exc

    if not resp.ok:
        raise LoginFailure(f"Login failure (HTTP {resp.status})")
    logger.info("Logged in to %s", config.base_url)
    return client


__all__ = ["fetch_csrf_token", "authenticate"]

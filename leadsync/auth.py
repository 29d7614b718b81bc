"""OAuth credentials for the Gmail and Sheets APIs.

A saved authorized-user token is reused (and refreshed when expired).
Without one, the installed-app consent flow runs once on a local port
and the resulting token is written back for unattended runs.
"""

from __future__ import annotations

import structlog
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from .config import AuthConfig

logger = structlog.get_logger()


def load_saved_credentials(config: AuthConfig) -> Credentials | None:
    """Return the saved token, refreshed if needed, or ``None``."""
    if not config.token_path.exists():
        return None
    try:
        creds = Credentials.from_authorized_user_file(str(config.token_path), config.scopes)
    except ValueError as exc:
        logger.warning("oauth_token_invalid", path=str(config.token_path), error=str(exc))
        return None

    if creds.expired and creds.refresh_token:
        logger.info("oauth_token_refreshing", path=str(config.token_path))
        creds.refresh(Request())
        config.token_path.write_text(creds.to_json(), encoding="utf-8")

    return creds if creds.valid else None


def authorize(config: AuthConfig, *, interactive: bool = True) -> Credentials:
    """Return valid credentials, running the consent flow if allowed."""
    creds = load_saved_credentials(config)
    if creds is not None:
        return creds

    if not interactive:
        raise RuntimeError(
            f"No valid OAuth token at {config.token_path}; "
            "run `python -m leadsync authorize` first."
        )
    if not config.credentials_path.exists():
        raise FileNotFoundError(
            f"OAuth client secrets not found at {config.credentials_path}. "
            "Download a Desktop-app OAuth client from Google Cloud Console."
        )

    flow = InstalledAppFlow.from_client_secrets_file(
        str(config.credentials_path),
        scopes=config.scopes,
    )
    creds = flow.run_local_server(port=0)
    config.token_path.write_text(creds.to_json(), encoding="utf-8")
    logger.info("oauth_token_saved", path=str(config.token_path))
    return creds

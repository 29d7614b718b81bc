"""Entry point for the lead sync package.

Usage::

    python -m leadsync authorize   # one-time OAuth consent, writes token.json
    python -m leadsync run         # one pass: Gmail -> extract -> Sheets
"""

from __future__ import annotations

import asyncio
import json
import sys

import structlog
from googleapiclient.errors import HttpError

logger = structlog.get_logger()


def _error_details(exc: BaseException) -> dict[str, object]:
    if not isinstance(exc, HttpError):
        return {}
    details: dict[str, object] = {"status": exc.status_code, "reason": exc.reason}
    try:
        details["response"] = json.loads(exc.content.decode("utf-8"))
    except (ValueError, UnicodeDecodeError, AttributeError):
        details["response"] = exc.error_details
    return details


def run() -> int:
    from .auth import authorize
    from .checkpoint import FileCheckpointStore
    from .config import LeadSyncConfig
    from .gmail_client import GmailClient
    from .logging import setup_logging
    from .pipeline import LeadPipeline
    from .sheets import SheetsLeadStore

    config = LeadSyncConfig()
    setup_logging(config)

    try:
        credentials = authorize(config.auth, interactive=False)
        pipeline = LeadPipeline(
            config,
            mail=GmailClient(config.gmail, credentials),
            store=SheetsLeadStore(config.sheets, credentials),
            checkpoints=FileCheckpointStore(config.checkpoint_path),
        )
        asyncio.run(pipeline.run())
    except Exception as exc:
        logger.exception("lead_run_failed", error=str(exc), **_error_details(exc))
        return 1
    return 0


def authorize_once() -> int:
    from .auth import authorize
    from .config import AuthConfig
    from .logging import setup_logging

    setup_logging(json=False)
    config = AuthConfig()
    authorize(config, interactive=True)
    print(f"Authentication successful, token saved to {config.token_path}")
    return 0


def main() -> None:
    if len(sys.argv) < 2 or sys.argv[1] not in ("run", "authorize"):
        print("Usage: python -m leadsync <run|authorize>", file=sys.stderr)
        sys.exit(1)

    if sys.argv[1] == "run":
        sys.exit(run())
    sys.exit(authorize_once())


if __name__ == "__main__":
    main()

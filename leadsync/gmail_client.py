"""Async Gmail client wrapping googleapiclient with asyncio.to_thread."""

from __future__ import annotations

import asyncio
import base64
from typing import Any

import structlog
from googleapiclient.discovery import build

from .config import GmailConfig
from .interface import MailService
from .models import RawMessage

logger = structlog.get_logger()


class GmailClient(MailService):
    """Gmail API implementation of :class:`MailService`.

    ``googleapiclient`` is blocking; every ``execute()`` is run with
    ``asyncio.to_thread()``.  Errors (``HttpError``, socket errors)
    propagate unchanged.
    """

    def __init__(self, config: GmailConfig, credentials: Any = None, *, service: Any = None) -> None:
        self._config = config
        self._credentials = credentials
        self._service = service

    def _messages(self) -> Any:
        if self._service is None:
            self._service = build(
                "gmail",
                "v1",
                credentials=self._credentials,
                cache_discovery=False,
            )
        return self._service.users().messages()

    # ------------------------------------------------------------------
    # MailService
    # ------------------------------------------------------------------

    async def list_messages(self, query: str) -> list[str]:
        """Return ids of all messages matching *query*, following pages."""
        ids: list[str] = []
        page_token: str | None = None
        while True:
            kwargs: dict[str, Any] = {
                "userId": self._config.user_id,
                "q": query,
                "maxResults": self._config.page_size,
            }
            if page_token:
                kwargs["pageToken"] = page_token
            response = await asyncio.to_thread(self._messages().list(**kwargs).execute)
            ids.extend(m["id"] for m in response.get("messages", []) or [])
            page_token = response.get("nextPageToken")
            if not page_token:
                break
        logger.debug("gmail_list_complete", query=query, count=len(ids))
        return ids

    async def get_message(self, message_id: str) -> RawMessage:
        request = self._messages().get(
            userId=self._config.user_id,
            id=message_id,
            format="full",
        )
        resource = await asyncio.to_thread(request.execute)
        return message_from_resource(resource)

    async def mark_read(self, message_id: str) -> None:
        request = self._messages().modify(
            userId=self._config.user_id,
            id=message_id,
            body={"removeLabelIds": ["UNREAD"]},
        )
        await asyncio.to_thread(request.execute)
        logger.debug("gmail_marked_read", message_id=message_id)


# ----------------------------------------------------------------------
# Resource decoding
# ----------------------------------------------------------------------


def message_from_resource(resource: dict[str, Any]) -> RawMessage:
    """Convert a ``format=full`` Gmail message resource to :class:`RawMessage`."""
    payload = resource.get("payload") or {}
    headers = [
        (h.get("name", ""), h.get("value", ""))
        for h in payload.get("headers", []) or []
    ]
    return RawMessage(
        message_id=resource.get("id", ""),
        html_body=find_html_body(payload),
        headers=headers,
    )


def find_html_body(payload: dict[str, Any]) -> str | None:
    """Depth-first search for the first ``text/html`` part with data.

    A single-part message carries its body directly on the payload; it is
    taken as HTML when it is not declared ``text/plain``.
    """
    parts = payload.get("parts")
    if not parts:
        data = (payload.get("body") or {}).get("data")
        if data and payload.get("mimeType", "text/html") != "text/plain":
            return _decode(data)
        return None

    for part in parts:
        if part.get("mimeType") == "text/html":
            data = (part.get("body") or {}).get("data")
            if data:
                return _decode(data)
        elif part.get("parts"):
            html = find_html_body(part)
            if html is not None:
                return html
    return None


def _decode(data: str) -> str:
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded).decode("utf-8", errors="replace")

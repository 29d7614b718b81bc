"""Abstract collaborators of the lead pipeline.

The pipeline only talks to these interfaces; the Gmail and Sheets
implementations live in :mod:`leadsync.gmail_client` and
:mod:`leadsync.sheets`, and tests substitute mocks.
"""

from __future__ import annotations

import abc

from .models import RawMessage


class MailService(abc.ABC):
    """Read access to the lead mailbox plus the read/unread flag."""

    @abc.abstractmethod
    async def list_messages(self, query: str) -> list[str]:
        """Return the ids of all messages matching a search *query*."""

    @abc.abstractmethod
    async def get_message(self, message_id: str) -> RawMessage:
        """Fetch headers and HTML body of one message."""

    @abc.abstractmethod
    async def mark_read(self, message_id: str) -> None:
        """Clear the unread flag of one message."""


class LeadStore(abc.ABC):
    """Append-only tabular store of lead rows."""

    @abc.abstractmethod
    async def read_column(self, column: str) -> list[list[str]]:
        """Return every cell of *column* (e.g. ``"J"``), one list per row."""

    @abc.abstractmethod
    async def append_row(self, values: list[str]) -> None:
        """Append one row after the last non-empty row."""

"""Google Sheets lead table.

All googleapiclient calls are wrapped with ``asyncio.to_thread()`` to
avoid blocking.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from googleapiclient.discovery import build

from .config import SheetsConfig
from .interface import LeadStore

logger = structlog.get_logger()


class SheetsLeadStore(LeadStore):
    """Read the identifier column and append lead rows."""

    def __init__(self, config: SheetsConfig, credentials: Any = None, *, service: Any = None) -> None:
        self._config = config
        self._credentials = credentials
        self._service = service

    def _values(self) -> Any:
        if self._service is None:
            self._service = build(
                "sheets",
                "v4",
                credentials=self._credentials,
                cache_discovery=False,
            )
        return self._service.spreadsheets().values()

    def _range(self, a1: str) -> str:
        return f"{self._config.sheet_name}!{a1}"

    async def read_column(self, column: str) -> list[list[str]]:
        request = self._values().get(
            spreadsheetId=self._config.spreadsheet_id,
            range=self._range(f"{column}:{column}"),
        )
        response = await asyncio.to_thread(request.execute)
        rows: list[list[str]] = response.get("values", []) or []
        logger.debug("sheet_column_read", column=column, rows=len(rows))
        return rows

    async def append_row(self, values: list[str]) -> None:
        request = self._values().append(
            spreadsheetId=self._config.spreadsheet_id,
            range=self._range("A1"),
            valueInputOption=self._config.value_input_option,
            body={"values": [values]},
        )
        response = await asyncio.to_thread(request.execute)
        logger.debug(
            "sheet_row_appended",
            updated_range=(response or {}).get("updates", {}).get("updatedRange"),
        )

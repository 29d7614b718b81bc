"""LeadPipeline -- one pass over the mailbox: search, extract, dedupe, append.

A run is strictly sequential.  Each candidate is fetched, checked
against the identifiers already in the lead table, extracted, screened
for junk, appended and then marked read before the next one starts.

Any exception from the mail service or the lead store aborts the run
and propagates to the caller with the checkpoint untouched, so the next
run searches the same window again.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

import structlog

from .checkpoint import CheckpointStore, format_after, query_lower_bound
from .config import LeadSyncConfig
from .dedup import is_duplicate, seen_identifiers
from .extractor import LeadExtractor
from .interface import LeadStore, MailService
from .models import RawMessage, RunSummary
from .normalizer import RecordNormalizer

logger = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LeadPipeline:
    """Orchestrates a single lead sync run."""

    def __init__(
        self,
        config: LeadSyncConfig,
        mail: MailService,
        store: LeadStore,
        checkpoints: CheckpointStore,
        *,
        extractor: LeadExtractor | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._mail = mail
        self._store = store
        self._checkpoints = checkpoints
        self._extractor = extractor or LeadExtractor(config.extractor)
        self._normalizer = RecordNormalizer(config.max_cell_chars)
        self._clock = clock
        self._tz = ZoneInfo(config.timezone)

    def build_query(self, after: str) -> str:
        gmail = self._config.gmail
        query = f"from:{gmail.sender} subject:{gmail.subject} after:{after}"
        if gmail.inbox_only:
            query += " in:inbox"
        return query

    async def run(self) -> RunSummary:
        """Process every candidate since the checkpoint, then advance it."""
        lower_bound = query_lower_bound(
            self._checkpoints.read(),
            self._clock(),
            bootstrap=timedelta(hours=self._config.bootstrap_hours),
            tz=self._tz,
        )
        query = self.build_query(format_after(lower_bound))
        summary = RunSummary(lower_bound=lower_bound, query=query)
        logger.info("lead_run_started", query=query)

        message_ids = await self._mail.list_messages(query)
        summary.candidates = len(message_ids)

        if not message_ids:
            logger.info("lead_run_no_candidates", query=query)
        else:
            logger.info("lead_candidates_found", count=len(message_ids))
            seen = seen_identifiers(
                await self._store.read_column(self._config.sheets.id_column),
                header_label=self._config.sheets.id_header,
            )
            logger.debug("lead_seen_identifiers_loaded", count=len(seen))
            for message_id in message_ids:
                with structlog.contextvars.bound_contextvars(message_id=message_id):
                    await self._process(message_id, seen, summary)

        self._checkpoints.write(self._clock())
        logger.info("lead_run_completed", **summary.model_dump(exclude={"query", "lower_bound"}))
        return summary

    async def _process(self, message_id: str, seen: set[str], summary: RunSummary) -> None:
        message = await self._mail.get_message(message_id)
        unique_id = self.unique_id(message)

        if is_duplicate(unique_id, seen):
            logger.info("lead_duplicate_skipped", unique_id=unique_id)
            await self._mail.mark_read(message_id)
            summary.duplicates += 1
            return

        if not message.html_body:
            logger.warning("lead_message_without_html")
            summary.without_html += 1
            return

        fields = self._extractor.extract(message.html_body, message.headers)

        if fields.is_junk:
            logger.warning(
                "lead_junk_skipped",
                template=fields.template.value,
                product=fields.product,
            )
            await self._mail.mark_read(message_id)
            summary.junk += 1
            return

        record = self._normalizer.build_record(
            fields,
            unique_id=unique_id,
            received_at=self._clock().astimezone(self._tz).isoformat(timespec="seconds"),
        )
        await self._store.append_row(record.to_row())
        seen.add(unique_id)
        logger.info("lead_appended", name=record.name, template=fields.template.value)

        await self._mail.mark_read(message_id)
        summary.appended += 1

    @staticmethod
    def unique_id(message: RawMessage) -> str:
        """Message-ID header, or the transport id when the header is missing."""
        header = (message.header("Message-ID") or "").strip()
        return header or message.message_id

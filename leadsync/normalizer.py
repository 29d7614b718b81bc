"""Record normalizer: canonical cell values for the lead table."""

from __future__ import annotations

import structlog

from .extractor import strip_verification
from .models import UNKNOWN_DISPLAY, ExtractedFields, LeadRecord

logger = structlog.get_logger()

MAX_CELL_CHARS = 49_999
TRUNCATION_MARKER = "\n... (truncated)"

# Leading apostrophe makes Sheets store the value as text, keeping "+91".
TEXT_PREFIX = "'"


def format_phone(phone: str) -> str:
    """Strip the verification note and dashes, force text interpretation.

    Idempotent: a formatted value formats to itself.
    """
    phone = strip_verification(phone).replace("-", "")
    if not phone.startswith(TEXT_PREFIX):
        phone = TEXT_PREFIX + phone
    return phone


def truncate(value: str, limit: int = MAX_CELL_CHARS) -> str:
    """Clip *value* to *limit* characters plus a marker."""
    if len(value) <= limit:
        return value
    logger.warning("lead_field_truncated", length=len(value), limit=limit)
    return value[:limit] + TRUNCATION_MARKER


class RecordNormalizer:
    """Turn :class:`ExtractedFields` into cell-ready strings."""

    def __init__(self, max_cell_chars: int = MAX_CELL_CHARS) -> None:
        self._limit = max_cell_chars

    def normalize(self, fields: ExtractedFields) -> tuple[str, str, str, str]:
        """Return ``(name, phone, email, product)`` as cell values."""
        phone = format_phone(fields.phone) if fields.phone is not None else None
        return (
            self._cell(fields.name),
            self._cell(phone),
            self._cell(fields.email),
            self._cell(fields.product),
        )

    def build_record(
        self,
        fields: ExtractedFields,
        *,
        unique_id: str,
        received_at: str,
    ) -> LeadRecord:
        name, phone, email, product = self.normalize(fields)
        return LeadRecord(
            name=name,
            phone=phone,
            email=email,
            product=product,
            received_at=received_at,
            unique_id=self._cell(unique_id),
        )

    def _cell(self, value: str | None) -> str:
        if value is None:
            return UNKNOWN_DISPLAY
        return truncate(value, self._limit)

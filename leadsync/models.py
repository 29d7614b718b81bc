"""Data models for lead extraction and persistence."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNKNOWN_DISPLAY = "N/A"

LEAD_FIELDS = ("name", "phone", "email", "product")

Headers = Sequence[tuple[str, str]]


def header_value(headers: Headers, name: str) -> str | None:
    """Return the first value of header *name* (case-insensitive)."""
    wanted = name.lower()
    for key, value in headers:
        if key.lower() == wanted:
            return value
    return None


class RawMessage(BaseModel):
    """One candidate email as returned by the mail service.

    Immutable and scoped to a single pipeline run.
    """

    model_config = ConfigDict(frozen=True)

    message_id: str = Field(description="Transport-assigned message id")
    html_body: str | None = Field(default=None, description="Decoded text/html part, if any")
    headers: list[tuple[str, str]] = Field(
        default_factory=list,
        description="Header name/value pairs in message order",
    )

    def header(self, name: str) -> str | None:
        return header_value(self.headers, name)


class Template(str, Enum):
    """Known layouts of the lead notification email."""

    BUYLEAD = "buylead"
    ENQUIRY = "enquiry"
    UNKNOWN = "unknown"


class ExtractedFields(BaseModel):
    """The four semantic lead fields.

    ``None`` is the explicit *unknown* variant: a field holds a value only
    when some extraction strategy produced a non-blank one.
    """

    name: str | None = None
    phone: str | None = None
    email: str | None = None
    product: str | None = None
    template: Template = Template.UNKNOWN

    @field_validator(*LEAD_FIELDS)
    @classmethod
    def _blank_is_unknown(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    def is_unknown(self, field: str) -> bool:
        return getattr(self, field) is None

    @property
    def is_junk(self) -> bool:
        """No usable contact identity: both name and phone are unknown."""
        return self.name is None and self.phone is None


class LeadRecord(BaseModel):
    """One row of the lead table.

    Written once; status and notification flags are maintained by hand
    (or by other tools) after creation.
    """

    name: str
    phone: str
    email: str
    product: str
    received_at: str = Field(description="Processing timestamp, ISO-8601")
    status: str = Field(default="New")
    whatsapp_notified: bool | None = Field(default=None, description="None while pending")
    email_notified: bool | None = Field(default=None, description="None while pending")
    sms_notified: bool | None = Field(default=None, description="None while pending")
    unique_id: str = Field(description="Deduplication key, normally the Message-ID header")

    def to_row(self) -> list[str]:
        """Cell values in sheet column order (A..J)."""
        return [
            self.name,
            self.phone,
            self.email,
            self.product,
            self.received_at,
            self.status,
            _flag_cell(self.whatsapp_notified),
            _flag_cell(self.email_notified),
            _flag_cell(self.sms_notified),
            self.unique_id,
        ]


def _flag_cell(flag: bool | None) -> str:
    if flag is None:
        return ""
    return "TRUE" if flag else "FALSE"


class RunSummary(BaseModel):
    """Outcome counters of a single pipeline run."""

    lower_bound: date
    query: str
    candidates: int = 0
    appended: int = 0
    duplicates: int = 0
    junk: int = 0
    without_html: int = 0

"""Lead sync configuration loaded from environment variables.

Uses pydantic-settings so every field can be overridden via env vars;
the scheduler that invokes a run only has to export them.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class GmailConfig(BaseSettings):
    """Mailbox search settings."""

    model_config = {"env_prefix": "GMAIL_"}

    user_id: str = Field(default="me", description="Gmail user id for API calls")
    sender: str = Field(
        default="indiamart",
        description="Value of the from: search operator",
    )
    subject: str = Field(
        default="film",
        description="Value of the subject: search operator",
    )
    inbox_only: bool = Field(
        default=False,
        description="Restrict the search to in:inbox",
    )
    page_size: int = Field(default=100, description="maxResults per list page")


class SheetsConfig(BaseSettings):
    """Google Sheets settings for the lead table."""

    model_config = {"env_prefix": "SHEETS_"}

    spreadsheet_id: str = Field(description="Spreadsheet key of the lead table")
    sheet_name: str = Field(default="Sheet1", description="Worksheet (tab) name")
    id_column: str = Field(
        default="J",
        description="Column letter holding the unique message identifier",
    )
    id_header: str = Field(
        default="Message ID",
        description="Header label of the identifier column",
    )
    value_input_option: str = Field(
        default="USER_ENTERED",
        description="How Sheets interprets appended values",
    )


class AuthConfig(BaseSettings):
    """OAuth client and token locations."""

    model_config = {"env_prefix": "GOOGLE_"}

    credentials_path: Path = Field(
        default=Path("credentials.json"),
        description="OAuth client secrets (installed app) JSON",
    )
    token_path: Path = Field(
        default=Path("token.json"),
        description="Authorized-user token JSON written after consent",
    )
    scopes: list[str] = Field(
        default_factory=lambda: [
            "https://www.googleapis.com/auth/gmail.readonly",
            "https://www.googleapis.com/auth/gmail.modify",
            "https://www.googleapis.com/auth/spreadsheets",
        ],
        description="OAuth scopes requested at consent time",
    )


class ExtractorConfig(BaseSettings):
    """Selectors and deny-lists for the lead field extractor."""

    model_config = {"env_prefix": "EXTRACT_"}

    call_link_marker: str = Field(
        default="call+91-",
        description="Substring of the href identifying a click-to-call link",
    )
    heading_selector: str = Field(
        default='div[style*="font-size:18px"]',
        description="Heading-style container of the buylead template",
    )
    contact_selector: str = Field(
        default='div[style*="color:#000000;line-height:1.5em;"]',
        description="Contact block of the buylead template",
    )
    product_phrases: list[str] = Field(
        default_factory=lambda: ["I need", "I am looking for"],
        description="Introductory phrases preceding the bold product name",
    )
    call_label: str = Field(default="Click to call:", description="Phone row label")
    email_label: str = Field(default="Email:", description="Email row label")
    placeholders: list[str] = Field(
        default_factory=lambda: ["indiamart", "dear user", "n/a"],
        description="Values treated as unknown (case-insensitive)",
    )
    blocked_addresses: list[str] = Field(
        default_factory=lambda: ["buyleads@indiamart.com"],
        description="Platform outbound addresses never taken as the lead email",
    )
    blocked_domains: list[str] = Field(
        default_factory=lambda: ["reply.indiamart.com"],
        description="Domain fragments of platform reply-relay addresses",
    )


class LeadSyncConfig(BaseSettings):
    """Root configuration for one lead sync run.

    Nested configs are populated from their own env-var prefixes.
    """

    model_config = {"env_prefix": "LEADSYNC_"}

    checkpoint_path: Path = Field(
        default=Path("last_run.txt"),
        description="File holding the ISO-8601 timestamp of the last good run",
    )
    bootstrap_hours: float = Field(
        default=48.0,
        description="Look-back window when no checkpoint exists",
    )
    timezone: str = Field(
        default="Asia/Kolkata",
        description="IANA zone for the search date and the row timestamp",
    )
    max_cell_chars: int = Field(
        default=49_999,
        description="Per-cell character ceiling of the lead table",
    )
    log_json: bool = Field(default=True, description="Emit JSON log lines")
    log_level: str = Field(default="INFO", description="Root log level")

    gmail: GmailConfig = Field(default_factory=GmailConfig)
    sheets: SheetsConfig = Field(default_factory=SheetsConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    extractor: ExtractorConfig = Field(default_factory=ExtractorConfig)

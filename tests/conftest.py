"""Shared test fixtures for the leadsync test suite."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from leadsync.config import ExtractorConfig, GmailConfig, LeadSyncConfig, SheetsConfig
from leadsync.extractor import LeadExtractor
from leadsync.models import RawMessage

FIXED_NOW = datetime(2026, 3, 10, 6, 30, tzinfo=UTC)


# ------------------------------------------------------------------
# Sample notification HTML
# ------------------------------------------------------------------


def _buylead_html(
    *,
    product: str = "BOPP Film Rolls",
    name: str = "Rahul Sharma",
    phone: str = "+91-98765-43210",
    email: str = "rahul.sharma@example.com",
) -> str:
    """Heading-style template: product in an 18px div, styled contact block."""
    return f"""
<html><body>
<table><tr><td>
  <div style="font-size:18px;font-weight:bold;color:#2e3192">
    <strong>{product}</strong>
  </div>
  <div style="padding:10px;color:#000000;line-height:1.5em;">{name}<br>
    Ahmedabad, Gujarat<br>
    <a href="https://m.indiamart.com/call+91-{phone[4:]}">{phone}</a><br>
    <a href="mailto:{email}">{email}</a>
  </div>
</td></tr></table>
</body></html>
"""


def _enquiry_html(
    *,
    phrase: str = "I need",
    product: str = "Stretch Film",
    name: str = "Priya Verma",
    phone: str = "+91-99887-76655",
    email: str = "priya.verma@example.in",
) -> str:
    """Enquiry template: bold product in a phrase, labelled table rows."""
    return f"""
<html><body>
<p>Dear Supplier, {phrase} <b>{product}</b> for our packaging unit.</p>
<table>
  <tr><td><span style="font-weight:bold">{name}</span></td></tr>
  <tr><td><span>Mumbai, Maharashtra</span></td></tr>
  <tr><td><span>Click to call: <a href="https://m.indiamart.com/call+91-{phone[4:]}">{phone} (verified)</a></span></td></tr>
  <tr><td><span>Email: <a href="mailto:{email}">{email} (verified)</a></span></td></tr>
</table>
</body></html>
"""


def _unknown_html() -> str:
    return "<html><body><h1>Grow your business</h1><p>Upgrade to a paid plan.</p></body></html>"


def _raw_message(
    *,
    message_id: str = "18c0a1",
    html: str | None = None,
    message_id_header: str | None = "<lead-001@indiamart.com>",
    reply_to: str | None = None,
) -> RawMessage:
    headers: list[tuple[str, str]] = [
        ("From", "IndiaMART <buyleads@indiamart.com>"),
        ("Subject", "Buyer enquiry for Film"),
    ]
    if message_id_header is not None:
        headers.append(("Message-ID", message_id_header))
    if reply_to is not None:
        headers.append(("Reply-To", reply_to))
    return RawMessage(message_id=message_id, html_body=html, headers=headers)


# ------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------


@pytest.fixture
def extractor_config() -> ExtractorConfig:
    return ExtractorConfig()


@pytest.fixture
def extractor(extractor_config: ExtractorConfig) -> LeadExtractor:
    return LeadExtractor(extractor_config)


@pytest.fixture
def sheets_config() -> SheetsConfig:
    return SheetsConfig(spreadsheet_id="sheet-123", sheet_name="Leads")


@pytest.fixture
def gmail_config() -> GmailConfig:
    return GmailConfig(sender="indiamart", subject="film", page_size=2)


@pytest.fixture
def config(
    tmp_path: Path,
    gmail_config: GmailConfig,
    sheets_config: SheetsConfig,
    extractor_config: ExtractorConfig,
) -> LeadSyncConfig:
    return LeadSyncConfig(
        checkpoint_path=tmp_path / "last_run.txt",
        timezone="UTC",
        gmail=gmail_config,
        sheets=sheets_config,
        extractor=extractor_config,
    )


@pytest.fixture
def buylead_html() -> str:
    return _buylead_html()


@pytest.fixture
def enquiry_html() -> str:
    return _enquiry_html()

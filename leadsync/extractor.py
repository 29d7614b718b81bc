"""Best-effort lead field extraction from IndiaMART notification HTML.

Two template layouts are known:

* **buylead** -- the product sits in a heading-style ``div`` (18px font)
  and the buyer's name, phone and mail link share one styled contact
  block underneath.
* **enquiry** -- the product is the bold text of an "I need ..." /
  "I am looking for ..." paragraph and the contact details are laid out
  in table rows labelled "Click to call:" and "Email:".

Anything else is *unknown*: the generic probes (call link, Reply-To
header) still run, the template-specific ones simply miss.

Each field is resolved by an ordered list of probes.  A probe is a pure
function ``(soup, headers) -> str | None``; the first probe returning a
usable value wins.  No probe failure ever escapes :meth:`LeadExtractor.extract`.
"""

from __future__ import annotations

import email.errors
import email.header
import email.utils
import re
from collections.abc import Callable, Sequence

import structlog
from bs4 import BeautifulSoup, ParserRejectedMarkup, Tag

from .config import ExtractorConfig
from .models import ExtractedFields, Headers, Template, header_value

logger = structlog.get_logger()

_VERIFIED_RE = re.compile(r"\s*\(verified\)", re.IGNORECASE)

Probe = Callable[[BeautifulSoup, Headers], "str | None"]


def strip_verification(value: str) -> str:
    """Drop every ``(verified)`` annotation IndiaMART adds to a value."""
    return _VERIFIED_RE.sub("", value).strip()


def _text(node: Tag | None) -> str | None:
    if node is None:
        return None
    return node.get_text(" ", strip=True) or None


def _css_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _decode_words(value: str) -> str:
    try:
        return str(email.header.make_header(email.header.decode_header(value)))
    except (email.errors.HeaderParseError, LookupError, UnicodeDecodeError):
        return value


class LeadExtractor:
    """Stateless extractor: (HTML, headers) -> :class:`ExtractedFields`."""

    def __init__(self, config: ExtractorConfig | None = None) -> None:
        self._config = config or ExtractorConfig()
        self._placeholders = {p.lower() for p in self._config.placeholders}
        self._blocked_addresses = {a.lower() for a in self._config.blocked_addresses}
        self._blocked_domains = [d.lower() for d in self._config.blocked_domains]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def extract(self, html: str, headers: Headers) -> ExtractedFields:
        """Locate name, phone, email and product in one email.

        *headers* are the message headers; Reply-To is the preferred
        name source across all templates.
        """
        try:
            soup = BeautifulSoup(html or "", "html.parser")
        except ParserRejectedMarkup:
            logger.warning("lead_html_rejected", exc_info=True)
            soup = BeautifulSoup("", "html.parser")

        template = Template.UNKNOWN
        product = self._first(self.product_from_heading, soup, headers)
        if product is not None:
            template = Template.BUYLEAD
        else:
            product = self._first(self.product_from_phrase, soup, headers)
            if product is not None:
                template = Template.ENQUIRY

        if template is Template.UNKNOWN:
            logger.warning("lead_template_unrecognized")

        phone = self._first(self.phone_from_call_link, soup, headers)
        name = self._first_usable(
            (self.name_from_reply_to, self.name_from_contact_block, self.name_from_call_row),
            soup,
            headers,
        )
        email_address = self._first_accepted_email(
            (self.email_from_contact_block, self.email_from_label),
            soup,
            headers,
        )

        return ExtractedFields(
            name=self._known(name),
            phone=self._known(phone),
            email=self._known(email_address),
            product=self._known(product),
            template=template,
        )

    # ------------------------------------------------------------------
    # Product probes
    # ------------------------------------------------------------------

    def product_from_heading(self, soup: BeautifulSoup, headers: Headers) -> str | None:
        return _text(soup.select_one(f"{self._config.heading_selector} strong"))

    def product_from_phrase(self, soup: BeautifulSoup, headers: Headers) -> str | None:
        selector = ", ".join(
            f"p:-soup-contains({_css_string(phrase)}) b" for phrase in self._config.product_phrases
        )
        if not selector:
            return None
        return _text(soup.select_one(selector))

    # ------------------------------------------------------------------
    # Phone probe (template-agnostic)
    # ------------------------------------------------------------------

    def phone_from_call_link(self, soup: BeautifulSoup, headers: Headers) -> str | None:
        link = soup.select_one(f"a[href*={_css_string(self._config.call_link_marker)}]")
        value = _text(link)
        return strip_verification(value) if value else None

    # ------------------------------------------------------------------
    # Name probes
    # ------------------------------------------------------------------

    def name_from_reply_to(self, soup: BeautifulSoup, headers: Headers) -> str | None:
        reply_to = header_value(headers, "Reply-To")
        if not reply_to:
            return None
        display_name, _ = email.utils.parseaddr(reply_to)
        return _decode_words(display_name).strip() or None

    def name_from_contact_block(self, soup: BeautifulSoup, headers: Headers) -> str | None:
        block = soup.select_one(self._config.contact_selector)
        if block is None:
            return None
        return next(block.stripped_strings, None)

    def name_from_call_row(self, soup: BeautifulSoup, headers: Headers) -> str | None:
        label = soup.select_one(f"span:-soup-contains({_css_string(self._config.call_label)})")
        if label is None:
            return None
        row = label.find_parent("tr")
        for _ in range(2):
            if row is None:
                return None
            row = row.find_previous_sibling("tr")
        if row is None:
            return None
        return _text(row.find("span"))

    # ------------------------------------------------------------------
    # Email probes
    # ------------------------------------------------------------------

    def email_from_contact_block(self, soup: BeautifulSoup, headers: Headers) -> str | None:
        block = soup.select_one(self._config.contact_selector)
        if block is None:
            return None
        return _text(block.select_one('a[href*="mailto:"]'))

    def email_from_label(self, soup: BeautifulSoup, headers: Headers) -> str | None:
        link = soup.select_one(
            f'span:-soup-contains({_css_string(self._config.email_label)}) a[href*="mailto:"]'
        )
        value = _text(link)
        return strip_verification(value) if value else None

    def is_platform_address(self, address: str) -> bool:
        """True for IndiaMART's own outbound or reply-relay addresses."""
        address = address.strip().lower()
        if address in self._blocked_addresses:
            return True
        domain = address.rpartition("@")[2]
        return any(fragment in domain for fragment in self._blocked_domains)

    # ------------------------------------------------------------------
    # Cascade helpers
    # ------------------------------------------------------------------

    def _first(self, probe: Probe, soup: BeautifulSoup, headers: Headers) -> str | None:
        try:
            value = probe(soup, headers)
        except Exception:
            logger.debug(
                "lead_probe_failed",
                probe=getattr(probe, "__name__", repr(probe)),
                exc_info=True,
            )
            return None
        if value is None:
            return None
        return value.strip() or None

    def _first_usable(
        self,
        probes: Sequence[Probe],
        soup: BeautifulSoup,
        headers: Headers,
    ) -> str | None:
        for probe in probes:
            value = self._first(probe, soup, headers)
            if self._known(value) is not None:
                return value
        return None

    def _first_accepted_email(
        self,
        probes: Sequence[Probe],
        soup: BeautifulSoup,
        headers: Headers,
    ) -> str | None:
        for probe in probes:
            value = self._first(probe, soup, headers)
            if value is None:
                continue
            value = strip_verification(value)
            if self.is_platform_address(value):
                logger.debug("lead_email_rejected", address=value, probe=probe.__name__)
                continue
            if value:
                return value
        return None

    def _known(self, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value or value.lower() in self._placeholders:
            return None
        return value

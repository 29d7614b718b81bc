"""Tests for leadsync.gmail_client."""

from __future__ import annotations

import base64
from unittest.mock import MagicMock, patch

import pytest

from leadsync.config import GmailConfig
from leadsync.gmail_client import GmailClient, find_html_body, message_from_resource


def _b64(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def _mock_service() -> MagicMock:
    return MagicMock()


def _messages(service: MagicMock) -> MagicMock:
    return service.users.return_value.messages.return_value


class TestListMessages:
    @pytest.mark.asyncio
    async def test_follows_pages(self, gmail_config: GmailConfig):
        service = _mock_service()
        _messages(service).list.return_value.execute.side_effect = [
            {"messages": [{"id": "a"}, {"id": "b"}], "nextPageToken": "p2"},
            {"messages": [{"id": "c"}]},
        ]
        client = GmailClient(gmail_config, service=service)

        ids = await client.list_messages("from:indiamart after:2026/03/08")

        assert ids == ["a", "b", "c"]
        calls = _messages(service).list.call_args_list
        assert calls[0].kwargs == {
            "userId": "me",
            "q": "from:indiamart after:2026/03/08",
            "maxResults": 2,
        }
        assert calls[1].kwargs["pageToken"] == "p2"

    @pytest.mark.asyncio
    async def test_no_results(self, gmail_config: GmailConfig):
        service = _mock_service()
        _messages(service).list.return_value.execute.return_value = {"resultSizeEstimate": 0}
        client = GmailClient(gmail_config, service=service)
        assert await client.list_messages("q") == []

    @pytest.mark.asyncio
    async def test_errors_propagate(self, gmail_config: GmailConfig):
        service = _mock_service()
        _messages(service).list.return_value.execute.side_effect = OSError("reset")
        client = GmailClient(gmail_config, service=service)
        with pytest.raises(OSError):
            await client.list_messages("q")


class TestGetMessage:
    @pytest.mark.asyncio
    async def test_decodes_headers_and_html(self, gmail_config: GmailConfig):
        service = _mock_service()
        _messages(service).get.return_value.execute.return_value = {
            "id": "18c0a1",
            "payload": {
                "mimeType": "multipart/alternative",
                "headers": [
                    {"name": "Message-ID", "value": "<lead@indiamart.com>"},
                    {"name": "Reply-To", "value": "Rahul <r@reply.indiamart.com>"},
                ],
                "parts": [
                    {"mimeType": "text/plain", "body": {"data": _b64("plain")}},
                    {"mimeType": "text/html", "body": {"data": _b64("<b>héllo</b>")}},
                ],
            },
        }
        client = GmailClient(gmail_config, service=service)

        msg = await client.get_message("18c0a1")

        _messages(service).get.assert_called_once_with(userId="me", id="18c0a1", format="full")
        assert msg.message_id == "18c0a1"
        assert msg.html_body == "<b>héllo</b>"
        assert msg.header("message-id") == "<lead@indiamart.com>"


class TestMarkRead:
    @pytest.mark.asyncio
    async def test_removes_unread_label(self, gmail_config: GmailConfig):
        service = _mock_service()
        client = GmailClient(gmail_config, service=service)
        await client.mark_read("m1")
        _messages(service).modify.assert_called_once_with(
            userId="me",
            id="m1",
            body={"removeLabelIds": ["UNREAD"]},
        )
        _messages(service).modify.return_value.execute.assert_called_once()


class TestServiceConstruction:
    def test_builds_lazily_with_credentials(self, gmail_config: GmailConfig):
        creds = object()
        client = GmailClient(gmail_config, creds)
        with patch("leadsync.gmail_client.build") as mock_build:
            client._messages()
            client._messages()
        mock_build.assert_called_once_with("gmail", "v1", credentials=creds, cache_discovery=False)


class TestFindHtmlBody:
    def test_single_part_html(self):
        payload = {"mimeType": "text/html", "body": {"data": _b64("<p>x</p>")}}
        assert find_html_body(payload) == "<p>x</p>"

    def test_single_part_plain_is_none(self):
        payload = {"mimeType": "text/plain", "body": {"data": _b64("x")}}
        assert find_html_body(payload) is None

    def test_nested_multipart(self):
        payload = {
            "mimeType": "multipart/mixed",
            "parts": [
                {
                    "mimeType": "multipart/alternative",
                    "parts": [
                        {"mimeType": "text/plain", "body": {"data": _b64("t")}},
                        {"mimeType": "text/html", "body": {"data": _b64("<i>nested</i>")}},
                    ],
                },
                {"mimeType": "application/pdf", "body": {"attachmentId": "att-1"}},
            ],
        }
        assert find_html_body(payload) == "<i>nested</i>"

    def test_no_body(self):
        assert find_html_body({"mimeType": "text/html", "body": {"size": 0}}) is None

    def test_message_without_payload(self):
        msg = message_from_resource({"id": "x"})
        assert msg.html_body is None
        assert msg.headers == []

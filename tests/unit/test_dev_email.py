"""
Unit tests for DevEmailAdapter.

Tests cover:
1. Status is SKIPPED (not SENT)
2. Emails are kept in memory for inspection
3. Logged output carries the confirmation link
"""

import logging

from optin.adapters.dev_email import DevEmailAdapter
from optin.core.ports.email import EmailMessage, EmailStatus


class TestDevEmailAdapterSend:
    def test_send_returns_skipped_status(self) -> None:
        adapter = DevEmailAdapter()

        result = adapter.send_email(
            recipient="user@example.com",
            subject="Test Subject",
            body_html="<p>Test body</p>",
            body_text="Test body",
        )

        assert result.status == EmailStatus.SKIPPED
        assert result.message_id.startswith("dev-")

    def test_send_uses_default_sender(self) -> None:
        adapter = DevEmailAdapter(sender="newsletter@example.com")

        adapter.send(EmailMessage("user@example.com", "Hi", "<p>Hi</p>", "Hi"))

        assert adapter.get_last_email().sender == "newsletter@example.com"

    def test_message_sender_wins(self) -> None:
        adapter = DevEmailAdapter(sender="newsletter@example.com")

        adapter.send(EmailMessage("user@example.com", "Hi", "<p>Hi</p>", "Hi", sender="me@example.com"))

        assert adapter.get_last_email().sender == "me@example.com"


class TestDevEmailAdapterHelpers:
    def test_emails_stored_in_order(self) -> None:
        adapter = DevEmailAdapter()
        assert adapter.get_last_email() is None

        adapter.send_email("a@example.com", "First", "<p>1</p>", "1")
        adapter.send_email("b@example.com", "Second", "<p>2</p>", "2")

        assert adapter.email_count == 2
        assert [e.recipient for e in adapter.sent_emails] == ["a@example.com", "b@example.com"]
        assert adapter.get_last_email().subject == "Second"


class TestDevEmailAdapterLogging:
    def test_logs_text_body(self, caplog) -> None:
        adapter = DevEmailAdapter()
        link = "http://testserver/subscriptions/confirm?subscription_token=abc"

        with caplog.at_level(logging.INFO, logger="optin.adapters.dev_email"):
            adapter.send_email("user@example.com", "Confirm", "<p>x</p>", f"Visit {link}")

        assert "To=user@example.com" in caplog.text
        assert link in caplog.text

    def test_body_omitted_when_disabled(self, caplog) -> None:
        adapter = DevEmailAdapter(log_body=False)

        with caplog.at_level(logging.INFO, logger="optin.adapters.dev_email"):
            adapter.send_email("user@example.com", "Confirm", "<p>x</p>", "secret-link")

        assert "secret-link" not in caplog.text

    def test_long_body_truncated(self, caplog) -> None:
        adapter = DevEmailAdapter(body_preview_length=10)

        with caplog.at_level(logging.INFO, logger="optin.adapters.dev_email"):
            adapter.send_email("user@example.com", "Confirm", "<p>x</p>", "0123456789ABCDEF")

        assert "Body=0123456789..." in caplog.text
        assert "ABCDEF" not in caplog.text

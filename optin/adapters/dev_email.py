"""
Dev Email Adapter (EmailPort Implementation).

Logs emails to console instead of sending.
Used when the provider is disabled in configuration (local development).

Key behaviors:
- Logs email details to console
- Returns SKIPPED status (not SENT)
- Stores emails in memory for inspection
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from optin.core.ports.email import EmailMessage, EmailResult


logger = logging.getLogger(__name__)


@dataclass
class SentEmail:
    """Record of a logged email."""

    id: str
    recipient: str
    subject: str
    body_html: str
    body_text: str
    sender: str | None
    logged_at: datetime


@dataclass
class DevEmailAdapter:
    """
    Dev email adapter that logs instead of sending.

    Implements EmailPort protocol.
    """

    sender: str = "noreply@localhost"
    sent_emails: list[SentEmail] = field(default_factory=list)

    # Configuration
    log_level: int = logging.INFO
    log_body: bool = True  # Whether to log body content
    body_preview_length: int = 200  # Max chars of text body to log

    def send_email(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        body_text: str,
    ) -> EmailResult:
        """Log an email from the default sender."""
        return self.send(
            EmailMessage(
                recipient=recipient,
                subject=subject,
                body_html=body_html,
                body_text=body_text,
            )
        )

    def send(self, message: EmailMessage) -> EmailResult:
        """
        Log a structured email message.

        Args:
            message: Complete email message

        Returns:
            EmailResult with SKIPPED status
        """
        message_id = f"dev-{uuid4().hex[:12]}"
        sender = message.sender or self.sender

        self.sent_emails.append(
            SentEmail(
                id=message_id,
                recipient=message.recipient,
                subject=message.subject,
                body_html=message.body_html,
                body_text=message.body_text,
                sender=sender,
                logged_at=datetime.now(UTC),
            )
        )

        parts = [
            f"EMAIL (dev): To={message.recipient}",
            f"From={sender}",
            f"Subject={message.subject}",
        ]
        if self.log_body:
            # The text body carries the confirmation link in full
            preview = message.body_text[: self.body_preview_length]
            if len(message.body_text) > self.body_preview_length:
                preview += "..."
            parts.append(f"Body={preview}")
        parts.append(f"MessageID={message_id}")
        logger.log(self.log_level, ", ".join(parts))

        return EmailResult.skipped(message.recipient, message_id)

    def get_last_email(self) -> SentEmail | None:
        """Get the most recently logged email."""
        return self.sent_emails[-1] if self.sent_emails else None

    @property
    def email_count(self) -> int:
        """Get the number of logged emails."""
        return len(self.sent_emails)

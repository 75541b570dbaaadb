"""
Email Adapter Interface.

Protocol-based interface for sending transactional emails.
Used by the onboarding pipeline for confirmation emails.

Implementation strategies:
1. EmailDeliveryClient: HTTP POST to the transactional-email provider
2. DevEmailAdapter: Logs emails to console (dev/test)

Both implement the same EmailPort interface.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Protocol


class EmailStatus(Enum):
    """Email send result status."""

    SENT = "sent"
    SKIPPED = "skipped"  # Dev adapter or dry-run


@dataclass(frozen=True)
class EmailMessage:
    """
    Email message to be sent.

    Carries both an HTML and a plain text body; the provider requires both.
    """

    recipient: str
    subject: str
    body_html: str
    body_text: str
    sender: str | None = None  # None = use default sender

    def __post_init__(self) -> None:
        """Validate email message."""
        if not self.recipient:
            raise ValueError("Recipient email is required")
        if not self.subject:
            raise ValueError("Subject is required")
        if not self.body_html or not self.body_text:
            raise ValueError("Both body_html and body_text are required")


@dataclass
class EmailResult:
    """Result of a successful send attempt."""

    status: EmailStatus
    recipient: str
    message_id: str | None = None  # Provider's message ID
    sent_at: datetime | None = None

    @classmethod
    def success(cls, recipient: str, message_id: str | None = None) -> EmailResult:
        """Create a successful send result."""
        return cls(
            status=EmailStatus.SENT,
            recipient=recipient,
            message_id=message_id,
            sent_at=datetime.now(UTC),
        )

    @classmethod
    def skipped(cls, recipient: str, message_id: str | None = None) -> EmailResult:
        """Create a skipped result (dev adapter)."""
        return cls(
            status=EmailStatus.SKIPPED,
            recipient=recipient,
            message_id=message_id,
        )


class EmailPort(Protocol):
    """
    Email sending interface.

    Implementations:
    - EmailDeliveryClient: Sends via the provider's HTTP API
    - DevEmailAdapter: Logs to console (dev/test)

    Failures raise DeliveryError; implementations never retry.
    """

    def send_email(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        body_text: str,
    ) -> EmailResult:
        """
        Send a transactional email from the default sender.

        Args:
            recipient: Email address of recipient
            subject: Email subject line
            body_html: HTML body content
            body_text: Plain text body

        Returns:
            EmailResult with send outcome

        Raises:
            DeliveryError: transport failure, timeout, or non-2xx response
        """
        ...

    def send(self, message: EmailMessage) -> EmailResult:
        """
        Send an email message with full options.

        Args:
            message: Complete email message

        Returns:
            EmailResult with send outcome
        """
        ...


# --- Error Types ---


class DeliveryError(Exception):
    """Base exception for email delivery failures."""

    def __init__(self, recipient: str, reason: str) -> None:
        self.recipient = recipient
        self.reason = reason
        super().__init__(f"Failed to send email to {recipient}: {reason}")


class DeliveryTransportError(DeliveryError):
    """Provider unreachable: connection failure or timeout."""

    def __init__(self, recipient: str, reason: str, timed_out: bool = False) -> None:
        self.timed_out = timed_out
        super().__init__(recipient, reason)


class DeliveryRejectedError(DeliveryError):
    """Provider answered with a non-2xx status."""

    def __init__(self, recipient: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(recipient, f"provider responded with HTTP {status_code}")


# Default confirmation email subject
DEFAULT_CONFIRMATION_SUBJECT = "Confirm your subscription to {site_name}"

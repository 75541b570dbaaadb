"""
Onboarding component models.

Data models for the double opt-in subscription flow.

State machine: Subscriber (pending_confirmation → confirmed)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID

# --- State Machine ---


class SubscriberStatus(Enum):
    """
    Subscriber status.

    State transitions:
    - pending_confirmation → confirmed (via confirmation link)
    """

    PENDING_CONFIRMATION = "pending_confirmation"  # Awaiting email confirmation
    CONFIRMED = "confirmed"  # Email confirmed, active subscriber


# Valid state transitions
VALID_TRANSITIONS: dict[SubscriberStatus, set[SubscriberStatus]] = {
    SubscriberStatus.PENDING_CONFIRMATION: {SubscriberStatus.CONFIRMED},
    SubscriberStatus.CONFIRMED: set(),  # Terminal state
}


def can_transition(from_status: SubscriberStatus, to_status: SubscriberStatus) -> bool:
    """Check if state transition is valid."""
    return to_status in VALID_TRANSITIONS.get(from_status, set())


# --- Entities ---


@dataclass
class Subscriber:
    """
    Mailing list subscriber entity.

    Keyed by email; the id never changes once assigned.
    """

    id: UUID
    email: str
    name: str
    status: SubscriberStatus = SubscriberStatus.PENDING_CONFIRMATION
    subscribed_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class ConfirmationToken:
    """One active token per subscriber; a new one supersedes the old."""

    token: str
    subscriber_id: UUID
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


# --- Input Models ---


@dataclass(frozen=True)
class OnboardInput:
    """Raw form submission. Either field may be missing."""

    name: str | None
    email: str | None


@dataclass(frozen=True)
class ConfirmInput:
    """Input for confirming a subscription."""

    token: str | None


# --- Output Models ---


@dataclass(frozen=True)
class ValidatedSubscriber:
    """Normalized name/email pair that passed validation."""

    name: str
    email: str


@dataclass(frozen=True)
class OnboardOutput:
    """Outcome of a successful onboarding call."""

    subscriber_id: UUID
    token: str | None = None  # None when already confirmed
    already_confirmed: bool = False
    message_id: str | None = None  # Provider message id of the confirmation email


@dataclass(frozen=True)
class ConfirmOutput:
    """Outcome of a successful confirmation."""

    subscriber_id: UUID
    already_confirmed: bool = False  # Idempotent success


# --- Configuration ---


@dataclass(frozen=True)
class OnboardingConfig:
    """Onboarding pipeline configuration."""

    base_url: str = "http://127.0.0.1:8000"
    confirmation_path: str = "/subscriptions/confirm"
    site_name: str = "Our Newsletter"
    token_length: int = 32  # Bytes of randomness before url-safe encoding
    max_name_length: int = 256


# --- Error Types ---


class OnboardingError(Exception):
    """Base onboarding error. The variants below are the complete set."""

    pass


class InvalidInputError(OnboardingError):
    """Submitted name or email is malformed. Nothing was written."""

    def __init__(self, field: str, code: str, message: str) -> None:
        self.field = field
        self.code = code
        self.message = message
        super().__init__(f"Invalid {field}: {message}")


class TokenNotFoundError(OnboardingError):
    """Confirmation token is unknown or has been superseded."""

    def __init__(self) -> None:
        super().__init__("Confirmation token not found")


class SubscriptionStorageError(OnboardingError):
    """The store could not complete the transaction. Nothing was committed."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Storage failure during {operation}")


class ConfirmationDeliveryError(OnboardingError):
    """
    Confirmation email could not be delivered.

    The subscriber and token rows are already committed; a resubmission
    issues a new token and email.
    """

    def __init__(self, subscriber_id: UUID, reason: str) -> None:
        self.subscriber_id = subscriber_id
        self.reason = reason
        super().__init__(f"Confirmation email for subscriber {subscriber_id} failed: {reason}")

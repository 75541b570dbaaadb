"""
Onboarding component.

Functional core for double opt-in subscriptions.

Key behaviors:
- Validation happens before any write
- Subscriber upsert and token replacement share one transaction
- The confirmation email is dispatched only after that transaction commits
- Delivery failure keeps the committed rows (resubmission resends)
- Status never moves backward; confirmed subscribers are left untouched
"""

from __future__ import annotations

import html
import logging
import re
import secrets
import unicodedata
from urllib.parse import urlencode
from uuid import uuid4

from optin.components.onboarding.models import (
    ConfirmationDeliveryError,
    ConfirmationToken,
    ConfirmInput,
    ConfirmOutput,
    InvalidInputError,
    OnboardingConfig,
    OnboardInput,
    OnboardOutput,
    Subscriber,
    SubscriberStatus,
    SubscriptionStorageError,
    TokenNotFoundError,
    ValidatedSubscriber,
    can_transition,
)
from optin.components.onboarding.ports import UnitOfWorkFactory
from optin.core.ports.db import StorageError
from optin.core.ports.email import (
    DEFAULT_CONFIRMATION_SUBJECT,
    DeliveryError,
    EmailMessage,
    EmailPort,
)

logger = logging.getLogger(__name__)

# --- Email Validation Regex (RFC 5322 simplified) ---

EMAIL_REGEX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@"
    r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)

MAX_EMAIL_LENGTH = 254

FORBIDDEN_NAME_CHARACTERS = frozenset('/()"<>\\{}')

CONFIRMATION_TOKEN_PARAM = "subscription_token"


# --- Pure Functions (Functional Core) ---


def validate_email(email: str | None) -> str:
    """
    Validate and normalize an email address.

    Returns:
        Trimmed, lower-cased address

    Raises:
        InvalidInputError: missing, empty, too long or malformed
    """
    if email is None:
        raise InvalidInputError("email", "MISSING_FIELD", "Email address is required")

    normalized = email.strip().lower()
    if not normalized:
        raise InvalidInputError("email", "EMPTY_EMAIL", "Email address is required")
    if len(normalized) > MAX_EMAIL_LENGTH:
        raise InvalidInputError("email", "EMAIL_TOO_LONG", "Email address is too long")
    if not EMAIL_REGEX.match(normalized):
        raise InvalidInputError("email", "INVALID_FORMAT", "Invalid email format")
    return normalized


def validate_name(name: str | None, max_length: int = 256) -> str:
    """
    Validate a subscriber display name.

    Raises:
        InvalidInputError: missing, blank, too long, or containing
            control or forbidden characters
    """
    if name is None:
        raise InvalidInputError("name", "MISSING_FIELD", "Name is required")

    trimmed = name.strip()
    if not trimmed:
        raise InvalidInputError("name", "EMPTY_NAME", "Name is required")
    if len(trimmed) > max_length:
        raise InvalidInputError("name", "NAME_TOO_LONG", f"Name exceeds {max_length} characters")
    for char in trimmed:
        if char in FORBIDDEN_NAME_CHARACTERS or unicodedata.category(char) == "Cc":
            raise InvalidInputError("name", "FORBIDDEN_CHARACTER", "Name contains forbidden characters")
    return trimmed


def validate_subscriber(inp: OnboardInput, max_name_length: int = 256) -> ValidatedSubscriber:
    """Validate a raw form submission. Email is checked first."""
    email = validate_email(inp.email)
    name = validate_name(inp.name, max_name_length)
    return ValidatedSubscriber(name=name, email=email)


def generate_token(length: int = 32) -> str:
    """
    Generate a cryptographically secure URL-safe token.

    Args:
        length: Number of random bytes (will be base64-encoded)
    """
    return secrets.token_urlsafe(length)


def build_confirmation_url(
    base_url: str,
    token: str,
    path: str = "/subscriptions/confirm",
) -> str:
    """
    Build the absolute confirmation URL for the email.

    Args:
        base_url: Public base URL of the service
        token: Confirmation token
        path: URL path of the confirmation endpoint
    """
    base = base_url.rstrip("/")
    return f"{base}{path}?{urlencode({CONFIRMATION_TOKEN_PARAM: token})}"


def render_confirmation_email(
    recipient: str,
    confirmation_url: str,
    site_name: str,
) -> EmailMessage:
    """Compose the confirmation email. Both bodies carry the same URL."""
    safe_site_name = html.escape(site_name)
    body_html = (
        f"<p>Welcome to {safe_site_name}!</p>"
        f'<p>Click <a href="{confirmation_url}">here</a> to confirm your subscription.</p>'
    )
    body_text = (
        f"Welcome to {site_name}!\n"
        f"Visit {confirmation_url} to confirm your subscription."
    )
    return EmailMessage(
        recipient=recipient,
        subject=DEFAULT_CONFIRMATION_SUBJECT.format(site_name=site_name),
        body_html=body_html,
        body_text=body_text,
    )


def create_subscriber(validated: ValidatedSubscriber) -> Subscriber:
    """Create a new subscriber in pending status."""
    return Subscriber(
        id=uuid4(),
        email=validated.email,
        name=validated.name,
        status=SubscriberStatus.PENDING_CONFIRMATION,
    )


def confirm_subscriber(subscriber: Subscriber) -> Subscriber:
    """Return a copy of the subscriber with confirmed status."""
    return Subscriber(
        id=subscriber.id,
        email=subscriber.email,
        name=subscriber.name,
        status=SubscriberStatus.CONFIRMED,
        subscribed_at=subscriber.subscribed_at,
    )


# --- Run Handlers ---


def run_onboard(
    inp: OnboardInput,
    *,
    uow_factory: UnitOfWorkFactory,
    email_sender: EmailPort,
    config: OnboardingConfig | None = None,
) -> OnboardOutput:
    """
    Handle a subscription form submission.

    Raises:
        InvalidInputError: before any write
        SubscriptionStorageError: nothing was committed
        ConfirmationDeliveryError: rows committed, email not delivered
    """
    cfg = config or OnboardingConfig()

    validated = validate_subscriber(inp, cfg.max_name_length)

    # Persist subscriber + token atomically
    try:
        with uow_factory() as uow:
            existing = uow.subscriptions.get_by_email(validated.email)
            if existing and existing.status == SubscriberStatus.CONFIRMED:
                logger.info("Subscriber %s already confirmed; nothing to do", existing.id)
                return OnboardOutput(subscriber_id=existing.id, already_confirmed=True)

            if existing:
                candidate = Subscriber(
                    id=existing.id,
                    email=existing.email,
                    name=validated.name,
                    status=existing.status,
                    subscribed_at=existing.subscribed_at,
                )
            else:
                candidate = create_subscriber(validated)
            subscriber = uow.subscriptions.save(candidate)

            token = uow.tokens.replace_for_subscriber(
                ConfirmationToken(
                    token=generate_token(cfg.token_length),
                    subscriber_id=subscriber.id,
                )
            )
            uow.commit()
    except StorageError as e:
        logger.error("Failed to store pending subscriber: %s", e)
        raise SubscriptionStorageError("onboarding") from e

    logger.info("Stored pending subscriber %s", subscriber.id)

    # Compose and dispatch (token is durable at this point)
    url = build_confirmation_url(cfg.base_url, token.token, cfg.confirmation_path)
    message = render_confirmation_email(subscriber.email, url, cfg.site_name)
    try:
        result = email_sender.send(message)
    except DeliveryError as e:
        logger.error(
            "Confirmation email for subscriber %s failed: %s", subscriber.id, e.reason
        )
        raise ConfirmationDeliveryError(subscriber.id, e.reason) from e

    return OnboardOutput(
        subscriber_id=subscriber.id,
        token=token.token,
        message_id=result.message_id,
    )


def run_confirm(
    inp: ConfirmInput,
    *,
    uow_factory: UnitOfWorkFactory,
) -> ConfirmOutput:
    """
    Handle a confirmation link click.

    Raises:
        InvalidInputError: token missing
        TokenNotFoundError: unknown or superseded token; nothing changes
        SubscriptionStorageError: store fault
    """
    if not inp.token:
        raise InvalidInputError(
            CONFIRMATION_TOKEN_PARAM, "MISSING_TOKEN", "Confirmation token is required"
        )

    try:
        with uow_factory() as uow:
            token = uow.tokens.get(inp.token)
            subscriber = uow.subscriptions.get_by_id(token.subscriber_id) if token else None
            if subscriber is None:
                raise TokenNotFoundError()

            # Check if already confirmed (idempotent)
            if not can_transition(subscriber.status, SubscriberStatus.CONFIRMED):
                return ConfirmOutput(subscriber_id=subscriber.id, already_confirmed=True)

            uow.subscriptions.save(confirm_subscriber(subscriber))
            uow.commit()
    except StorageError as e:
        logger.error("Failed to confirm subscriber: %s", e)
        raise SubscriptionStorageError("confirmation") from e

    logger.info("Subscriber %s confirmed", subscriber.id)
    return ConfirmOutput(subscriber_id=subscriber.id)


def run(
    inp: OnboardInput | ConfirmInput,
    *,
    uow_factory: UnitOfWorkFactory,
    email_sender: EmailPort | None = None,
    config: OnboardingConfig | None = None,
) -> OnboardOutput | ConfirmOutput:
    """
    Main component entry point.

    Args:
        inp: Input command
        uow_factory: Creates one unit of work per call (Required)
        email_sender: Email port (Required for OnboardInput)
        config: Configuration (Optional)

    Returns:
        Operation result
    """
    if isinstance(inp, OnboardInput):
        if email_sender is None:
            raise ValueError("email_sender is required for onboarding")
        return run_onboard(
            inp,
            uow_factory=uow_factory,
            email_sender=email_sender,
            config=config,
        )
    elif isinstance(inp, ConfirmInput):
        return run_confirm(inp, uow_factory=uow_factory)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")

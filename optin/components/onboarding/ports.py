"""
Onboarding component ports.

Protocol interfaces for onboarding pipeline dependencies.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol
from uuid import UUID

from optin.components.onboarding.models import (
    ConfirmationToken,
    Subscriber,
    SubscriberStatus,
)
from optin.core.ports.db import UnitOfWorkPort


class SubscriptionRepoPort(Protocol):
    """
    Subscriber repository interface.

    Abstracts data persistence for subscribers, keyed by email.
    """

    def get_by_id(self, subscriber_id: UUID) -> Subscriber | None:
        """Get subscriber by ID."""
        ...

    def get_by_email(self, email: str) -> Subscriber | None:
        """Get subscriber by normalized email address."""
        ...

    def save(self, subscriber: Subscriber) -> Subscriber:
        """
        Insert or update a subscriber keyed by email.

        Returns the stored subscriber. When a row with the same email
        already exists its id is kept and returned.
        """
        ...

    def count_by_status(self, status: SubscriberStatus) -> int:
        """Count subscribers by status."""
        ...


class SubscriptionTokenRepoPort(Protocol):
    """Confirmation token repository interface."""

    def replace_for_subscriber(self, token: ConfirmationToken) -> ConfirmationToken:
        """Store token as the only active token of its subscriber."""
        ...

    def get(self, token: str) -> ConfirmationToken | None:
        """Resolve a token string to its stored record."""
        ...


class OnboardingUnitOfWorkPort(UnitOfWorkPort, Protocol):
    """Transaction exposing the repositories the pipeline writes to."""

    subscriptions: SubscriptionRepoPort
    tokens: SubscriptionTokenRepoPort

    def __enter__(self) -> OnboardingUnitOfWorkPort:
        ...


# A fresh unit of work per pipeline call
UnitOfWorkFactory = Callable[[], OnboardingUnitOfWorkPort]

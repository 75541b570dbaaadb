"""
Onboarding error → HTTP mapping.

Every OnboardingError variant maps to exactly one status code and one
client-facing message. Server faults get a generic message; the detail
stays in the logs.
"""

from __future__ import annotations

from fastapi import HTTPException, status

from optin.components.onboarding.models import (
    ConfirmationDeliveryError,
    InvalidInputError,
    OnboardingError,
    SubscriptionStorageError,
    TokenNotFoundError,
)


def status_code_for(error: OnboardingError) -> int:
    """Total mapping from error variant to HTTP status code."""
    if isinstance(error, InvalidInputError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, TokenNotFoundError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(error, SubscriptionStorageError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    if isinstance(error, ConfirmationDeliveryError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    raise TypeError(f"Unmapped onboarding error: {type(error).__name__}")


def detail_for(error: OnboardingError) -> str:
    """Client-facing message for an error variant."""
    if isinstance(error, InvalidInputError):
        return error.message
    if isinstance(error, TokenNotFoundError):
        return "Invalid or expired confirmation link"
    return "Something went wrong. Please try again later."


def to_http_exception(error: OnboardingError) -> HTTPException:
    return HTTPException(status_code=status_code_for(error), detail=detail_for(error))

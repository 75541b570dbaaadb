"""
Subscription endpoints.

Endpoints:
- POST /subscriptions - Start the double opt-in flow (form-encoded name, email)
- GET /subscriptions/confirm - Confirm via the emailed link
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Form
from pydantic import BaseModel, Field

from optin.api.deps import (
    get_email_sender,
    get_onboarding_config,
    get_uow_factory,
)
from optin.api.errors import to_http_exception
from optin.components.onboarding.component import run
from optin.components.onboarding.models import (
    ConfirmInput,
    OnboardingConfig,
    OnboardingError,
    OnboardInput,
)
from optin.components.onboarding.ports import UnitOfWorkFactory
from optin.core.ports.email import EmailPort

router = APIRouter()


# --- Response Models ---


class SubscribeResponse(BaseModel):
    """Response for subscription request."""

    success: bool = Field(..., description="Whether the request was processed successfully")
    message: str = Field(..., description="Human-readable message")


class ConfirmResponse(BaseModel):
    """Response for confirmation request."""

    success: bool
    message: str


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str


# --- Subscribe Endpoint ---


@router.post(
    "/subscriptions",
    response_model=SubscribeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid or missing name/email"},
        500: {"model": ErrorResponse, "description": "Storage or email delivery failure"},
    },
    summary="Subscribe to the mailing list",
    description="Store a pending subscriber and send the confirmation email.",
)
def subscribe(
    name: str | None = Form(None),
    email: str | None = Form(None),
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    email_sender: EmailPort = Depends(get_email_sender),
    config: OnboardingConfig = Depends(get_onboarding_config),
) -> SubscribeResponse:
    """
    Subscribe to the mailing list.

    Missing fields are validated by the component so they surface as
    400, not FastAPI's default 422.
    """
    try:
        run(
            OnboardInput(name=name, email=email),
            uow_factory=uow_factory,
            email_sender=email_sender,
            config=config,
        )
    except OnboardingError as e:
        raise to_http_exception(e) from e

    # Same message whether or not the address was already confirmed
    return SubscribeResponse(
        success=True,
        message="Please check your email to confirm your subscription",
    )


# --- Confirm Endpoint ---


@router.get(
    "/subscriptions/confirm",
    response_model=ConfirmResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing token"},
        401: {"model": ErrorResponse, "description": "Unknown or superseded token"},
    },
    summary="Confirm a subscription",
    description="Confirm subscription via token from the confirmation email.",
)
def confirm(
    subscription_token: str | None = None,
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ConfirmResponse:
    """Confirm a pending subscription. Idempotent for confirmed subscribers."""
    try:
        result = run(ConfirmInput(token=subscription_token), uow_factory=uow_factory)
    except OnboardingError as e:
        raise to_http_exception(e) from e

    if getattr(result, "already_confirmed", False):
        return ConfirmResponse(success=True, message="Your subscription was already confirmed")

    return ConfirmResponse(success=True, message="Your subscription is now confirmed. Welcome!")

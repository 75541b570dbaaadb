"""
Onboarding component.

Double opt-in subscription pipeline: validate, persist pending subscriber
and token, then send the confirmation email.
"""

from optin.components.onboarding.component import (
    EMAIL_REGEX,
    build_confirmation_url,
    confirm_subscriber,
    create_subscriber,
    generate_token,
    render_confirmation_email,
    run,
    run_confirm,
    run_onboard,
    validate_email,
    validate_name,
    validate_subscriber,
)
from optin.components.onboarding.models import (
    VALID_TRANSITIONS,
    ConfirmationDeliveryError,
    ConfirmationToken,
    ConfirmInput,
    ConfirmOutput,
    InvalidInputError,
    OnboardingConfig,
    OnboardingError,
    OnboardInput,
    OnboardOutput,
    Subscriber,
    SubscriberStatus,
    SubscriptionStorageError,
    TokenNotFoundError,
    ValidatedSubscriber,
    can_transition,
)
from optin.components.onboarding.ports import (
    OnboardingUnitOfWorkPort,
    SubscriptionRepoPort,
    SubscriptionTokenRepoPort,
    UnitOfWorkFactory,
)

__all__ = [
    # Component
    "run",
    "run_onboard",
    "run_confirm",
    # Pure functions
    "validate_email",
    "validate_name",
    "validate_subscriber",
    "generate_token",
    "build_confirmation_url",
    "render_confirmation_email",
    "create_subscriber",
    "confirm_subscriber",
    # Constants
    "EMAIL_REGEX",
    # Models
    "Subscriber",
    "SubscriberStatus",
    "ConfirmationToken",
    "VALID_TRANSITIONS",
    "can_transition",
    "OnboardingConfig",
    # Input/Output
    "OnboardInput",
    "OnboardOutput",
    "ConfirmInput",
    "ConfirmOutput",
    "ValidatedSubscriber",
    # Errors
    "OnboardingError",
    "InvalidInputError",
    "TokenNotFoundError",
    "SubscriptionStorageError",
    "ConfirmationDeliveryError",
    # Ports
    "SubscriptionRepoPort",
    "SubscriptionTokenRepoPort",
    "OnboardingUnitOfWorkPort",
    "UnitOfWorkFactory",
]

from functools import lru_cache

from fastapi import Depends

from optin.adapters.auth.session_store import InMemorySessionStore
from optin.adapters.dev_email import DevEmailAdapter
from optin.adapters.http_email import EmailDeliveryClient, create_email_delivery_client
from optin.adapters.sqlite_db import SQLiteSubscriptionRepo, SQLiteUnitOfWork
from optin.app_shell.config import Settings, load_settings
from optin.components.onboarding.models import OnboardingConfig
from optin.components.onboarding.ports import UnitOfWorkFactory
from optin.core.ports.email import EmailPort


# --- Settings ---
@lru_cache
def get_settings() -> Settings:
    return load_settings()


def get_onboarding_config(settings: Settings = Depends(get_settings)) -> OnboardingConfig:
    return OnboardingConfig(
        base_url=settings.application.base_url,
        confirmation_path=settings.application.confirmation_path,
        site_name=settings.application.site_name,
    )


# --- Repos ---
def get_uow_factory(settings: Settings = Depends(get_settings)) -> UnitOfWorkFactory:
    db = settings.database
    return lambda: SQLiteUnitOfWork(db.path, timeout=db.timeout_seconds)


def get_subscription_repo(settings: Settings = Depends(get_settings)) -> SQLiteSubscriptionRepo:
    return SQLiteSubscriptionRepo(settings.database.path, timeout=settings.database.timeout_seconds)


# --- Email ---
# One client per process so requests share the HTTP connection pool
_email_sender_instance: EmailDeliveryClient | DevEmailAdapter | None = None


def build_email_sender(settings: Settings) -> EmailDeliveryClient | DevEmailAdapter:
    email = settings.email_client
    if not email.enabled:
        return DevEmailAdapter(sender=email.sender_email)
    return create_email_delivery_client(
        base_url=email.base_url,
        sender=email.sender_email,
        authorization_token=email.authorization_token,
        timeout_milliseconds=email.timeout_milliseconds,
    )


def get_email_sender(settings: Settings = Depends(get_settings)) -> EmailPort:
    """Get email sender singleton."""
    global _email_sender_instance
    if _email_sender_instance is None:
        _email_sender_instance = build_email_sender(settings)
    return _email_sender_instance


def close_email_sender() -> None:
    """Release the email client's connections (app shutdown)."""
    global _email_sender_instance
    if isinstance(_email_sender_instance, EmailDeliveryClient):
        _email_sender_instance.close()
    _email_sender_instance = None


# --- Sessions ---
_session_store_instance: InMemorySessionStore | None = None


def get_session_store() -> InMemorySessionStore:
    """Get session store singleton."""
    global _session_store_instance
    if _session_store_instance is None:
        _session_store_instance = InMemorySessionStore()
    return _session_store_instance

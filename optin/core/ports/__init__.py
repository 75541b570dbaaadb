# optin: Ports (Protocol Interfaces)
# Abstract interfaces for adapters; no implementations here

from optin.core.ports.db import StorageError, UnitOfWorkPort
from optin.core.ports.email import (
    DeliveryError,
    DeliveryRejectedError,
    DeliveryTransportError,
    EmailMessage,
    EmailPort,
    EmailResult,
    EmailStatus,
)

__all__ = [
    # Database
    "StorageError",
    "UnitOfWorkPort",
    # Email
    "DeliveryError",
    "DeliveryRejectedError",
    "DeliveryTransportError",
    "EmailMessage",
    "EmailPort",
    "EmailResult",
    "EmailStatus",
]

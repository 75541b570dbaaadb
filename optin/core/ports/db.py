"""
Database Adapter Interfaces.

Protocol-based transaction interface shared by the SQLite adapter and
in-memory test doubles.
"""

from __future__ import annotations

from typing import Any, Protocol


class StorageError(Exception):
    """
    The durable store rejected or could not complete an operation.

    Adapters raise this (chained to the driver error) so callers never
    depend on a specific database driver.
    """

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        self.detail = detail
        message = f"Storage operation '{operation}' failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class UnitOfWorkPort(Protocol):
    """
    Unit of Work pattern for transaction management.

    Usage:
        with uow:
            uow.subscriptions.save(subscriber)
            uow.commit()

    Leaving the block without commit() rolls back.
    """

    def __enter__(self) -> UnitOfWorkPort:
        """Enter transaction context."""
        ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Exit transaction context (rollback on exception)."""
        ...

    def commit(self) -> None:
        """Commit the transaction."""
        ...

    def rollback(self) -> None:
        """Rollback the transaction."""
        ...

"""
SQLite Database Adapter.

Implements the onboarding repository ports using SQLite.
Designed to be Postgres-compatible (uses standard SQL patterns).

Driver errors never leave this module: every sqlite3.Error is re-raised
as StorageError chained to the original.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any
from uuid import UUID

from optin.components.onboarding.models import (
    ConfirmationToken,
    Subscriber,
    SubscriberStatus,
)
from optin.core.ports.db import StorageError

DEFAULT_TIMEOUT_SECONDS = 2.0

# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def connect(db_path: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> sqlite3.Connection:
    """Open a connection configured the way every repository expects."""
    conn = sqlite3.connect(db_path, timeout=timeout)
    conn.row_factory = dict_factory
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Translate driver errors into StorageError."""
    try:
        yield
    except sqlite3.Error as e:
        raise StorageError(operation, str(e)) from e


# -----------------------------------------------------------------------------
# Base SQLite Repository
# -----------------------------------------------------------------------------


class SQLiteRepoBase:
    """Base class for SQLite repositories."""

    def __init__(
        self,
        db_path: str,
        connection: sqlite3.Connection | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.db_path = db_path
        self.timeout = timeout
        self._external_conn = connection

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection (uses external if provided)."""
        if self._external_conn is not None:
            return self._external_conn
        return connect(self.db_path, self.timeout)

    def _should_close(self) -> bool:
        """Whether to close connection after use."""
        return self._external_conn is None


# -----------------------------------------------------------------------------
# Subscriber Repository
# -----------------------------------------------------------------------------


class SQLiteSubscriptionRepo(SQLiteRepoBase):
    """SQLite implementation of SubscriptionRepoPort."""

    def get_by_id(self, subscriber_id: UUID) -> Subscriber | None:
        with storage_errors("get subscriber by id"):
            conn = self._get_conn()
            try:
                row = conn.execute(
                    "SELECT * FROM subscriptions WHERE id = ?", (str(subscriber_id),)
                ).fetchone()
                return self._map_row(row) if row else None
            finally:
                if self._should_close():
                    conn.close()

    def get_by_email(self, email: str) -> Subscriber | None:
        with storage_errors("get subscriber by email"):
            conn = self._get_conn()
            try:
                row = conn.execute(
                    "SELECT * FROM subscriptions WHERE email = ?", (email,)
                ).fetchone()
                return self._map_row(row) if row else None
            finally:
                if self._should_close():
                    conn.close()

    def save(self, subscriber: Subscriber) -> Subscriber:
        with storage_errors("save subscriber"):
            conn = self._get_conn()
            try:
                # Status only ever moves forward, even on a conflicting upsert
                conn.execute(
                    """
                    INSERT INTO subscriptions (id, email, name, status, subscribed_at)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(email) DO UPDATE SET
                        name=excluded.name,
                        status=CASE
                            WHEN subscriptions.status = 'confirmed' THEN 'confirmed'
                            ELSE excluded.status
                        END
                    """,
                    (
                        str(subscriber.id),
                        subscriber.email,
                        subscriber.name,
                        subscriber.status.value,
                        subscriber.subscribed_at.isoformat(),
                    ),
                )
                row = conn.execute(
                    "SELECT * FROM subscriptions WHERE email = ?", (subscriber.email,)
                ).fetchone()
                if self._should_close():
                    conn.commit()
                return self._map_row(row)
            finally:
                if self._should_close():
                    conn.close()

    def count_by_status(self, status: SubscriberStatus) -> int:
        with storage_errors("count subscribers"):
            conn = self._get_conn()
            try:
                row = conn.execute(
                    "SELECT COUNT(*) AS total FROM subscriptions WHERE status = ?",
                    (status.value,),
                ).fetchone()
                return int(row["total"])
            finally:
                if self._should_close():
                    conn.close()

    def _map_row(self, row: dict[str, Any]) -> Subscriber:
        return Subscriber(
            id=UUID(row["id"]),
            email=row["email"],
            name=row["name"],
            status=SubscriberStatus(row["status"]),
            subscribed_at=datetime.fromisoformat(row["subscribed_at"]),
        )


# -----------------------------------------------------------------------------
# Confirmation Token Repository
# -----------------------------------------------------------------------------


class SQLiteSubscriptionTokenRepo(SQLiteRepoBase):
    """SQLite implementation of SubscriptionTokenRepoPort."""

    def replace_for_subscriber(self, token: ConfirmationToken) -> ConfirmationToken:
        with storage_errors("store confirmation token"):
            conn = self._get_conn()
            try:
                conn.execute(
                    "DELETE FROM subscription_tokens WHERE subscriber_id = ?",
                    (str(token.subscriber_id),),
                )
                conn.execute(
                    """
                    INSERT INTO subscription_tokens (subscription_token, subscriber_id, created_at)
                    VALUES (?, ?, ?)
                    """,
                    (token.token, str(token.subscriber_id), token.created_at.isoformat()),
                )
                if self._should_close():
                    conn.commit()
                return token
            finally:
                if self._should_close():
                    conn.close()

    def get(self, token: str) -> ConfirmationToken | None:
        with storage_errors("get confirmation token"):
            conn = self._get_conn()
            try:
                row = conn.execute(
                    "SELECT * FROM subscription_tokens WHERE subscription_token = ?",
                    (token,),
                ).fetchone()
                return self._map_row(row) if row else None
            finally:
                if self._should_close():
                    conn.close()

    def _map_row(self, row: dict[str, Any]) -> ConfirmationToken:
        return ConfirmationToken(
            token=row["subscription_token"],
            subscriber_id=UUID(row["subscriber_id"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )


# -----------------------------------------------------------------------------
# Unit of Work
# -----------------------------------------------------------------------------


class SQLiteUnitOfWork:
    """
    SQLite Unit of Work implementation.

    Provides transaction management and access to the onboarding
    repositories. All repositories share one connection; the transaction
    is opened with BEGIN IMMEDIATE so concurrent writers serialize on the
    database lock instead of racing on the unique email index.
    """

    def __init__(self, db_path: str, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self.db_path = db_path
        self.timeout = timeout
        self._conn: sqlite3.Connection | None = None

        # Lazy-initialized repositories
        self._subscriptions: SQLiteSubscriptionRepo | None = None
        self._tokens: SQLiteSubscriptionTokenRepo | None = None

    def __enter__(self) -> SQLiteUnitOfWork:
        with storage_errors("begin transaction"):
            self._conn = connect(self.db_path, self.timeout)
            try:
                self._conn.execute("BEGIN IMMEDIATE")
            except sqlite3.Error:
                self._conn.close()
                self._conn = None
                raise
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if self._conn:
            if self._conn.in_transaction:
                self._conn.rollback()
            self._conn.close()
            self._conn = None
        self._subscriptions = None
        self._tokens = None

    def commit(self) -> None:
        if self._conn:
            with storage_errors("commit transaction"):
                self._conn.commit()

    def rollback(self) -> None:
        if self._conn:
            self._conn.rollback()

    @property
    def subscriptions(self) -> SQLiteSubscriptionRepo:
        if self._subscriptions is None:
            self._subscriptions = SQLiteSubscriptionRepo(self.db_path, self._conn)
        return self._subscriptions

    @property
    def tokens(self) -> SQLiteSubscriptionTokenRepo:
        if self._tokens is None:
            self._tokens = SQLiteSubscriptionTokenRepo(self.db_path, self._conn)
        return self._tokens

"""
Admin dashboard endpoint.

Operators authenticate through the login flow, which stores a session
and sets the ``session_id`` cookie. Without a live session the dashboard
redirects to /login.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Cookie, Depends, status
from fastapi.responses import RedirectResponse

from optin.adapters.auth.session_store import InMemorySessionStore
from optin.adapters.sqlite_db import SQLiteSubscriptionRepo
from optin.api.deps import get_session_store, get_subscription_repo
from optin.components.onboarding.models import SubscriberStatus

router = APIRouter()

SESSION_COOKIE = "session_id"
LOGIN_PATH = "/login"


@router.get("/admin/dashboard", response_model=None)
def admin_dashboard(
    session_id: str | None = Cookie(None, alias=SESSION_COOKIE),
    session_store: InMemorySessionStore = Depends(get_session_store),
    repo: SQLiteSubscriptionRepo = Depends(get_subscription_repo),
) -> RedirectResponse | dict[str, Any]:
    """Subscriber counts per status for a logged-in operator."""
    session = session_store.get(session_id) if session_id else None
    if session is None:
        return RedirectResponse(LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)

    return {
        "operator_id": str(session.operator_id),
        "subscribers": {s.value: repo.count_by_status(s) for s in SubscriberStatus},
    }

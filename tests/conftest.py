import os
from urllib.parse import parse_qsl

import httpx
import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from optin.adapters.http_email import EmailDeliveryClient
from optin.adapters.sqlite.migrator import SQLiteMigrator
from optin.api.deps import get_email_sender, get_session_store, get_settings
from optin.api.main import app
from optin.app_shell.config import (
    PROJECT_ROOT,
    ApplicationSettings,
    DatabaseSettings,
    EmailClientSettings,
    Settings,
)

MIGRATIONS_DIR = str(PROJECT_ROOT / "migrations")
EMAIL_API_TOKEN = "test-server-token"


class FakeEmailProvider:
    """
    Programmable stand-in for the email provider's HTTP API.

    Records every request. Set ``status_code`` to answer with an error
    status, or ``error`` to an httpx transport exception class to fail
    before a response is produced.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.error: type[httpx.TransportError] | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if self.error is not None:
            raise self.error("simulated provider failure", request=request)
        if self.status_code >= 400:
            return httpx.Response(self.status_code, json={"Message": "provider error"})
        return httpx.Response(
            self.status_code, json={"MessageID": f"msg-{len(self.requests)}"}
        )

    def form(self, index: int = -1) -> dict[str, str]:
        """Decoded form fields of a recorded request."""
        return dict(parse_qsl(self.requests[index].content.decode()))


@pytest.fixture
def test_db_path(tmp_path):
    db = tmp_path / "data" / "optin.db"
    SQLiteMigrator(str(db), MIGRATIONS_DIR).run_migrations()
    return str(db)


@pytest.fixture
def test_settings(test_db_path):
    return Settings(
        application=ApplicationSettings(base_url="http://testserver"),
        database=DatabaseSettings(path=test_db_path, migrations_dir=MIGRATIONS_DIR),
        email_client=EmailClientSettings(
            base_url="http://email.test",
            sender_email="newsletter@example.com",
            authorization_token=SecretStr(EMAIL_API_TOKEN),
            timeout_milliseconds=500,
        ),
    )


@pytest.fixture
def email_provider():
    return FakeEmailProvider()


@pytest.fixture
def email_client(test_settings, email_provider):
    email = test_settings.email_client
    client = EmailDeliveryClient(
        base_url=email.base_url,
        sender=email.sender_email,
        authorization_token=email.authorization_token,
        timeout_seconds=email.timeout_seconds,
        transport=httpx.MockTransport(email_provider.handler),
    )
    yield client
    client.close()


@pytest.fixture
def client(test_settings, email_client):
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_email_sender] = lambda: email_client
    yield TestClient(app)
    app.dependency_overrides.clear()
    get_session_store().clear()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove OPTIN_* overrides inherited from the shell."""
    for key in list(os.environ):
        if key.startswith("OPTIN_"):
            monkeypatch.delenv(key)

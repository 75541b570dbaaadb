"""
Service configuration.

Settings are read from a YAML file and validated with pydantic. Secrets
and deployment-specific values can be overridden from the environment:

- OPTIN_CONFIG: path of the YAML file (default: ./config.yaml)
- OPTIN_DATA_DIR: directory holding the SQLite database
- OPTIN_BASE_URL: public base URL used in confirmation links
- OPTIN_EMAIL_BASE_URL: email provider API base URL
- OPTIN_EMAIL_AUTHORIZATION_TOKEN: email provider server token
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, SecretStr, ValidationError

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config.yaml"


class ApplicationSettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=0, le=65535)
    base_url: str = "http://127.0.0.1:8000"
    confirmation_path: str = "/subscriptions/confirm"
    site_name: str = "Our Newsletter"


class DatabaseSettings(BaseModel):
    path: str = "./data/optin.db"
    timeout_seconds: float = Field(default=2.0, gt=0)
    migrations_dir: str = str(PROJECT_ROOT / "migrations")


class EmailClientSettings(BaseModel):
    base_url: str
    sender_email: str
    authorization_token: SecretStr
    timeout_milliseconds: int = Field(default=10_000, gt=0)
    enabled: bool = True  # False = log emails instead of sending

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_milliseconds / 1000


class LoggingSettings(BaseModel):
    level: str = "INFO"


class Settings(BaseModel):
    application: ApplicationSettings = Field(default_factory=ApplicationSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    email_client: EmailClientSettings
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    application = data.setdefault("application", {}) or {}
    database = data.setdefault("database", {}) or {}
    email_client = data.setdefault("email_client", {}) or {}

    if "OPTIN_DATA_DIR" in os.environ:
        database["path"] = f"{os.environ['OPTIN_DATA_DIR']}/optin.db"
    if "OPTIN_BASE_URL" in os.environ:
        application["base_url"] = os.environ["OPTIN_BASE_URL"]
    if "OPTIN_EMAIL_BASE_URL" in os.environ:
        email_client["base_url"] = os.environ["OPTIN_EMAIL_BASE_URL"]
    if "OPTIN_EMAIL_AUTHORIZATION_TOKEN" in os.environ:
        email_client["authorization_token"] = os.environ["OPTIN_EMAIL_AUTHORIZATION_TOKEN"]

    data["application"] = application
    data["database"] = database
    data["email_client"] = email_client
    return data


def load_settings(path: Path | None = None) -> Settings:
    """
    Load and validate the configuration file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if YAML or schema invalid.
    """
    if path is None:
        path = Path(os.environ.get("OPTIN_CONFIG", DEFAULT_CONFIG_PATH))

    if not path.exists():
        raise FileNotFoundError(f"Config file not found at: {path}")

    with open(path) as f:
        content = f.read()

    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in config file: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping at the top level")

    try:
        return Settings.model_validate(_apply_env_overrides(data))
    except ValidationError as e:
        # The message lists field locations only; input values may hold secrets
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ValueError(f"Config validation failed for: {fields}") from e

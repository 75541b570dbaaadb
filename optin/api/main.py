import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from optin.adapters.sqlite.migrator import SQLiteMigrator
from optin.api.deps import close_email_sender, get_settings
from optin.api.routes import admin, health, subscriptions
from optin.app_shell.telemetry import init_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    # Fail fast on bad configuration or schema
    settings = get_settings()
    init_logging(settings.logging.level)

    SQLiteMigrator(settings.database.path, settings.database.migrations_dir).run_migrations()
    logger.info(
        "Serving %s (email provider %s)",
        settings.application.base_url,
        settings.email_client.base_url if settings.email_client.enabled else "disabled",
    )

    yield

    close_email_sender()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Optin API",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.include_router(health.router, tags=["Health"])
    app.include_router(subscriptions.router, tags=["Subscriptions"])
    app.include_router(admin.router, tags=["Admin"])
    return app


app = create_app()

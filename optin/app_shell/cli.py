import argparse
import logging
import os
import sys
from pathlib import Path

import uvicorn

from optin.adapters.sqlite.migrator import SQLiteMigrator
from optin.app_shell.config import Settings, load_settings
from optin.app_shell.telemetry import init_logging

logger = logging.getLogger("cli")


def get_settings(config_path: str | None) -> Settings:
    try:
        return load_settings(Path(config_path) if config_path else None)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Configuration error: %s", e)
        sys.exit(1)


def handle_migrate(settings: Settings, args: argparse.Namespace) -> None:
    applied = SQLiteMigrator(
        settings.database.path, settings.database.migrations_dir
    ).run_migrations()
    print(f"Applied {len(applied)} migrations.")


def handle_serve(settings: Settings, args: argparse.Namespace) -> None:
    uvicorn.run(
        "optin.api.main:app",
        host=args.host or settings.application.host,
        port=args.port if args.port is not None else settings.application.port,
        log_config=None,  # keep the handler installed by init_logging
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Optin mailing list service")
    parser.add_argument("--config", help="Path to config.yaml (default: $OPTIN_CONFIG)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    subparsers.add_parser("migrate", help="Apply pending database migrations")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument("--host", help="Bind address (default from config)")
    serve_parser.add_argument("--port", type=int, help="Bind port (default from config)")

    args = parser.parse_args()

    if args.config:
        # The served app reads its settings from the environment
        os.environ["OPTIN_CONFIG"] = args.config
    settings = get_settings(args.config)
    init_logging(settings.logging.level)

    if args.command == "migrate":
        handle_migrate(settings, args)
    elif args.command == "serve":
        handle_serve(settings, args)


if __name__ == "__main__":
    main()

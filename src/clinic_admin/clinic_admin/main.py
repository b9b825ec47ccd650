from __future__ import annotations

import importlib
import logging
import threading
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .archive.controller import register as register_archives
from .container import Container, build_container
from .core.constants import DEFAULT_API_TIMEOUT_SECONDS, DEFAULT_AUTO_PURGE_DELAY_SECONDS
from .database.bootstrap import apply_schema, list_tables
from .employees.controller import register as register_employees
from .patients.controller import register as register_patients

logger = logging.getLogger(__name__)


def schedule_startup_purge(container: Container, *, delay_seconds: float) -> threading.Timer:
    """Fire-and-forget purge of expired archives once the app has settled."""

    def _run() -> None:
        purged = container.archive_service.purge_all_silently()
        for entity_type, count in purged.items():
            if count > 0:
                logger.info("Auto-purged %d expired %s archive(s)", count, entity_type.label)

    timer = threading.Timer(delay_seconds, _run)
    timer.daemon = True
    timer.start()
    return timer


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.debug("settings=%s db=%s@%s:%s/%s", settings_module, db_config.get("user"), db_config.get("host"),
                 db_config.get("port", 3306), db_config.get("database"))

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            api_base_url=getattr(settings, "API_BASE_URL", "http://localhost:3000"),
            api_timeout=float(getattr(settings, "API_TIMEOUT_SECONDS", DEFAULT_API_TIMEOUT_SECONDS)),
        )

    register_archives(app, container)
    register_patients(app, container)
    register_employees(app, container)

    @app.cli.command("purge-archives")
    def purge_archives_command() -> None:
        """Permanently delete expired archive entries of every entity type."""
        for entity_type, count in container.archive_service.purge_all_silently().items():
            click.echo(f"{entity_type.value}: {count} expired archive(s) purged")

    if bool(getattr(settings, "AUTO_PURGE_ON_START", False)):
        schedule_startup_purge(
            container,
            delay_seconds=float(getattr(settings, "AUTO_PURGE_DELAY_SECONDS", DEFAULT_AUTO_PURGE_DELAY_SECONDS)),
        )

    app.extensions["clinic_admin.container"] = container
    return app

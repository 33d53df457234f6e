from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .settings import get_settings_module

from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_staff, list_tables

from .common.web import register_error_handlers
from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .bug_reports.controller import register as register_bug_reports
from .calendar.controller import register as register_calendar
from .dashboard.controller import register as register_dashboard
from .documents.controller import register as register_documents
from .grocery.controller import register as register_grocery
from .housing.controller import register as register_housing
from .medical.controller import register as register_medical
from .operations.controller import register as register_operations
from .pickups.controller import register as register_pickups
from .players.controller import register as register_players
from .prospects.controller import register as register_prospects
from .staff.controller import register as register_staff
from .storage.controller import register as register_storage
from .tasks.controller import register as register_tasks
from .trials.controller import register as register_trials
from .visa.controller import register as register_visa

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def register_routes(app: Flask, container: Container) -> None:
    register_error_handlers(app)

    register_staff(app, container)
    register_dashboard(app, container)
    register_players(app, container)
    register_housing(app, container)
    register_tasks(app, container)
    register_calendar(app, container)
    register_attendance(app, container)
    register_medical(app, container)
    register_trials(app, container)
    register_pickups(app, container)
    register_operations(app, container)
    register_prospects(app, container)
    register_documents(app, container)
    register_visa(app, container)
    register_grocery(app, container)
    register_bug_reports(app, container)
    register_storage(app, container)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config)
            ensure_demo_staff(db_config)
            logger.info("Demo seed ready")

        container = build_container(
            db_config=db_config,
            storage_root=getattr(settings, "STORAGE_ROOT"),
            secret_key=app.secret_key,
            signed_url_max_age=int(getattr(settings, "SIGNED_URL_MAX_AGE", 3600)),
        )

    register_routes(app, container)
    return app

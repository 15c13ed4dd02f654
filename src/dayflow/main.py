from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .core.constants import DEFAULT_SESSION_DAYS, REMARKS_MAX_LENGTH
from .container import Container, build_container
from .database.bootstrap import SCHEMA_PATH, apply_schema, ensure_demo_users, list_tables
from .attendance.controller import register as register_attendance
from .dashboard.controller import register as register_dashboard
from .identity.controller import register as register_identity
from .leave.controller import register as register_leave
from .payroll.controller import register as register_payroll

logger = logging.getLogger(__name__)


def create_app(*, settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass ``container`` to run against pre-built repositories (tests use in-memory
    ones); otherwise a MySQL-backed container is built from ``DB_CONFIG``.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_DAYS"] = int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

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

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=getattr(settings, "SCHEMA_PATH", None) or SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_users(db_config)

        container = build_container(
            db_config=db_config,
            remarks_max_length=int(getattr(settings, "REMARKS_MAX_LENGTH", REMARKS_MAX_LENGTH)),
        )

    app.extensions["dayflow"] = container

    register_identity(app, container)
    register_leave(app, container)
    register_attendance(app, container)
    register_payroll(app, container)
    register_dashboard(app, container)

    return app

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.http import ok, register_error_handlers
from .container import Container, build_container
from .core.constants import (
    DEFAULT_FINANCE_DEPARTMENT_NAMES,
    DEFAULT_HR_DEPARTMENT_NAMES,
    DEFAULT_PAYSLIP_STORAGE_DIR,
    DEFAULT_TOKEN_MAX_AGE_SECONDS,
)
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables

from .assets.controller import register as register_assets
from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .departments.controller import register as register_departments
from .employees.controller import register as register_employees
from .leaves.controller import register as register_leaves
from .payslips.controller import register as register_payslips
from .polls.controller import register as register_polls
from .resignations.controller import register as register_resignations
from .team.controller import register as register_team

logger = logging.getLogger("hr_portal")

REPO_ROOT = Path(__file__).resolve().parents[3]


def configure_logging(level_name: str) -> None:
    level = getattr(logging, str(level_name or "INFO").upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("hr_portal").setLevel(level)


def create_app(*, container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Pass ``container`` to run against prebuilt services (tests use
    in-memory repositories); otherwise MySQL repositories are wired from the
    selected settings module.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module, db_config.get("user"), db_config.get("host"),
            db_config.get("port", 3306), db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_users(db_config)
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            secret_key=app.secret_key,
            token_max_age_seconds=int(getattr(settings, "TOKEN_MAX_AGE_SECONDS", DEFAULT_TOKEN_MAX_AGE_SECONDS)),
            finance_names=getattr(settings, "FINANCE_DEPARTMENT_NAMES", DEFAULT_FINANCE_DEPARTMENT_NAMES),
            hr_names=getattr(settings, "HR_DEPARTMENT_NAMES", DEFAULT_HR_DEPARTMENT_NAMES),
            payslip_storage_dir=REPO_ROOT / getattr(settings, "PAYSLIP_STORAGE_DIR", DEFAULT_PAYSLIP_STORAGE_DIR),
        )

    app.extensions["hr_portal"] = container
    register_error_handlers(app)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return ok({"status": "ok"})

    register_auth(app, container)
    register_employees(app, container)
    register_departments(app, container)
    register_leaves(app, container)
    register_attendance(app, container)
    register_polls(app, container)
    register_assets(app, container)
    register_resignations(app, container)
    register_team(app, container)
    register_payslips(app, container)

    return app

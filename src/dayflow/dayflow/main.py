from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.web import register_error_handlers
from .container import build_container
from .core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS, DEFAULT_RECENT_LIMIT
from .leaves.controller import register as register_leaves
from .storage.bootstrap import initialize_data
from .users.controller import register as register_users
from .workflow.controller import register as register_workflow

logger = logging.getLogger(__name__)


def create_app(settings_module: str | None = None, **overrides) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["DATA_DIR"] = getattr(settings, "DATA_DIR")
    app.config["UPLOAD_DIR"] = getattr(settings, "UPLOAD_DIR")
    app.config["LOCK_TIMEOUT_SECONDS"] = float(getattr(settings, "LOCK_TIMEOUT_SECONDS", DEFAULT_LOCK_TIMEOUT_SECONDS))
    app.config["DASHBOARD_RECENT_LIMIT"] = int(getattr(settings, "DASHBOARD_RECENT_LIMIT", DEFAULT_RECENT_LIMIT))
    app.config["SEED_ADMIN"] = bool(getattr(settings, "SEED_ADMIN", True))
    app.config["LOG_LEVEL"] = getattr(settings, "LOG_LEVEL", "INFO")
    app.config.update(overrides)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info("settings=%s data_dir=%s", settings_module, app.config["DATA_DIR"])

    container = build_container(
        data_dir=app.config["DATA_DIR"],
        upload_dir=app.config["UPLOAD_DIR"],
        lock_timeout=app.config["LOCK_TIMEOUT_SECONDS"],
        recent_limit=app.config["DASHBOARD_RECENT_LIMIT"],
    )
    initialize_data(
        container.store,
        container.employees_repo,
        upload_dir=container.upload_dir,
        seed_admin=app.config["SEED_ADMIN"],
    )
    container.workflow_service.reconcile_statuses()
    app.extensions["dayflow"] = container

    register_error_handlers(app)
    register_workflow(app, container)
    register_users(app, container)
    register_attendance(app, container)
    register_leaves(app, container)

    return app

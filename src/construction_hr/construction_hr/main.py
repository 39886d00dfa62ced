from __future__ import annotations

import importlib
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, send_from_directory
from flask_socketio import SocketIO
from werkzeug.exceptions import RequestEntityTooLarge

from config import get_settings_module

from .applications.controller import register as register_applications
from .attendance.controller import register as register_attendance
from .common.http import json_error
from .container import Container, build_container
from .core.constants import MAX_SITE_PHOTOS_PER_REQUEST, MAX_UPLOAD_MB
from .core.exceptions import UploadError
from .database.bootstrap import apply_schema, ensure_admin_user, list_tables
from .database.connection import DBConfig
from .employees.controller import register as register_employees
from .leaves.controller import register as register_leaves
from .notifications.controller import register as register_socket_handlers
from .notifications.notifier import SocketIONotifier
from .payroll.controller import register as register_payroll
from .site_monitoring.controller import register as register_site_monitoring
from .users.controller import register as register_users

REPO_ROOT = Path(__file__).resolve().parents[3]
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

logger = logging.getLogger(__name__)


def _upload_dir(settings) -> Path:
    path = Path(getattr(settings, "UPLOAD_DIR", "uploads"))
    return path if path.is_absolute() else REPO_ROOT / path


def create_app(*, container: Optional[Container] = None) -> Flask:
    """Application factory.

    ``container`` lets tests run the full HTTP and socket surface on in-memory
    repositories; when omitted the MySQL-backed container is built from settings.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    max_upload_mb = int(getattr(settings, "MAX_UPLOAD_MB", MAX_UPLOAD_MB))
    # Per-file limits are enforced by UploadStore; this caps a whole multi-file request.
    app.config["MAX_CONTENT_LENGTH"] = max_upload_mb * 1024 * 1024 * (MAX_SITE_PHOTOS_PER_REQUEST + 1)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())
        container = build_container(db_config=db_config, settings=settings, upload_dir=_upload_dir(settings))

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(container.conn, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(container.conn)))
        if bool(getattr(settings, "AUTO_SEED_ADMIN", False)):
            ensure_admin_user(container.conn, password=getattr(settings, "ADMIN_PASSWORD", "admin123"))

    app.extensions["container"] = container

    socketio = SocketIO(
        app,
        cors_allowed_origins=getattr(settings, "CORS_ALLOWED_ORIGINS", "*"),
        async_mode="threading",
    )
    if isinstance(container.notifier, SocketIONotifier):
        container.notifier.attach(socketio)

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(_e):
        return json_error(f"File too large. Maximum file size is {max_upload_mb}MB.", 400)

    @app.errorhandler(UploadError)
    def upload_error(e):
        return json_error(e)

    @app.route("/uploads/<path:filename>", methods=["GET"], endpoint="uploaded_file")
    def uploaded_file(filename: str):
        return send_from_directory(container.uploads.base_dir, filename)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    register_users(app, container)
    register_employees(app, container)
    register_attendance(app, container)
    register_payroll(app, container)
    register_leaves(app, container)
    register_applications(app, container)
    register_site_monitoring(app, container)
    register_socket_handlers(socketio, container)

    return app


def socketio_run_options(app: Flask) -> dict:
    """Keyword arguments for ``socketio.run``.

    The Werkzeug dev server is only allowed under DEBUG; otherwise Flask-SocketIO
    refuses to start it and a real server has to be used.
    """
    options = {
        "host": os.getenv("HOST", "0.0.0.0"),
        "port": int(os.getenv("PORT", "5000")),
        "debug": app.config["DEBUG"],
    }
    if app.config["DEBUG"]:
        options["allow_unsafe_werkzeug"] = True
    return options

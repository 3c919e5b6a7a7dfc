"""Class Attendance package.

This package is organized by feature modules (classes, students, attendance, reports)
with a thin Flask controller layer over service/repository layers.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module, load_settings

from .attendance.controller import register as register_attendance
from .classes.controller import register as register_classes
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .reports.controller import register as register_reports
from .students.controller import register as register_students

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = load_settings()
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        backend = str(getattr(settings, "STORAGE_BACKEND", "json"))
        db_config = dict(getattr(settings, "DB_CONFIG", {}))
        json_path = Path(getattr(settings, "JSON_STORE_PATH", "instance/attendance.json"))
        if not json_path.is_absolute():
            json_path = REPO_ROOT / json_path

        if backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))

        container = build_container(
            backend=backend,
            json_path=json_path,
            db_config=db_config,
            max_classes=int(getattr(settings, "MAX_CLASSES", 2)),
        )

    logger.info("settings=%s backend=%s", settings_module, container.backend.value)

    register_classes(app, container)
    register_students(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app

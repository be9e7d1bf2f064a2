"""Department attendance tracker.

This package is organized by feature modules (users, departments, attendance)
with a thin Flask controller layer over service/repository layers.
"""
from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, apply_seed_sql, list_tables

from .container import Container, build_container
from .database.connection import DBConfig
from .core.constants import DEFAULT_EXPECTED_TOTAL_LECTURES, DEFAULT_REGISTER_REDIRECT_SECONDS
from .attendance.controller import register as register_attendance
from .departments.controller import register as register_departments
from .users.controller import register as register_users


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates", static_folder="../../../static")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["REGISTER_REDIRECT_SECONDS"] = int(getattr(settings, "REGISTER_REDIRECT_SECONDS", DEFAULT_REGISTER_REDIRECT_SECONDS))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        if app.config["DEBUG"]:
            print(f"[attendance-tracker] settings={settings_module} db={DBConfig.from_mapping(db_config).describe()}")

        database_dir = Path(__file__).resolve().parents[3] / "database"
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=database_dir / "schema.sql")
            if app.config["DEBUG"]:
                print(f"[attendance-tracker] schema ready (tables={len(list_tables(db_config))})")
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=database_dir / "seed.sql")
            if app.config["DEBUG"]:
                print("[attendance-tracker] demo seed ready")

        container = build_container(
            db_config=db_config,
            expected_total=int(getattr(settings, "EXPECTED_TOTAL_LECTURES", DEFAULT_EXPECTED_TOTAL_LECTURES)),
            allow_duplicates=bool(getattr(settings, "ALLOW_DUPLICATE_ATTENDANCE", True)),
        )

    app.extensions["container"] = container

    register_users(app, container)
    register_departments(app, container)
    register_attendance(app, container)

    return app

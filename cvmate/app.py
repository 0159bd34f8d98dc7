"""
Flask application factory for CVMate.
Sets up configuration, database, migrations, CORS, logging, the CV ingestion
pipeline and registers blueprints.
"""

import os
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Mapping, Optional

from flask import Flask, jsonify
from flask_cors import CORS
from dotenv import load_dotenv
from werkzeug.exceptions import RequestEntityTooLarge

# Re-export db for scripts that import from cvmate.app
from cvmate.extensions import db, migrate
from cvmate.services.cv_ingestion import build_pipeline, load_config

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _resolve_database_uri() -> str:
    """Resolve SQLAlchemy database URI from environment.

    Supports dual modes:
    - sqlite via `DATABASE_MODE=sqlite` and `DATABASE_DEV`
    - postgres via `DATABASE_MODE=postgres` and `DATABASE_PROD`
    """
    mode = (os.getenv("DATABASE_MODE") or "sqlite").lower()
    if mode == "postgres":
        uri = os.getenv("DATABASE_PROD")
        if not uri:
            raise RuntimeError("DATABASE_PROD must be set when DATABASE_MODE=postgres")
        return uri
    # default sqlite dev path
    return os.getenv("DATABASE_DEV") or "sqlite:///cvmate.db"


def _ensure_instance_dir(app: Flask) -> None:
    """Ensure the Flask instance directory exists (for SQLite and local storage)."""
    try:
        Path(app.instance_path).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        # Non-fatal; sqlite URIs outside the instance dir still work
        app.logger.warning(f"Could not create instance dir {app.instance_path}: {exc}")


def _configure_logging(app: Flask) -> None:
    """Info level to stderr plus a rotating file, configured once per process."""
    root = logging.getLogger()
    if not root.handlers:
        root.setLevel(logging.INFO)
        sh = logging.StreamHandler()
        sh.setLevel(logging.INFO)
        sh.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(sh)

        log_path = os.getenv("CVMATE_LOG", "cvmate.log")
        try:
            fh = RotatingFileHandler(log_path, maxBytes=5 * 1024 * 1024, backupCount=2)
            fh.setLevel(logging.INFO)
            fh.setFormatter(logging.Formatter(LOG_FORMAT))
            root.addHandler(fh)
        except OSError as exc:
            root.warning(f"File logging disabled ({log_path}): {exc}")

    app.logger.setLevel(logging.INFO)

    if os.getenv("DEBUG_MODE", "0") == "1":
        logging.getLogger("cvmate.services.cv_ingestion").setLevel(logging.DEBUG)
        for handler in root.handlers:
            handler.setLevel(logging.DEBUG)


def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """Create and configure the Flask application."""
    # Load .env for development convenience
    load_dotenv()

    app = Flask(__name__, instance_relative_config=True)
    if overrides:
        app.config.update(overrides)

    ingestion_config = load_config()

    # Base config
    app.config.setdefault("SQLALCHEMY_DATABASE_URI", _resolve_database_uri())
    app.config.setdefault("SQLALCHEMY_TRACK_MODIFICATIONS", False)
    app.config.setdefault("MAX_CONTENT_LENGTH", ingestion_config.upload.max_size_bytes)

    # Optional: Secret key for sessions (not critical for API-only)
    app.config.setdefault("SECRET_KEY", os.getenv("SECRET_KEY", "dev-secret-key"))

    _ensure_instance_dir(app)
    _configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Enable CORS (allow frontend dev server)
    CORS(
        app,
        resources={
            r"/api/*": {
                "origins": [
                    "http://localhost:3000",
                    "http://127.0.0.1:3000",
                    "http://localhost:3001",
                ]
            }
        },
        supports_credentials=True,
    )

    # Stateless ingestion units are built once and shared by every request
    app.extensions["cv_upload_pipeline"] = build_pipeline(ingestion_config)

    # Register API blueprint
    from cvmate.blueprints.api import api_bp

    app.register_blueprint(api_bp)

    @app.errorhandler(RequestEntityTooLarge)
    def _file_too_large(_exc):
        return (
            jsonify(
                {
                    "success": False,
                    "message": f"File is too large (max {ingestion_config.upload.max_size_mb} MB)",
                }
            ),
            413,
        )

    return app

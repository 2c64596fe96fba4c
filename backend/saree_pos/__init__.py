# backend/saree_pos/__init__.py
import logging

from flask import Flask, request

from .config import Config
from .extensions import db, migrate, LEDGER_EXTENSION, POS_SESSION_EXTENSION



def create_app(overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("saree_pos").setLevel(app.config["LOG_LEVEL"])
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic and create_all see the kv_store table
    from . import models  # noqa: F401

    if app.config.get("AUTO_CREATE_TABLES", True):
        with app.app_context():
            db.create_all()

    # Ledger state: durable store, legacy store, one-time load/migration
    from .services.ledger_service import Ledger, LedgerConfig
    from .services.legacy_service import LegacyStore
    from .services.pos_service import PosSession
    from .services.store_service import DurableStore

    store = DurableStore(app, namespace=app.config["STORE_NAMESPACE"])
    legacy_path = app.config.get("LEGACY_STORE_PATH")
    legacy_store = LegacyStore(legacy_path) if legacy_path else None
    ledger = Ledger(LedgerConfig.from_mapping(app.config), store, legacy_store)
    ledger.load()

    app.extensions[LEDGER_EXTENSION] = ledger
    app.extensions[POS_SESSION_EXTENSION] = PosSession(ledger)

    # Register blueprints
    from .routes.system import system_bp
    from .routes.inventory import inventory_bp
    from .routes.pos import pos_bp
    from .routes.sales import sales_bp
    from .routes.returns import returns_bp
    from .routes.reports import reports_bp
    from .routes.admin import admin_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(inventory_bp)
    app.register_blueprint(pos_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(returns_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(admin_bp)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allowed_origins = {
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:4173",
            "http://127.0.0.1:4173",
        }
        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,DELETE,PATCH,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app

# backend/saree_pos/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored next to the app on the operator's device
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///saree_pos.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Durable store namespace and the two persisted collection keys
    STORE_NAMESPACE = os.environ.get("STORE_NAMESPACE", "SareeOfflineDB")
    INVENTORY_KEY = os.environ.get("INVENTORY_KEY", "saree_inventory")
    SALES_KEY = os.environ.get("SALES_KEY", "saree_sales")

    # Older flat string store, read once at startup for migration
    LEGACY_STORE_PATH = os.environ.get("LEGACY_STORE_PATH", "saree_legacy")

    # Factory reset PIN (numeric)
    RESET_PIN = int(os.environ.get("RESET_PIN", "1234"))

    # Create the kv_store table on startup. Set to 0 when the schema is
    # managed with "flask db upgrade" instead.
    AUTO_CREATE_TABLES = os.environ.get("AUTO_CREATE_TABLES", "1") == "1"

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

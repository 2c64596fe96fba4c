# backend/saree_pos/routes/system.py
"""
System health and offline asset endpoints.
"""

import time
from flask import Blueprint, current_app, jsonify
from ..extensions import db, get_ledger
from ..models import KeyValueEntry

system_bp = Blueprint("system", __name__)


# Resources the installed app keeps cached so it works with no network
OFFLINE_ASSETS = [
    "./",
    "./index.html",
    "./manifest.json",
    "https://unpkg.com/html5-qrcode",
]
OFFLINE_CACHE_NAME = "saree-pos-v1"


def check_database_health() -> dict:
    """
    Check durable store connectivity.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        entry_count = db.session.query(KeyValueEntry).count()
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {"entries": entry_count},
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


@system_bp.get("/api/health")
def health():
    ledger = get_ledger()
    database = check_database_health()
    overall = "healthy" if database["status"] == "healthy" and ledger.loaded else "degraded"
    return jsonify({
        "status": overall,
        "checks": {
            "database": database,
            "ledger": {
                "loaded": ledger.loaded,
                "items": len(ledger.items),
                "sales": len(ledger.sales),
            },
        },
    }), 200


@system_bp.get("/api/system/offline-manifest")
def offline_manifest():
    return jsonify({"cache_name": OFFLINE_CACHE_NAME, "assets": OFFLINE_ASSETS}), 200

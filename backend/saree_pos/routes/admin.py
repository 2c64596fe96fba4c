# Overview: Flask API route for the PIN-gated factory reset.

from flask import Blueprint, current_app, jsonify, request

from ..decorators import ledger_action
from ..extensions import get_ledger, get_pos_session


admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@admin_bp.post("/factory-reset")
@ledger_action("Failed to reset data")
def factory_reset_route():
    """
    Erase all stock and sales on this device.

    Request body: {"pin": 1234, "confirm": true}

    Returns:
        200: data wiped
        400: confirmation missing
        403: incorrect PIN
    """
    data = request.get_json(silent=True) or {}
    if data.get("confirm") is not True:
        return jsonify({"ok": False, "error": "Factory reset must be confirmed"}), 400

    get_ledger().factory_reset(data.get("pin"))
    get_pos_session().switch_mode()
    current_app.logger.warning("Factory reset requested through the API")
    return jsonify({"ok": True, "message": "All data has been reset"}), 200

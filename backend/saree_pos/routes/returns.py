# Overview: Flask API route for returning a sold item to stock.

from flask import Blueprint, jsonify, request

from ..decorators import ledger_action
from ..extensions import get_ledger


returns_bp = Blueprint("returns", __name__, url_prefix="/api/returns")


@returns_bp.post("/")
@ledger_action("Failed to process return")
def process_return_route():
    """
    Request body: {"code": "SAR101"}

    Returns:
        200: item back in stock, its sale records removed
        404: unknown code
        409: item is already available
    """
    data = request.get_json(silent=True) or {}
    code = data.get("code")
    if not code:
        return jsonify({"ok": False, "error": "code required"}), 400
    item = get_ledger().process_return(code)
    return jsonify({"ok": True, "message": f"{item.code} returned to stock", "item": item.to_dict()}), 200

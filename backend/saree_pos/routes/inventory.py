# Overview: Flask API routes for stock; add, list, remove, bulk import and export.

from flask import Blueprint, Response, jsonify, request

from ..decorators import ledger_action
from ..extensions import get_ledger
from ..services.import_service import decode_table
from ..services.ledger_service import COLLECTION_INVENTORY


inventory_bp = Blueprint("inventory", __name__, url_prefix="/api/inventory")


@inventory_bp.get("/")
@ledger_action("Failed to list inventory")
def list_items_route():
    """
    List stock, newest first.

    Query params:
        status: available | sold (optional)
    """
    status = request.args.get("status")
    items = get_ledger().list_items(status=status)
    return jsonify({"items": [i.to_dict() for i in items], "count": len(items)}), 200


@inventory_bp.post("/")
@ledger_action("Failed to add item")
def add_item_route():
    """
    Register a new item.

    Request body:
    {
        "code": "SAR101",          (optional, generated from type when blank)
        "name": "Red Floral Silk",
        "type": "Paithani",
        "shopName": "...", "shopCode": "...",
        "costPrice": 300, "listPrice": 500, "altPrice": 400
    }

    Returns:
        201: Item created
        409: Code already exists
    """
    data = request.get_json(silent=True) or {}
    item = get_ledger().add_item(data)
    return jsonify({"ok": True, "message": f"Saree added! Code: {item.code}", "item": item.to_dict()}), 201


@inventory_bp.get("/<code>")
@ledger_action("Failed to load item")
def get_item_route(code: str):
    ledger = get_ledger()
    item = ledger.get_item(code)
    if item is None:
        return jsonify({"ok": False, "error": f"Code {code.upper()} not found in inventory", "code": "NOT_FOUND"}), 404
    return jsonify({"item": item.to_dict(), "sales": [s.to_dict() for s in ledger.list_sales(item.code)]}), 200


@inventory_bp.delete("/<code>")
@ledger_action("Failed to remove item")
def remove_item_route(code: str):
    item = get_ledger().remove_item(code)
    return jsonify({"ok": True, "message": f"{item.code} removed from stock", "item": item.to_dict()}), 200


@inventory_bp.post("/import")
@ledger_action("Failed to import stock")
def import_route():
    """
    Bulk import from a pipe- or comma-delimited table.

    Accepts an uploaded "file", a JSON body {"text": "..."} or a raw text body.
    """
    if "file" in request.files:
        text = decode_table(request.files["file"].stream.read())
    else:
        data = request.get_json(silent=True)
        text = data.get("text") if isinstance(data, dict) else request.get_data(as_text=True)

    plan = get_ledger().import_table(text or "")
    message = f"Imported {plan.added} saree(s)"
    if plan.duplicates:
        message += f", skipped {plan.duplicates} duplicate(s)"
    return jsonify({"ok": True, "message": message, **plan.to_dict()}), 201


@inventory_bp.get("/export")
@ledger_action("Failed to export inventory")
def export_route():
    filename, text = get_ledger().export(COLLECTION_INVENTORY)
    return Response(
        text,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )

# Overview: Flask API routes for the sales log.

from flask import Blueprint, Response, jsonify, request

from ..decorators import ledger_action
from ..extensions import get_ledger
from ..services.ledger_service import COLLECTION_SALES


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.get("/")
def list_sales_route():
    """
    Sales log, newest first.

    Query params:
        code: only sales for this item code (optional)
    """
    sales = get_ledger().list_sales(request.args.get("code"))
    return jsonify({"sales": [s.to_dict() for s in sales], "count": len(sales)}), 200


@sales_bp.get("/export")
@ledger_action("Failed to export sales")
def export_route():
    filename, text = get_ledger().export(COLLECTION_SALES)
    return Response(
        text,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )

# Overview: Flask API route for the dashboard summary.

from flask import Blueprint, jsonify

from ..extensions import get_ledger
from ..services.reporting_service import dashboard_summary


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/dashboard")
def dashboard_route():
    return jsonify(dashboard_summary(get_ledger())), 200

# Overview: Flask API routes for the point-of-sale screen; cart and checkout.

from flask import Blueprint, jsonify, request

from ..decorators import ledger_action
from ..extensions import get_ledger, get_pos_session
from ..models import PAYMENT_CASH


pos_bp = Blueprint("pos", __name__, url_prefix="/api/pos")


def _cart_payload(session, **extra):
    return jsonify({**extra, "cart": session.cart.to_dict()})


@pos_bp.get("/cart")
def get_cart_route():
    return _cart_payload(get_pos_session()), 200


@pos_bp.post("/cart")
@ledger_action("Failed to add to cart")
def add_to_cart_route():
    """
    Stage a typed or scanned code.

    Request body: {"code": "sar101", "source": "manual" | "scan"}

    Returns:
        200: added
        409: unknown code, already sold, or already in the cart (tagged reason)
    """
    data = request.get_json(silent=True) or {}
    code = data.get("code")
    if not code:
        return jsonify({"ok": False, "error": "code required"}), 400

    session = get_pos_session()
    if data.get("source") == "scan":
        result = session.on_decoded(code)
    else:
        result = session.add_code(code)

    status = 200 if result.ok else 409
    return _cart_payload(session, ok=result.ok, reason=result.reason, message=result.message), status


@pos_bp.patch("/cart/<int:index>")
@ledger_action("Failed to update cart line")
def update_line_route(index: int):
    """
    Request body: {"priceSelection": "ListPrice" | "AlternatePrice" | "Custom", "customPrice": "450"}
    """
    data = request.get_json(silent=True) or {}
    session = get_pos_session()
    if index < 0 or index >= len(session.cart):
        return jsonify({"ok": False, "error": "Cart line not found"}), 404
    try:
        session.cart.update_selection(index, data.get("priceSelection"), data.get("customPrice"))
    except ValueError as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    return _cart_payload(session, ok=True), 200


@pos_bp.delete("/cart/<int:index>")
def remove_line_route(index: int):
    session = get_pos_session()
    if index < 0 or index >= len(session.cart):
        return jsonify({"ok": False, "error": "Cart line not found"}), 404
    session.cart.remove_line(index)
    return _cart_payload(session, ok=True), 200


@pos_bp.post("/checkout")
@ledger_action("Failed to complete checkout")
def checkout_route():
    """
    Request body: {"paymentMethod": "Cash" | "UPI"}
    """
    data = request.get_json(silent=True) or {}
    session = get_pos_session()
    sales = session.checkout(data.get("paymentMethod", PAYMENT_CASH))
    if not sales:
        return _cart_payload(session, ok=True, message="Cart is empty", sales=[]), 200
    return _cart_payload(
        session,
        ok=True,
        message=f"Sale complete: {len(sales)} item(s)",
        sales=[s.to_dict() for s in sales],
    ), 201


@pos_bp.post("/sell")
@ledger_action("Failed to sell item")
def sell_route():
    """Sell a single code directly at list price."""
    data = request.get_json(silent=True) or {}
    code = data.get("code")
    if not code:
        return jsonify({"ok": False, "error": "code required"}), 400
    sale = get_ledger().sell(code, data.get("paymentMethod", PAYMENT_CASH))
    return jsonify({"ok": True, "message": f"Success! {sale.sareeCode} marked as sold.", "sale": sale.to_dict()}), 201


@pos_bp.post("/mode")
def switch_mode_route():
    """Leaving (or re-entering) scan mode clears the cart and releases the scanner."""
    session = get_pos_session()
    session.switch_mode()
    return _cart_payload(session, ok=True, scanning=session.scanning), 200

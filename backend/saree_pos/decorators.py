# Overview: Route decorators that turn ledger failures into JSON notifications.

from functools import wraps
from flask import jsonify, current_app

from .services.exceptions import LedgerError
from .services.lifecycle_service import LifecycleError


ERROR_STATUS = {
    "NOT_FOUND": 404,
    "DUPLICATE_CODE": 409,
    "ALREADY_SOLD": 409,
    "ALREADY_AVAILABLE": 409,
    "INCORRECT_PIN": 403,
}


def error_response(exc: Exception, default_status: int = 400):
    code = getattr(exc, "code", "ERROR")
    status = ERROR_STATUS.get(code, default_status)
    return jsonify({"ok": False, "error": str(exc), "code": code}), status


def ledger_action(failure_message: str):
    """
    Recover domain failures at the point of the user action.

    Ledger/lifecycle errors become 4xx JSON with a stable code; anything
    unexpected is logged and answered with a generic 500.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except (LedgerError, LifecycleError) as e:
                return error_response(e)
            except Exception:
                current_app.logger.exception(failure_message)
                return jsonify({"ok": False, "error": "Internal server error"}), 500

        return decorated_function

    return decorator

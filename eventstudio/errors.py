"""
Error taxonomy and the JSON error envelope.

Every failure leaves a handler as
``{"success": false, "error_code": ..., "message": ...}``.
"""

import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from eventstudio.extensions import db

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, message, error_code=None):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code

    def to_dict(self):
        return {
            "success": False,
            "error_code": self.error_code,
            "message": self.message,
        }


class ValidationError(ApiError):
    status_code = 400
    error_code = "VALIDATION_ERROR"


class AuthError(ApiError):
    status_code = 401
    error_code = "UNAUTHORIZED"


class AccessDenied(ApiError):
    status_code = 403
    error_code = "ACCESS_DENIED"


class NotFoundError(ApiError):
    status_code = 404
    error_code = "NOT_FOUND"


class ConflictError(ApiError):
    status_code = 400
    error_code = "CONFLICT"


class CapacityError(ConflictError):
    """Sold out: a conflict with the event's seat inventory."""
    error_code = "EVENT_SOLD_OUT"


class InternalError(ApiError):
    status_code = 500
    error_code = "INTERNAL_ERROR"


def error_response(status_code, error_code, message):
    return jsonify({
        "success": False,
        "error_code": error_code,
        "message": message,
    }), status_code


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        if error.status_code >= 500:
            db.session.rollback()
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        code = error.name.upper().replace(" ", "_")
        return error_response(error.code, code, error.description)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception("Unhandled error: %s", error)
        db.session.rollback()
        return error_response(500, "INTERNAL_ERROR", "Internal server error")

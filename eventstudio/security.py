"""
Session tokens: JWT issuance, cookie handling and principal resolution.

Tokens are read from the ``token`` cookie first, then from an
``Authorization: Bearer`` header. The identity claim is the user id.
"""

import logging
import uuid
from datetime import timedelta

from flask_jwt_extended import create_access_token, set_access_cookies, unset_jwt_cookies

from eventstudio.errors import error_response
from eventstudio.extensions import db, jwt
from eventstudio.models.user import User

logger = logging.getLogger(__name__)

SESSION_LIFETIME = timedelta(days=7)
SESSION_COOKIE_NAME = "token"


def configure_jwt(app, production=False):
    app.config.setdefault('JWT_TOKEN_LOCATION', ["cookies", "headers"])
    app.config.setdefault('JWT_ACCESS_COOKIE_NAME', SESSION_COOKIE_NAME)
    app.config.setdefault('JWT_ACCESS_TOKEN_EXPIRES', SESSION_LIFETIME)
    app.config.setdefault('JWT_SESSION_COOKIE', False)
    # Same-site cookie, no double-submit token
    app.config.setdefault('JWT_COOKIE_CSRF_PROTECT', False)
    app.config.setdefault('JWT_COOKIE_SECURE', production)
    app.config.setdefault('JWT_COOKIE_SAMESITE', "None" if production else "Strict")

    jwt.init_app(app)


def issue_session_token(user):
    return create_access_token(identity=str(user.user_id))


def attach_session_cookie(response, token):
    set_access_cookies(response, token, max_age=int(SESSION_LIFETIME.total_seconds()))
    return response


def clear_session_cookie(response):
    unset_jwt_cookies(response)
    return response


@jwt.user_lookup_loader
def load_session_user(jwt_header, jwt_data):
    try:
        user_id = uuid.UUID(jwt_data["sub"])
    except (KeyError, TypeError, ValueError):
        return None
    return db.session.get(User, user_id)


@jwt.user_lookup_error_loader
def session_user_missing(jwt_header, jwt_data):
    logger.warning("Rejected token for unknown user %s", jwt_data.get("sub"))
    return error_response(401, "UNAUTHORIZED", "Invalid token. User not found.")


@jwt.unauthorized_loader
def session_token_missing(reason):
    return error_response(401, "UNAUTHORIZED", "Access denied. No token provided.")


@jwt.invalid_token_loader
def session_token_invalid(reason):
    logger.warning("Rejected malformed token: %s", reason)
    return error_response(401, "UNAUTHORIZED", "Invalid token.")


@jwt.expired_token_loader
def session_token_expired(jwt_header, jwt_payload):
    return error_response(401, "TOKEN_EXPIRED", "Token has expired.")

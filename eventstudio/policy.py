"""
Access policy: the two roles and the checks built on them.
"""

from functools import wraps

from flask_jwt_extended import current_user, jwt_required

from eventstudio.errors import AccessDenied
from eventstudio.models.user import ROLE_ADMIN


def has_role(user, role):
    return user is not None and user.role == role


def require_admin(user):
    if not has_role(user, ROLE_ADMIN):
        raise AccessDenied("Access denied. Admin privileges required.")


def require_owner_or_admin(user, owner_id, message="Access denied"):
    if user.user_id != owner_id and not has_role(user, ROLE_ADMIN):
        raise AccessDenied(message)


def admin_required(fn):
    """Authenticate the request, then reject anyone who is not an admin."""
    @wraps(fn)
    @jwt_required()
    def wrapper(*args, **kwargs):
        require_admin(current_user)
        return fn(*args, **kwargs)
    return wrapper

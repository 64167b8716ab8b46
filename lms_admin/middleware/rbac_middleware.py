"""
GrowthMindz Admin - RBAC Middleware
Role checks over the shared admins/staff account store
"""
from functools import wraps
from flask import g, current_app
from ..utils.exceptions import ForbiddenException


ROLE_ADMIN = 'Admin'
ROLE_STAFF = 'Staff'

# Role hierarchy (higher number = more permissions)
ROLE_HIERARCHY = {
    ROLE_ADMIN: 100,
    ROLE_STAFF: 10,
}


def require_roles(allowed_roles):
    """
    Decorator to require specific roles for a route.

    Usage:
        @require_roles(['Admin'])
        def admin_function():
            pass
    """
    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            user = getattr(g, 'current_user', None)

            if not user:
                raise ForbiddenException('Authentication required')

            user_role = user.get('role')

            if user_role not in allowed_roles:
                current_app.logger.warning(
                    f"Role access denied: User {user.get('id')} with role {user_role} "
                    f"attempted to access route requiring {allowed_roles}"
                )
                raise ForbiddenException(
                    f'Access denied. Required role: {", ".join(allowed_roles)}'
                )

            return f(*args, **kwargs)

        return decorated
    return decorator


def is_valid_role(role) -> bool:
    return role in ROLE_HIERARCHY


def is_admin():
    """Check if current user is an administrator"""
    user = getattr(g, 'current_user', None)
    return bool(user) and user.get('role') == ROLE_ADMIN

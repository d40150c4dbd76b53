from functools import wraps
from flask import abort
from flask_jwt_extended import get_jwt, get_jwt_identity

ROLE_ADMIN = "ADMIN"
ROLE_VOTER = "VOTER"

def roles_required(*allowed_roles: str):
    """
    Require JWT and restrict endpoint access to specific roles.
    Use with @jwt_required() above it.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            claims = get_jwt()
            role = claims.get("role")
            if role not in allowed_roles:
                abort(403, description="Insufficient permissions")
            return fn(*args, **kwargs)
        return wrapper
    return decorator

def current_principal_id() -> int:
    """
    The authenticated principal's id from the verified token.

    Routes pass it explicitly into the services; nothing below the route
    layer reads it from request context.
    """
    identity = get_jwt_identity()
    try:
        return int(identity)
    except (TypeError, ValueError):
        abort(401, description="Token identity is not a valid principal id")

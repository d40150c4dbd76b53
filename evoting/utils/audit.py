from typing import Optional, Dict, Any
from flask import request, has_request_context, current_app
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity, get_jwt

from ..extensions import db
from ..models.audit_log import AuditLog

def _optional_actor():
    """
    Returns (actor_id, role) or (None, None).
    Works for authenticated requests, anonymous requests and calls made
    outside a request (CLI, tests, background jobs).
    """
    if not has_request_context():
        return None, None
    try:
        verify_jwt_in_request(optional=True)
        claims = get_jwt()
        return get_jwt_identity(), claims.get("role")
    except Exception:
        return None, None

def audit_log(
    action: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[int] = None,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    """Stage an audit row in the current session; the caller commits."""
    actor_id, role = _optional_actor()

    ip = ua = None
    if has_request_context():
        ip = request.headers.get("X-Forwarded-For", request.remote_addr)
        ua = request.headers.get("User-Agent")

    log = AuditLog(
        actor_id=str(actor_id) if actor_id else None,
        actor_role=role,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        ip_address=ip,
        user_agent=ua[:255] if ua else None,
        details=details or None,
    )
    db.session.add(log)


def safe_audit(action: str, entity_type: str, entity_id: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
    """
    Best-effort audit in its own commit, for failure paths where the main
    transaction has already been rolled back.
    """
    try:
        audit_log(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details or {},
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Audit logging failed: %s", action)

from datetime import datetime, timezone
from flask import Blueprint, request, current_app
from flasgger import swag_from
from sqlalchemy.exc import SQLAlchemyError
from flask_jwt_extended import jwt_required

from ...errors import PublishStepError
from ...extensions import db
from ...models.audit_log import AuditLog
from ...schemas.results import PublishReportSchema
from ...services.orchestrator import orchestrator_from_config
from ...utils.audit import safe_audit
from ...utils.rbac import roles_required, ROLE_ADMIN

admin_bp = Blueprint("admin", __name__)

publish_report_schema = PublishReportSchema()


def _parse_iso(s: str) -> datetime:
    """
    Accepts:
      - 'YYYY-MM-DDTHH:MM:SS'
      - 'YYYY-MM-DDTHH:MM:SSZ'
      - 'YYYY-MM-DDTHH:MM:SS+00:00'
    Returns a naive datetime (UTC if timezone provided).
    """
    s = (s or "").strip()
    if not s:
        raise ValueError("Empty datetime string")

    # Normalize Zulu
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    dt = datetime.fromisoformat(s)
    # Audit timestamps are stored as naive UTC
    if dt.tzinfo is not None:
        dt = dt.astimezone(tz=timezone.utc).replace(tzinfo=None)
    return dt


@admin_bp.post("/elections/<int:election_id>/publish")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({
    "tags": ["Admin"],
    "summary": "Close, tally, publish results and archive an election",
    "description": (
        "Runs the four steps in order, each committed on its own.\n"
        "On failure the response names the failed step and the election's status;\n"
        "re-invoking the endpoint resumes the sequence."
    ),
    "responses": {
        200: {"description": "Published and archived"},
        404: {"description": "Election not found"},
        409: {"description": "Election status does not allow publishing"},
        502: {"description": "A step failed (PUBLISH_STEP_FAILED)"},
    },
})
def publish_election(election_id):
    orchestrator = orchestrator_from_config(current_app.config)

    try:
        report = orchestrator.run(election_id)
    except PublishStepError as e:
        safe_audit(
            action="ELECTION_PUBLISH_STEP_FAILED",
            entity_type="ELECTION",
            entity_id=election_id,
            details=e.details,
        )
        raise

    safe_audit(
        action="ELECTION_PUBLISH_COMPLETED",
        entity_type="ELECTION",
        entity_id=election_id,
        details=report.to_dict(),
    )
    return {
        "message": "Results published successfully",
        "report": publish_report_schema.dump(report.to_dict()),
    }, 200


@admin_bp.get("/audit-logs")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({
    "tags": ["Admin"],
    "summary": "Query audit logs",
    "parameters": [
        {"in": "query", "name": "action", "type": "string", "required": False},
        {"in": "query", "name": "entity_type", "type": "string", "required": False},
        {"in": "query", "name": "entity_id", "type": "integer", "required": False},
        {"in": "query", "name": "from", "type": "string", "required": False, "description": "ISO date-time"},
        {"in": "query", "name": "to", "type": "string", "required": False, "description": "ISO date-time"},
        {"in": "query", "name": "limit", "type": "integer", "required": False, "default": 50},
        {"in": "query", "name": "offset", "type": "integer", "required": False, "default": 0},
    ],
    "responses": {200: {"description": "Logs"}, 400: {"description": "Bad request"}, 403: {"description": "Forbidden"}}
})
def audit_logs():
    action = request.args.get("action")
    entity_type = request.args.get("entity_type")
    from_dt = request.args.get("from")
    to_dt = request.args.get("to")

    try:
        entity_id = request.args.get("entity_id", type=int)
        limit = min(int(request.args.get("limit", 50)), 200)
        offset = int(request.args.get("offset", 0))
    except ValueError:
        return {"message": "Invalid limit/offset"}, 400

    q = AuditLog.query

    if action:
        q = q.filter(AuditLog.action == action)
    if entity_type:
        q = q.filter(AuditLog.entity_type == entity_type)
    if entity_id is not None:
        q = q.filter(AuditLog.entity_id == entity_id)

    try:
        if from_dt:
            q = q.filter(AuditLog.created_at >= _parse_iso(from_dt))
        if to_dt:
            q = q.filter(AuditLog.created_at <= _parse_iso(to_dt))
    except ValueError:
        return {"message": "Invalid from/to datetime. Use ISO format."}, 400

    try:
        total = q.count()
        logs = (
            q.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("DB error querying audit logs")
        return {"message": "Failed to query audit logs"}, 500

    return {
        "total": total,
        "limit": limit,
        "offset": offset,
        "logs": [
            {
                "id": l.id,
                "created_at": l.created_at.isoformat() + "Z",
                "actor_id": l.actor_id,
                "actor_role": l.actor_role,
                "action": l.action,
                "entity_type": l.entity_type,
                "entity_id": l.entity_id,
                "ip_address": l.ip_address,
                "user_agent": l.user_agent,
                "details": l.details,
            }
            for l in logs
        ],
    }, 200

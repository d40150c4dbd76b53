from datetime import datetime
from ..extensions import db

class AuditLog(db.Model):
    __tablename__ = "audit_logs"

    id = db.Column(db.Integer, primary_key=True)

    # Who performed the action (nullable for system / unauthenticated calls)
    actor_id = db.Column(db.String(64), nullable=True, index=True)
    actor_role = db.Column(db.String(30), nullable=True)

    # What happened
    action = db.Column(db.String(80), nullable=False, index=True)  # e.g. ELECTION_CREATED
    entity_type = db.Column(db.String(50), nullable=True, index=True)  # e.g. ELECTION, VOTE, RESULT
    entity_id = db.Column(db.Integer, nullable=True, index=True)

    # Request context
    ip_address = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)

    details = db.Column(db.JSON, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

from datetime import datetime
from ..extensions import db
from ..errors import InvalidStateError


class Election(db.Model):
    __tablename__ = "elections"

    STATUS_DRAFT = "DRAFT"
    STATUS_PUBLISHED = "PUBLISHED"
    STATUS_OPEN = "OPEN"
    STATUS_CLOSED = "CLOSED"
    STATUS_ARCHIVED = "ARCHIVED"
    VALID_STATUSES = (STATUS_DRAFT, STATUS_PUBLISHED, STATUS_OPEN, STATUS_CLOSED, STATUS_ARCHIVED)

    # Only consulted when strict transitions are enabled
    ALLOWED_TRANSITIONS = {
        STATUS_DRAFT: (STATUS_PUBLISHED, STATUS_OPEN),
        STATUS_PUBLISHED: (STATUS_OPEN,),
        STATUS_OPEN: (STATUS_CLOSED,),
        STATUS_CLOSED: (STATUS_ARCHIVED,),
        STATUS_ARCHIVED: (),
    }

    id = db.Column(db.Integer, primary_key=True)

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    start_at = db.Column(db.DateTime, nullable=True)
    end_at = db.Column(db.DateTime, nullable=True)

    status = db.Column(db.String(20), nullable=False, default=STATUS_DRAFT, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    candidates = db.relationship(
        "ElectionCandidate",
        backref="election",
        lazy=True,
        cascade="all, delete-orphan",
        order_by="ElectionCandidate.candidate_id",
    )

    @property
    def candidate_ids(self) -> list[int]:
        return [c.candidate_id for c in self.candidates]

    def has_candidate(self, candidate_id: int) -> bool:
        return candidate_id in self.candidate_ids

    def can_edit(self) -> bool:
        return self.status == self.STATUS_DRAFT

    def transition_to(self, new_status: str, strict: bool = False) -> bool:
        """
        Move to ``new_status``. Returns False when the status is unchanged.

        A non-draft election never returns to DRAFT. With ``strict`` the
        transition table is enforced as well.
        """
        if new_status == self.status:
            return False
        if new_status == self.STATUS_DRAFT:
            raise InvalidStateError(f"Election cannot return to DRAFT from {self.status}")
        if strict and new_status not in self.ALLOWED_TRANSITIONS[self.status]:
            raise InvalidStateError(f"Transition {self.status} -> {new_status} is not allowed")
        self.status = new_status
        return True

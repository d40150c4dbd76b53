from ..extensions import db


class ElectionCandidate(db.Model):
    __tablename__ = "election_candidates"

    id = db.Column(db.Integer, primary_key=True)
    election_id = db.Column(db.Integer, db.ForeignKey("elections.id", ondelete="CASCADE"), nullable=False, index=True)

    # Owned by the elector registry; stored as an opaque reference
    candidate_id = db.Column(db.Integer, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("election_id", "candidate_id", name="uq_election_candidates_election_candidate"),
    )

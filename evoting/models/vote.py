from datetime import datetime
from ..extensions import db


class Vote(db.Model):
    __tablename__ = "votes"

    id = db.Column(db.Integer, primary_key=True)

    # References into the election registry and voter directory, not owned here
    election_id = db.Column(db.Integer, nullable=False, index=True)
    voter_id = db.Column(db.Integer, nullable=False, index=True)
    candidate_id = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        # One vote per voter per election, enforced by the database
        db.UniqueConstraint("election_id", "voter_id", name="uq_votes_election_voter"),
    )

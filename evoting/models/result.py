from datetime import datetime
from ..extensions import db


class Result(db.Model):
    __tablename__ = "results"

    id = db.Column(db.Integer, primary_key=True)

    election_id = db.Column(db.Integer, nullable=False, index=True)
    candidate_id = db.Column(db.Integer, nullable=False)
    vote_count = db.Column(db.Integer, nullable=False, default=0)

    calculated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint("vote_count >= 0", name="ck_results_vote_count_non_negative"),
    )

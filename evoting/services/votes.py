from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import DuplicateVoteError, ValidationError
from ..extensions import db
from ..models.vote import Vote
from ..utils.audit import audit_log, safe_audit


def _positive_id(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"Invalid {name}: {value!r}")
    return value


class VoteLedger:
    """
    Append-only record of cast votes.

    One vote per (election, voter) is guaranteed by the ``uq_votes_election_voter``
    constraint; the insert is the check.
    """

    def cast_vote(self, voter_id: int, election_id: int, candidate_id: int) -> Vote:
        voter_id = _positive_id("voter id", voter_id)
        election_id = _positive_id("election id", election_id)
        candidate_id = _positive_id("candidate id", candidate_id)

        vote = Vote(election_id=election_id, voter_id=voter_id, candidate_id=candidate_id)
        try:
            db.session.add(vote)
            db.session.flush()  # unique constraint fires here

            audit_log(
                action="VOTE_CAST",
                entity_type="VOTE",
                entity_id=vote.id,
                details={"election_id": election_id, "voter_id": voter_id},
            )
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            if not self.has_voted(voter_id, election_id):
                current_app.logger.exception("Integrity error recording vote in election %s", election_id)
                raise

            current_app.logger.info(
                "Duplicate vote attempt election_id=%s voter_id=%s", election_id, voter_id
            )
            safe_audit(
                action="VOTE_DUPLICATE_ATTEMPT",
                entity_type="VOTE",
                details={"election_id": election_id, "voter_id": voter_id},
            )
            raise DuplicateVoteError("You have already voted in this election") from None
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("DB error while casting vote in election %s", election_id)
            raise

        return vote

    def has_voted(self, voter_id: int, election_id: int) -> Vote | None:
        return Vote.query.filter_by(election_id=election_id, voter_id=voter_id).first()

    def get_votes_by_voter(self, voter_id: int) -> list[Vote]:
        return (
            Vote.query
            .filter_by(voter_id=voter_id)
            .order_by(Vote.created_at.asc(), Vote.id.asc())
            .all()
        )

    def tally(self, election_id: int) -> dict[int, int]:
        """Per-candidate vote counts; candidates without votes are absent."""
        try:
            rows = (
                db.session.query(
                    Vote.candidate_id.label("candidate_id"),
                    func.count(Vote.id).label("votes"),
                )
                .filter(Vote.election_id == election_id)
                .group_by(Vote.candidate_id)
                .all()
            )
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("DB error tallying election %s", election_id)
            raise

        return {int(row.candidate_id): int(row.votes) for row in rows}

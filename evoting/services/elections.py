from datetime import datetime

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import EvotingError, InvalidStateError, NotFoundError, ValidationError
from ..extensions import db
from ..models.election import Election
from ..models.election_candidate import ElectionCandidate
from ..utils.audit import audit_log


def _candidate_id(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"Invalid candidate id: {value!r}")
    return value


class ElectionRegistry:
    """
    Owns election rows: identity, the status state machine and the
    candidate membership set.
    """

    def __init__(self, strict_transitions: bool | None = None):
        self._strict_transitions = strict_transitions

    @property
    def strict_transitions(self) -> bool:
        if self._strict_transitions is not None:
            return self._strict_transitions
        return bool(current_app.config.get("ELECTION_STRICT_TRANSITIONS", False))

    def create_election(
        self,
        title: str,
        description: str | None = None,
        start_at: datetime | None = None,
        end_at: datetime | None = None,
        candidate_ids=(),
    ) -> Election:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Election title is required")
        if start_at and end_at and end_at <= start_at:
            raise ValidationError("Election end must be after its start")

        unique_ids = sorted({_candidate_id(cid) for cid in (candidate_ids or ())})

        election = Election(
            title=title,
            description=description or None,
            start_at=start_at,
            end_at=end_at,
            status=Election.STATUS_DRAFT,
        )
        election.candidates = [ElectionCandidate(candidate_id=cid) for cid in unique_ids]

        try:
            db.session.add(election)
            db.session.flush()

            audit_log(
                action="ELECTION_CREATED",
                entity_type="ELECTION",
                entity_id=election.id,
                details={"title": election.title, "candidate_ids": unique_ids},
            )
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("DB error creating election")
            raise

        current_app.logger.info("Election %s created (%d candidates)", election.id, len(unique_ids))
        return election

    def get_election(self, election_id: int) -> Election:
        election = db.session.get(Election, election_id)
        if not election:
            raise NotFoundError(f"Election {election_id} not found")
        return election

    def _get_for_update(self, election_id: int) -> Election:
        election = (
            db.session.query(Election)
            .filter(Election.id == election_id)
            .with_for_update()
            .first()
        )
        if not election:
            db.session.rollback()
            raise NotFoundError(f"Election {election_id} not found")
        return election

    def list_elections(self) -> list[Election]:
        return Election.query.order_by(Election.created_at.desc(), Election.id.desc()).all()

    def get_public_elections(self) -> list[Election]:
        return Election.query.filter_by(status=Election.STATUS_OPEN).all()

    def add_candidate(self, election_id: int, candidate_id: int) -> Election:
        candidate_id = _candidate_id(candidate_id)
        election = self._get_for_update(election_id)

        try:
            if not election.can_edit():
                raise InvalidStateError(
                    f"Candidates can only be added while DRAFT (election {election_id} is {election.status})"
                )
            if election.has_candidate(candidate_id):
                db.session.rollback()
                return election

            election.candidates.append(ElectionCandidate(candidate_id=candidate_id))
            audit_log(
                action="ELECTION_CANDIDATE_ADDED",
                entity_type="ELECTION",
                entity_id=election.id,
                details={"candidate_id": candidate_id},
            )
            db.session.commit()
        except IntegrityError:
            # Same candidate added concurrently; membership is a set
            db.session.rollback()
            return self.get_election(election_id)
        except EvotingError:
            db.session.rollback()
            raise
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("DB error adding candidate to election %s", election_id)
            raise

        return election

    def update_status(self, election_id: int, new_status: str) -> Election:
        new_status = (new_status or "").strip().upper()
        if new_status not in Election.VALID_STATUSES:
            raise ValidationError(
                f"Unknown election status: {new_status!r}",
                details={"allowed": list(Election.VALID_STATUSES)},
            )

        election = self._get_for_update(election_id)
        previous = election.status

        try:
            changed = election.transition_to(new_status, strict=self.strict_transitions)
            if changed:
                audit_log(
                    action="ELECTION_STATUS_CHANGED",
                    entity_type="ELECTION",
                    entity_id=election.id,
                    details={"from_status": previous, "to_status": new_status},
                )
            db.session.commit()
        except EvotingError:
            db.session.rollback()
            raise
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("DB error updating status of election %s", election_id)
            raise

        if changed:
            current_app.logger.info("Election %s status %s -> %s", election_id, previous, new_status)
        return election

    def delete_election(self, election_id: int) -> None:
        election = self._get_for_update(election_id)

        try:
            if election.status != Election.STATUS_DRAFT:
                raise InvalidStateError(
                    f"Only DRAFT elections can be deleted (election {election_id} is {election.status})"
                )

            audit_log(
                action="ELECTION_DELETED",
                entity_type="ELECTION",
                entity_id=election.id,
                details={"title": election.title},
            )
            db.session.delete(election)
            db.session.commit()
        except EvotingError:
            db.session.rollback()
            raise
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("DB error deleting election %s", election_id)
            raise

        current_app.logger.info("Election %s deleted", election_id)

    def ensure_votable(self, election_id: int, candidate_id: int) -> Election:
        """Raise unless ``election_id`` is OPEN and lists ``candidate_id``."""
        election = self.get_election(election_id)
        if election.status != Election.STATUS_OPEN:
            raise InvalidStateError(f"Election {election_id} is not open for voting")
        if not election.has_candidate(candidate_id):
            raise ValidationError(f"Candidate {candidate_id} is not standing in election {election_id}")
        return election

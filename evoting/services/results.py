from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..errors import ValidationError
from ..extensions import db
from ..models.result import Result
from ..utils.audit import audit_log


def normalize_counts(counts) -> dict[int, int]:
    """Coerce ``{candidate_id: count}`` (JSON keys arrive as strings) to ints."""
    normalized = {}
    for raw_candidate, raw_count in dict(counts or {}).items():
        try:
            candidate_id = int(raw_candidate)
            count = int(raw_count)
        except (TypeError, ValueError):
            raise ValidationError(
                f"Invalid result entry {raw_candidate!r}: {raw_count!r}"
            ) from None
        if isinstance(raw_count, bool) or count < 0:
            raise ValidationError(f"Vote count for candidate {candidate_id} must be a non-negative integer")
        normalized[candidate_id] = count
    return normalized


class ResultStore:
    def __init__(self, replace_on_publish: bool | None = None):
        self._replace_on_publish = replace_on_publish

    @property
    def replace_on_publish(self) -> bool:
        if self._replace_on_publish is not None:
            return self._replace_on_publish
        return bool(current_app.config.get("RESULTS_REPLACE_ON_PUBLISH", True))

    def publish_results(self, election_id: int, counts) -> None:
        """
        Persist one row per candidate.

        In replace mode the election's previous rows are deleted in the same
        transaction, so publishing twice leaves one set of rows. In append mode
        every publish adds rows.
        """
        counts = normalize_counts(counts)
        replace = self.replace_on_publish
        calculated_at = datetime.utcnow()

        try:
            if replace:
                db.session.query(Result).filter(Result.election_id == election_id).delete(
                    synchronize_session=False
                )

            db.session.add_all([
                Result(
                    election_id=election_id,
                    candidate_id=candidate_id,
                    vote_count=count,
                    calculated_at=calculated_at,
                )
                for candidate_id, count in sorted(counts.items())
            ])

            audit_log(
                action="RESULTS_PUBLISHED",
                entity_type="ELECTION",
                entity_id=election_id,
                details={
                    "mode": "replace" if replace else "append",
                    "candidates": len(counts),
                    "total_votes": sum(counts.values()),
                },
            )
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("DB error publishing results for election %s", election_id)
            raise

        current_app.logger.info(
            "Published %d result rows for election %s (%s)",
            len(counts), election_id, "replace" if replace else "append",
        )

    def get_results(self, election_id: int) -> list[Result]:
        return (
            Result.query
            .filter_by(election_id=election_id)
            .order_by(Result.candidate_id.asc(), Result.id.asc())
            .all()
        )

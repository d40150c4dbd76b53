"""
Close -> tally -> publish -> archive, across components that each commit on
their own.

There is no shared transaction and no compensation: a failed step leaves
whatever the earlier steps committed (typically a CLOSED election without
results) and the run can be re-driven from the start. Close and archive are
same-status no-ops on a re-run; publish is idempotent when the result store
replaces rows.
"""

import threading
from dataclasses import dataclass, field

from flask import current_app

from ..clients import ElectionServiceClient, ResultServiceClient, VoteServiceClient
from ..errors import InvalidStateError, PublishStepError
from ..models.election import Election
from .elections import ElectionRegistry
from .results import ResultStore
from .votes import VoteLedger

STEP_CLOSE = "close"
STEP_TALLY = "tally"
STEP_PUBLISH = "publish"
STEP_ARCHIVE = "archive"
PUBLISH_STEPS = (STEP_CLOSE, STEP_TALLY, STEP_PUBLISH, STEP_ARCHIVE)

# Statuses a guarded run may start from; CLOSED resumes an interrupted run
RESUMABLE_STATUSES = (Election.STATUS_OPEN, Election.STATUS_CLOSED)

_locks_guard = threading.Lock()
_election_locks: dict = {}


def _election_lock(election_id) -> threading.Lock:
    with _locks_guard:
        return _election_locks.setdefault(election_id, threading.Lock())


@dataclass
class PublishReport:
    election_id: int
    status: str | None = None
    counts: dict = field(default_factory=dict)
    completed_steps: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "election_id": self.election_id,
            "status": self.status,
            "counts": {str(cid): n for cid, n in sorted(self.counts.items())},
            "completed_steps": list(self.completed_steps),
        }


class PublishOrchestrator:
    """
    Drives the publish saga through three ports:

    - ``elections``: ``get_election(id)`` and ``update_status(id, status)``
      returning an object with ``.status``
    - ``votes``: ``tally(id) -> {candidate_id: count}``
    - ``results``: ``publish_results(id, counts)``

    The in-process services and the HTTP clients both satisfy these.
    """

    def __init__(self, elections, votes, results, status_guard: bool = False):
        self._elections = elections
        self._votes = votes
        self._results = results
        self._status_guard = status_guard

    def run(self, election_id: int) -> PublishReport:
        with _election_lock(election_id):
            return self._run(election_id)

    def _run(self, election_id: int) -> PublishReport:
        # Unknown elections fail here, before anything is committed
        election = self._elections.get_election(election_id)
        if self._status_guard and election.status not in RESUMABLE_STATUSES:
            raise InvalidStateError(
                f"Election {election_id} is {election.status}; publish requires OPEN or CLOSED"
            )

        report = PublishReport(election_id=election_id, status=election.status)
        current_app.logger.info("Publish of election %s started (status=%s)", election_id, election.status)

        for step in PUBLISH_STEPS:
            try:
                getattr(self, f"_step_{step}")(report)
            except Exception as exc:
                status = self._observe_status(election_id)
                current_app.logger.error(
                    "Publish of election %s failed at step %s (status=%s): %s",
                    election_id, step, status, exc,
                )
                raise PublishStepError(
                    election_id=election_id,
                    failed_step=step,
                    completed_steps=report.completed_steps,
                    election_status=status,
                    reason=str(exc),
                ) from exc
            report.completed_steps.append(step)

        current_app.logger.info(
            "Publish of election %s completed: %d candidates, %d votes",
            election_id, len(report.counts), sum(report.counts.values()),
        )
        return report

    def _step_close(self, report: PublishReport) -> None:
        report.status = self._elections.update_status(report.election_id, Election.STATUS_CLOSED).status

    def _step_tally(self, report: PublishReport) -> None:
        report.counts = dict(self._votes.tally(report.election_id))

    def _step_publish(self, report: PublishReport) -> None:
        self._results.publish_results(report.election_id, report.counts)

    def _step_archive(self, report: PublishReport) -> None:
        report.status = self._elections.update_status(report.election_id, Election.STATUS_ARCHIVED).status

    def _observe_status(self, election_id: int) -> str | None:
        try:
            return self._elections.get_election(election_id).status
        except Exception:
            current_app.logger.exception("Could not read status of election %s after failed step", election_id)
            return None


def orchestrator_from_config(config) -> PublishOrchestrator:
    """
    Wire the orchestrator to in-process services, or to remote ones for each
    ``*_SERVICE_URL`` that is configured.
    """
    timeout = float(config.get("SERVICE_TIMEOUT_SECONDS", 5))
    token = config.get("SERVICE_AUTH_TOKEN")

    def _remote(url_key, client_cls, local):
        url = config.get(url_key)
        return client_cls(url, timeout=timeout, token=token) if url else local

    return PublishOrchestrator(
        elections=_remote("ELECTION_SERVICE_URL", ElectionServiceClient, ElectionRegistry()),
        votes=_remote("VOTE_SERVICE_URL", VoteServiceClient, VoteLedger()),
        results=_remote("RESULT_SERVICE_URL", ResultServiceClient, ResultStore()),
        status_guard=bool(config.get("PUBLISH_STATUS_GUARD", False)),
    )

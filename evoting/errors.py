from flask import jsonify, g, current_app
from werkzeug.exceptions import HTTPException


class EvotingError(Exception):
    """Base class for errors raised by the election, vote and result components."""

    code = "EVOTING_ERROR"
    status_code = 400

    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(EvotingError):
    code = "NOT_FOUND"
    status_code = 404


class InvalidStateError(EvotingError):
    code = "INVALID_STATE"
    status_code = 409


class ValidationError(EvotingError):
    code = "VALIDATION_ERROR"
    status_code = 400


class DuplicateVoteError(EvotingError):
    # Distinct code so clients can say "you already voted" instead of "try again"
    code = "ALREADY_VOTED"
    status_code = 409


class ServiceUnavailableError(EvotingError):
    code = "SERVICE_UNAVAILABLE"
    status_code = 503


class PublishStepError(EvotingError):
    """
    Raised by the publish orchestrator when one step of the
    close -> tally -> publish -> archive sequence fails.

    Steps that already committed are not undone; ``election_status`` is the
    status observed after the failure so an operator knows where to resume.
    """

    code = "PUBLISH_STEP_FAILED"
    status_code = 502

    def __init__(self, election_id, failed_step: str, completed_steps, election_status, reason: str):
        self.election_id = election_id
        self.failed_step = failed_step
        self.completed_steps = list(completed_steps)
        self.election_status = election_status
        self.reason = reason
        super().__init__(
            f"Publish of election {election_id} failed at step '{failed_step}'",
            details={
                "election_id": election_id,
                "failed_step": failed_step,
                "completed_steps": self.completed_steps,
                "election_status": election_status,
                "reason": reason,
            },
        )


ERRORS_BY_CODE = {
    cls.code: cls
    for cls in (NotFoundError, InvalidStateError, ValidationError, DuplicateVoteError, ServiceUnavailableError)
}


def _payload(code: str, message: str, details=None, status=400):
    return (
        jsonify({
            "success": False,
            "error": {
                "code": code,
                "message": message,
                "details": details or None,
            },
            "request_id": getattr(g, "request_id", None),
        }),
        status,
    )


def register_error_handlers(app):
    @app.errorhandler(EvotingError)
    def handle_domain_error(e: EvotingError):
        if e.status_code >= 500:
            current_app.logger.error(
                "%s request_id=%s: %s", e.code, getattr(g, "request_id", None), e.message
            )
        return _payload(code=e.code, message=e.message, details=e.details, status=e.status_code)

    # Generic HTTP errors (404, 403, 401, etc.)
    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        desc = e.description

        # If we pass structured error info via abort(description=dict)
        if isinstance(desc, dict):
            code = desc.get("code") or e.name.replace(" ", "_").upper()
            message = desc.get("message") or e.name
            details = desc.get("errors") or desc.get("details")
            return _payload(code=code, message=message, details=details, status=e.code or 400)

        return _payload(
            code=e.name.replace(" ", "_").upper(),
            message=desc or e.name,
            details=None,
            status=e.code or 400
        )

    @app.errorhandler(404)
    def handle_404(_):
        return _payload("NOT_FOUND", "Resource not found", status=404)

    @app.errorhandler(500)
    def handle_500(_):
        # Don't leak internals
        return _payload("INTERNAL_SERVER_ERROR", "An unexpected error occurred", status=500)

from .election import Election  # noqa: F401
from .election_candidate import ElectionCandidate  # noqa: F401
from .vote import Vote  # noqa: F401
from .result import Result  # noqa: F401
from .audit_log import AuditLog  # noqa: F401

# Import ALL models so SQLAlchemy registers them

__all__ = [
    "Election",
    "ElectionCandidate",
    "Vote",
    "Result",
    "AuditLog",
]

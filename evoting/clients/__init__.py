from .base import ServiceClient  # noqa: F401
from .elections import ElectionServiceClient, RemoteElection  # noqa: F401
from .votes import VoteServiceClient  # noqa: F401
from .results import ResultServiceClient  # noqa: F401

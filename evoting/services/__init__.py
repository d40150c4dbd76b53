from .elections import ElectionRegistry
from .votes import VoteLedger
from .results import ResultStore
from .orchestrator import PublishOrchestrator, PublishReport, orchestrator_from_config

__all__ = [
    "ElectionRegistry",
    "VoteLedger",
    "ResultStore",
    "PublishOrchestrator",
    "PublishReport",
    "orchestrator_from_config",
]

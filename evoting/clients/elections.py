from dataclasses import dataclass, field

from .base import ServiceClient


@dataclass(frozen=True)
class RemoteElection:
    id: int
    title: str
    status: str
    description: str | None = None
    candidate_ids: list = field(default_factory=list)

    @classmethod
    def from_json(cls, data: dict) -> "RemoteElection":
        return cls(
            id=int(data["id"]),
            title=data.get("title") or "",
            status=data["status"],
            description=data.get("description"),
            candidate_ids=[int(c) for c in data.get("candidate_ids") or []],
        )


class ElectionServiceClient(ServiceClient):
    """Election registry operations the publish orchestrator needs, over HTTP."""

    def get_election(self, election_id: int) -> RemoteElection:
        body = self._request("GET", f"/api/elections/{election_id}")
        return RemoteElection.from_json(body["election"])

    def update_status(self, election_id: int, new_status: str) -> RemoteElection:
        body = self._request("PUT", f"/api/elections/{election_id}/status", json={"status": new_status})
        return RemoteElection.from_json(body["election"])

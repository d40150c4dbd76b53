from .base import ServiceClient


class VoteServiceClient(ServiceClient):
    def tally(self, election_id: int) -> dict[int, int]:
        body = self._request("GET", f"/api/votes/{election_id}/tally")
        return {int(cid): int(count) for cid, count in (body.get("counts") or {}).items()}

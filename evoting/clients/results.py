from .base import ServiceClient


class ResultServiceClient(ServiceClient):
    def publish_results(self, election_id: int, counts) -> None:
        payload = {"counts": {str(cid): int(count) for cid, count in dict(counts).items()}}
        self._request("POST", f"/api/results/{election_id}/publish", json=payload)

    def get_results(self, election_id: int) -> list[dict]:
        body = self._request("GET", f"/api/results/{election_id}")
        return body.get("results") or []

import requests
from flask import current_app, has_app_context

from ..errors import ERRORS_BY_CODE, EvotingError, ServiceUnavailableError

DEFAULT_TIMEOUT_SECONDS = 5.0


class ServiceClient:
    """
    Minimal JSON client for a remote election/vote/result component.

    Every call carries a bounded timeout and is never retried: timeouts and
    connection failures surface as ``ServiceUnavailableError``, and the remote
    error envelope is mapped back onto the local exception classes.
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS, token: str | None = None, session=None):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    def _request(self, method: str, path: str, **kwargs):
        url = f"{self._base_url}{path}"
        try:
            resp = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.exceptions.Timeout as exc:
            raise ServiceUnavailableError(f"{method} {url} timed out after {self._timeout}s") from exc
        except requests.exceptions.ConnectionError as exc:
            raise ServiceUnavailableError(f"{method} {url} could not connect") from exc

        if resp.status_code >= 400:
            raise self._error_from(method, url, resp)
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    @staticmethod
    def _error_from(method: str, url: str, resp) -> EvotingError:
        try:
            body = resp.json()
        except ValueError:
            body = None

        error = body.get("error") if isinstance(body, dict) else None
        error = error if isinstance(error, dict) else {}
        message = error.get("message") or f"{method} {url} returned HTTP {resp.status_code}"

        if has_app_context():
            current_app.logger.warning("%s %s -> %s %s", method, url, resp.status_code, error.get("code"))

        error_cls = ERRORS_BY_CODE.get(error.get("code"))
        if error_cls:
            return error_cls(message, details=error.get("details"))
        if resp.status_code >= 500:
            return ServiceUnavailableError(message)
        return EvotingError(message, details=error.get("details"))

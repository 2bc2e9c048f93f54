"""Daemon HTTP client shared by the collectors."""

from __future__ import annotations

import logging
from typing import Any

import requests

from roborev_tui.events import FetchFailed
from roborev_tui.exceptions import FetchError, MalformedResponse, TransportError

logger = logging.getLogger(__name__)

DEFAULT_SERVER = "http://127.0.0.1:7373"
DEFAULT_TIMEOUT = 10


class DaemonClient:
    """Thin JSON-over-HTTP client for the review daemon's read API."""

    def __init__(self, server_url: str = DEFAULT_SERVER, timeout: float = DEFAULT_TIMEOUT,
                 session: requests.Session | None = None):
        self.server_url = server_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``path`` and decode the body.

        Raises:
            TransportError: connection problems, timeouts and non-2xx answers.
            MalformedResponse: the body is not valid JSON.
        """
        url = f"{self.server_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.Timeout as exc:
            raise TransportError(f"request to {url} timed out after {self.timeout}s") from exc
        except requests.RequestException as exc:
            raise TransportError(f"cannot reach daemon at {self.server_url}: {exc}") from exc

        if response.status_code == 404:
            raise TransportError(f"HTTP 404 from {path}", status_code=404)
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise TransportError(
                f"HTTP {response.status_code} from {path}", status_code=response.status_code
            ) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponse(f"invalid JSON from {path}") from exc

    def close(self) -> None:
        self.session.close()


def failure_event(exc: FetchError, what: str) -> FetchFailed:
    logger.warning("%s fetch failed: %s", what, exc)
    return FetchFailed(message=str(exc), kind=exc.kind)

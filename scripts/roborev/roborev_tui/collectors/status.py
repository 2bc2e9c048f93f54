"""Daemon status collector (fail-soft)."""

from __future__ import annotations

from roborev_tui.collectors import DaemonClient, failure_event
from roborev_tui.events import FetchFailed, StatusFetched
from roborev_tui.exceptions import FetchError
from roborev_tui.models import DaemonStatus


def collect(client: DaemonClient) -> StatusFetched | FetchFailed:
    try:
        payload = client.get_json("/api/status")
        return StatusFetched(status=DaemonStatus.from_dict(payload))
    except FetchError as exc:
        return failure_event(exc, "status")

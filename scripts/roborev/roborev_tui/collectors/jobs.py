"""Job list collector (fail-soft)."""

from __future__ import annotations

from roborev_tui.collectors import DaemonClient, failure_event
from roborev_tui.events import FetchFailed, JobsFetched
from roborev_tui.exceptions import FetchError
from roborev_tui.models import parse_jobs


def collect(client: DaemonClient, limit: int = 50) -> JobsFetched | FetchFailed:
    try:
        payload = client.get_json("/api/jobs", params={"limit": limit})
        return JobsFetched(jobs=parse_jobs(payload))
    except FetchError as exc:
        return failure_event(exc, "jobs")

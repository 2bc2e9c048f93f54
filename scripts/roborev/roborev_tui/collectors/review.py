"""Single review collector (fail-soft).

A 404 from the daemon means the job has no stored review yet; that is reported
as ``ReviewNotFound`` ("no review found") rather than a generic HTTP failure.
"""

from __future__ import annotations

from roborev_tui.collectors import DaemonClient, failure_event
from roborev_tui.events import FetchFailed, ReviewFetched
from roborev_tui.exceptions import FetchError, ReviewNotFound, TransportError
from roborev_tui.models import Review


def collect(client: DaemonClient, job_id: int) -> ReviewFetched | FetchFailed:
    try:
        try:
            payload = client.get_json("/api/review", params={"job_id": job_id})
        except TransportError as exc:
            if exc.status_code == 404:
                raise ReviewNotFound(job_id) from exc
            raise
        return ReviewFetched(review=Review.from_dict(payload))
    except FetchError as exc:
        return failure_event(exc, f"review for job {job_id}")

from __future__ import annotations

import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest import mock
import sys

import requests

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from roborev_tui.collectors import DaemonClient  # noqa: E402
from roborev_tui.collectors.jobs import collect as collect_jobs  # noqa: E402
from roborev_tui.collectors.review import collect as collect_review  # noqa: E402
from roborev_tui.collectors.status import collect as collect_status  # noqa: E402
from roborev_tui.events import FetchFailed, JobsFetched, ReviewFetched, StatusFetched  # noqa: E402


def fake_response(payload=None, status_code: int = 200, bad_json: bool = False) -> mock.Mock:
    response = mock.Mock()
    response.status_code = status_code
    if bad_json:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return response


def client_returning(response: mock.Mock) -> tuple[DaemonClient, mock.Mock]:
    session = mock.Mock()
    session.get.return_value = response
    return DaemonClient("http://daemon.test:7373/", timeout=3, session=session), session


JOB_PAYLOAD = {
    "id": 7,
    "git_ref": "abc1234",
    "repo_name": "roborev",
    "agent": "codex",
    "status": "done",
    "started_at": "2024-05-01T10:00:00Z",
    "finished_at": "2024-05-01T10:01:30.5Z",
    "error": None,
    "repo_path": "/src/roborev",
    "commit_subject": "Fix daemon shutdown",
}


class JobsCollectorTests(unittest.TestCase):
    def test_parses_jobs_in_server_order(self):
        second = dict(JOB_PAYLOAD, id=3, status="queued", started_at=None, finished_at=None)
        client, session = client_returning(fake_response({"jobs": [JOB_PAYLOAD, second]}))
        event = collect_jobs(client, limit=50)
        self.assertIsInstance(event, JobsFetched)
        self.assertEqual([job.id for job in event.jobs], [7, 3])
        job = event.jobs[0]
        self.assertEqual(job.git_ref, "abc1234")
        self.assertEqual(job.started_at, datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc))
        self.assertEqual(job.error, "")
        self.assertEqual(job.to_dict()["repo_path"], "/src/roborev")
        self.assertEqual(job.to_dict()["commit_subject"], "Fix daemon shutdown")
        self.assertIsNone(event.jobs[1].started_at)
        session.get.assert_called_once_with(
            "http://daemon.test:7373/api/jobs", params={"limit": 50}, timeout=3
        )

    def test_null_job_list_is_empty(self):
        client, _ = client_returning(fake_response({"jobs": None}))
        self.assertEqual(collect_jobs(client).jobs, ())

    def test_connection_failure(self):
        session = mock.Mock()
        session.get.side_effect = requests.ConnectionError("connection refused")
        client = DaemonClient("http://daemon.test:7373", session=session)
        event = collect_jobs(client)
        self.assertIsInstance(event, FetchFailed)
        self.assertEqual(event.kind, "transport")
        self.assertIn("cannot reach daemon", event.message)

    def test_timeout(self):
        session = mock.Mock()
        session.get.side_effect = requests.Timeout()
        event = collect_jobs(DaemonClient("http://daemon.test", timeout=2, session=session))
        self.assertEqual(event.kind, "transport")
        self.assertIn("timed out after 2s", event.message)

    def test_invalid_json(self):
        client, _ = client_returning(fake_response(bad_json=True))
        event = collect_jobs(client)
        self.assertEqual(event.kind, "malformed")

    def test_wrong_shape(self):
        for payload in ([], {"jobs": {"id": 1}}, {"jobs": [{"id": "seven"}]}, {"jobs": [{"status": "done"}]}):
            client, _ = client_returning(fake_response(payload))
            event = collect_jobs(client)
            self.assertIsInstance(event, FetchFailed, payload)
            self.assertEqual(event.kind, "malformed")

    def test_server_error(self):
        client, _ = client_returning(fake_response({}, status_code=500))
        event = collect_jobs(client)
        self.assertEqual(event.kind, "transport")
        self.assertEqual(event.message, "HTTP 500 from /api/jobs")


class StatusCollectorTests(unittest.TestCase):
    def test_parses_counts(self):
        payload = {
            "active_workers": 2,
            "max_workers": 4,
            "queued_jobs": 5,
            "running_jobs": 2,
            "completed_jobs": 40,
            "failed_jobs": 1,
        }
        client, session = client_returning(fake_response(payload))
        event = collect_status(client)
        self.assertIsInstance(event, StatusFetched)
        self.assertEqual(event.status.to_dict(), payload)
        self.assertEqual(session.get.call_args.args[0], "http://daemon.test:7373/api/status")

    def test_missing_counts_default_to_zero(self):
        client, _ = client_returning(fake_response({"max_workers": 4}))
        event = collect_status(client)
        self.assertEqual(event.status.max_workers, 4)
        self.assertEqual(event.status.queued_jobs, 0)

    def test_non_integer_count(self):
        client, _ = client_returning(fake_response({"queued_jobs": "many"}))
        self.assertEqual(collect_status(client).kind, "malformed")


class ReviewCollectorTests(unittest.TestCase):
    def test_parses_review_with_job(self):
        payload = {"id": 1, "job_id": 7, "agent": "codex", "output": "LGTM\n", "job": JOB_PAYLOAD}
        client, session = client_returning(fake_response(payload))
        event = collect_review(client, 7)
        self.assertIsInstance(event, ReviewFetched)
        self.assertEqual(event.review.output, "LGTM\n")
        self.assertEqual(event.review.job.id, 7)
        session.get.assert_called_once_with(
            "http://daemon.test:7373/api/review", params={"job_id": 7}, timeout=3
        )

    def test_review_without_job(self):
        client, _ = client_returning(fake_response({"agent": "codex", "output": "ok"}))
        review = collect_review(client, 2).review
        self.assertIsNone(review.job)

    def test_not_found(self):
        client, _ = client_returning(fake_response({"error": "not found"}, status_code=404))
        event = collect_review(client, 9)
        self.assertIsInstance(event, FetchFailed)
        self.assertEqual(event.kind, "not_found")
        self.assertEqual(event.message, "no review found")

    def test_connection_failure(self):
        session = mock.Mock()
        session.get.side_effect = requests.ConnectionError("reset")
        event = collect_review(DaemonClient(session=session), 9)
        self.assertEqual(event.kind, "transport")


if __name__ == "__main__":
    unittest.main()

"""Shared model contracts for the review queue dashboard."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from roborev_tui.exceptions import MalformedResponse
from roborev_tui.formatting import parse_iso_timestamp

if TYPE_CHECKING:
    from roborev_tui.events import FetchFailed

JOB_QUEUED = "queued"
JOB_RUNNING = "running"
JOB_DONE = "done"
JOB_FAILED = "failed"

JOB_STATUSES = (JOB_QUEUED, JOB_RUNNING, JOB_DONE, JOB_FAILED)


def _require_object(payload: Any, what: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise MalformedResponse(f"expected {what} object, got {type(payload).__name__}")
    return payload


def _int_field(payload: dict[str, Any], key: str, default: int | None = None) -> int:
    value = payload.get(key, default)
    # bool is an int subclass; a JSON true is never a count or an id
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedResponse(f"field {key!r} must be an integer, got {value!r}")
    return value


def _str_field(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    return str(value)


def _time_field(payload: dict[str, Any], key: str) -> datetime | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise MalformedResponse(f"field {key!r} must be a timestamp string, got {value!r}")
    return parse_iso_timestamp(value)


@dataclass(frozen=True)
class Job:
    id: int
    git_ref: str = ""
    repo_name: str = ""
    agent: str = ""
    status: str = JOB_QUEUED
    started_at: datetime | None = None
    finished_at: datetime | None = None
    error: str = ""
    repo_path: str = ""
    commit_subject: str = ""

    @classmethod
    def from_dict(cls, payload: Any) -> "Job":
        data = _require_object(payload, "job")
        return cls(
            id=_int_field(data, "id"),
            git_ref=_str_field(data, "git_ref"),
            repo_name=_str_field(data, "repo_name"),
            agent=_str_field(data, "agent"),
            status=_str_field(data, "status"),
            started_at=_time_field(data, "started_at"),
            finished_at=_time_field(data, "finished_at"),
            error=_str_field(data, "error"),
            repo_path=_str_field(data, "repo_path"),
            commit_subject=_str_field(data, "commit_subject"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "git_ref": self.git_ref,
            "repo_name": self.repo_name,
            "agent": self.agent,
            "status": self.status,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "error": self.error,
            "repo_path": self.repo_path,
            "commit_subject": self.commit_subject,
        }


@dataclass(frozen=True)
class DaemonStatus:
    active_workers: int = 0
    max_workers: int = 0
    queued_jobs: int = 0
    running_jobs: int = 0
    completed_jobs: int = 0
    failed_jobs: int = 0

    @classmethod
    def from_dict(cls, payload: Any) -> "DaemonStatus":
        data = _require_object(payload, "status")
        return cls(
            active_workers=_int_field(data, "active_workers", 0),
            max_workers=_int_field(data, "max_workers", 0),
            queued_jobs=_int_field(data, "queued_jobs", 0),
            running_jobs=_int_field(data, "running_jobs", 0),
            completed_jobs=_int_field(data, "completed_jobs", 0),
            failed_jobs=_int_field(data, "failed_jobs", 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "active_workers": self.active_workers,
            "max_workers": self.max_workers,
            "queued_jobs": self.queued_jobs,
            "running_jobs": self.running_jobs,
            "completed_jobs": self.completed_jobs,
            "failed_jobs": self.failed_jobs,
        }


@dataclass(frozen=True)
class Review:
    agent: str
    output: str
    job: Job | None = None

    @classmethod
    def from_dict(cls, payload: Any) -> "Review":
        data = _require_object(payload, "review")
        job_payload = data.get("job")
        job = Job.from_dict(job_payload) if job_payload is not None else None
        return cls(
            agent=_str_field(data, "agent"),
            output=_str_field(data, "output"),
            job=job,
        )

    @classmethod
    def for_failed_job(cls, job: Job) -> "Review":
        """Build the review shown for a failed job from its stored error text."""
        return cls(agent=job.agent, output="Job failed:\n\n" + job.error, job=job)


def parse_jobs(payload: Any) -> tuple[Job, ...]:
    data = _require_object(payload, "jobs response")
    jobs = data.get("jobs")
    if jobs is None:
        return ()
    if not isinstance(jobs, list):
        raise MalformedResponse(f"field 'jobs' must be a list, got {type(jobs).__name__}")
    return tuple(Job.from_dict(item) for item in jobs)


@dataclass(frozen=True)
class QueueView:
    """The job list screen."""


@dataclass(frozen=True)
class ReviewView:
    """The detail screen; it cannot exist without the review it shows."""

    review: Review


ViewState = QueueView | ReviewView


@dataclass(frozen=True)
class AppState:
    view: ViewState = field(default_factory=QueueView)
    jobs: tuple[Job, ...] = ()
    status: DaemonStatus = field(default_factory=DaemonStatus)
    selected_index: int = 0
    review_scroll: int = 0
    width: int = 80
    height: int = 24
    # Last FetchFailed event; kept until a newer failure replaces it.
    error: FetchFailed | None = None

    @property
    def selected_job(self) -> Job | None:
        if not self.jobs:
            return None
        return self.jobs[self.selected_index]

    @property
    def in_review(self) -> bool:
        return isinstance(self.view, ReviewView)

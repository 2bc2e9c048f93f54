"""Events folded into the dashboard state and commands the state asks for.

Every input to the dashboard (a key, a resize, a timer tick, a fetch result)
arrives as one event. ``roborev_tui.state.step`` answers each event with a new
state and a tuple of commands; the runtime executes the commands and feeds
their outcomes back in as more events.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from roborev_tui.models import DaemonStatus, Job, Review


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class KeyPress:
    key: str


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class Tick:
    at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class JobsFetched:
    jobs: tuple[Job, ...]


@dataclass(frozen=True)
class StatusFetched:
    status: DaemonStatus


@dataclass(frozen=True)
class ReviewFetched:
    review: Review


@dataclass(frozen=True)
class FetchFailed:
    message: str
    kind: str = "transport"
    occurred_at: datetime = field(default_factory=_utcnow)


Event = KeyPress | Resize | Tick | JobsFetched | StatusFetched | ReviewFetched | FetchFailed


@dataclass(frozen=True)
class ScheduleTick:
    pass


@dataclass(frozen=True)
class FetchJobs:
    limit: int = 50


@dataclass(frozen=True)
class FetchStatus:
    pass


@dataclass(frozen=True)
class FetchReview:
    job_id: int


@dataclass(frozen=True)
class Quit:
    pass


Command = ScheduleTick | FetchJobs | FetchStatus | FetchReview | Quit

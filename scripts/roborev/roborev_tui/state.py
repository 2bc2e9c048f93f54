"""The dashboard state machine.

``step`` is the only place ``AppState`` changes. It is pure: given a state and
an event it returns the next state plus the commands to launch, and never does
I/O itself.
"""

from __future__ import annotations

from dataclasses import replace

from roborev_tui.events import (
    Command,
    Event,
    FetchFailed,
    FetchJobs,
    FetchReview,
    FetchStatus,
    JobsFetched,
    KeyPress,
    Quit,
    Resize,
    ReviewFetched,
    ScheduleTick,
    StatusFetched,
    Tick,
)
from roborev_tui.models import JOB_DONE, JOB_FAILED, AppState, QueueView, Review, ReviewView

DEFAULT_JOB_LIMIT = 50

UP_KEYS = {"up", "k"}
DOWN_KEYS = {"down", "j"}
QUIT_KEYS = {"q", "ctrl+c"}

Transition = tuple[AppState, tuple[Command, ...]]


def initial_commands(job_limit: int = DEFAULT_JOB_LIMIT) -> tuple[Command, ...]:
    return (ScheduleTick(), FetchJobs(limit=job_limit), FetchStatus())


def clamp_selection(selected: int, count: int) -> int:
    return max(0, min(selected, count - 1))


def step(state: AppState, event: Event, job_limit: int = DEFAULT_JOB_LIMIT) -> Transition:
    if isinstance(event, KeyPress):
        if state.in_review:
            return _review_key(state, event.key)
        return _queue_key(state, event.key)

    if isinstance(event, Resize):
        return replace(state, width=event.width, height=event.height), ()

    if isinstance(event, Tick):
        return state, initial_commands(job_limit)

    if isinstance(event, JobsFetched):
        jobs = tuple(event.jobs)
        selected = clamp_selection(state.selected_index, len(jobs))
        return replace(state, jobs=jobs, selected_index=selected), ()

    if isinstance(event, StatusFetched):
        return replace(state, status=event.status), ()

    if isinstance(event, ReviewFetched):
        return _open_review(state, event.review), ()

    if isinstance(event, FetchFailed):
        return replace(state, error=event), ()

    raise TypeError(f"unknown event: {event!r}")


def _open_review(state: AppState, review: Review) -> AppState:
    return replace(state, view=ReviewView(review=review), review_scroll=0)


def _queue_key(state: AppState, key: str) -> Transition:
    if key in QUIT_KEYS:
        return state, (Quit(),)

    if key in UP_KEYS:
        return replace(state, selected_index=max(0, state.selected_index - 1)), ()

    if key in DOWN_KEYS:
        selected = clamp_selection(state.selected_index + 1, len(state.jobs))
        return replace(state, selected_index=selected), ()

    if key == "enter":
        job = state.selected_job
        if job is None:
            return state, ()
        if job.status == JOB_DONE:
            return state, (FetchReview(job_id=job.id),)
        if job.status == JOB_FAILED:
            return _open_review(state, Review.for_failed_job(job)), ()

    return state, ()


def _review_key(state: AppState, key: str) -> Transition:
    if key in QUIT_KEYS or key == "esc":
        return replace(state, view=QueueView(), review_scroll=0), ()

    if key in UP_KEYS:
        return replace(state, review_scroll=max(0, state.review_scroll - 1)), ()

    # Upper bound depends on the wrap width, so the renderer clamps it.
    if key in DOWN_KEYS:
        return replace(state, review_scroll=state.review_scroll + 1), ()

    return state, ()

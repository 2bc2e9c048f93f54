"""Queue screen header: title, daemon status line and the last fetch error."""

from __future__ import annotations

from datetime import datetime

from rich.text import Text

from roborev_tui.formatting import compact_relative_age
from roborev_tui.models import AppState
from roborev_tui.panels import add_line, add_title


def status_line(state: AppState) -> str:
    status = state.status
    return (
        f"Workers: {status.active_workers}/{status.max_workers} | "
        f"Queued: {status.queued_jobs} | "
        f"Running: {status.running_jobs} | "
        f"Done: {status.completed_jobs} | "
        f"Failed: {status.failed_jobs} | "
        f"Size: {state.width}x{state.height}"
    )


def error_line(state: AppState, now: datetime) -> str:
    if state.error is None:
        return ""
    age = compact_relative_age((now - state.error.occurred_at).total_seconds())
    return f"Error: {state.error.message} ({age})"


def render(frame: Text, state: AppState, now: datetime) -> None:
    add_title(frame, "RoboRev Queue")
    add_line(frame, status_line(state), "status")
    add_line(frame)
    error = error_line(state, now)
    if error:
        add_line(frame, error, "error")

"""Queue screen renderer."""

from __future__ import annotations

from datetime import datetime

from rich.text import Text

from roborev_tui.formatting import job_elapsed, truncate, truncate_ellipsis
from roborev_tui.layout import queue_capacity, visible_window
from roborev_tui.models import AppState, Job
from roborev_tui.panels import STATUS_COLUMN_WIDTH, add_help, add_line, status_style, style_for
from roborev_tui.panels import header

HELP = "up/down: navigate | enter: view review | q: quit"
COLUMNS = f"  {'ID':<4} {'Ref':<17} {'Repo':<15} {'Agent':<12} {'Status':<8} Time"


def job_line(job: Job, now: datetime, selected: bool = False) -> Text:
    line = Text(style=style_for("selected") if selected else "")
    line.append("> " if selected else "  ")
    line.append(
        f"{job.id:<4d} "
        f"{truncate(job.git_ref, 17):<17} "
        f"{truncate_ellipsis(job.repo_name, 15):<15} "
        f"{truncate(job.agent, 12):<12} "
    )
    line.append(job.status, style=status_style(job.status))
    line.append(" " * max(0, STATUS_COLUMN_WIDTH - len(job.status)))
    line.append(f" {job_elapsed(job.started_at, job.finished_at, now)}")
    return line


def render(frame: Text, state: AppState, now: datetime) -> None:
    header.render(frame, state, now)

    if not state.jobs:
        add_line(frame, "No jobs in queue")
        add_help(frame, HELP)
        return

    add_line(frame, COLUMNS, "status")
    add_line(frame, "  " + "-" * min(state.width - 4, 78))

    extra = 1 if state.error is not None else 0
    capacity = queue_capacity(state.height, extra)
    start, end = visible_window(len(state.jobs), capacity, state.selected_index)
    for index in range(start, end):
        add_line(frame, job_line(state.jobs[index], now, selected=index == state.selected_index))

    if len(state.jobs) > capacity:
        add_line(frame, f"[showing {start + 1}-{end} of {len(state.jobs)}]", "status")

    add_help(frame, HELP)

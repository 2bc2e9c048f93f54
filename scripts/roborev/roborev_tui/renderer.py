"""Frame rendering: one pure function from state to a styled text frame."""

from __future__ import annotations

from datetime import datetime, timezone

from rich.text import Text

from roborev_tui.models import AppState, ReviewView
from roborev_tui.panels import new_frame
from roborev_tui.panels import queue as queue_screen
from roborev_tui.panels import review as review_screen


def render_frame(state: AppState, now: datetime | None = None) -> Text:
    now = now or datetime.now(timezone.utc)
    frame = new_frame()
    if isinstance(state.view, ReviewView):
        review_screen.render(frame, state, state.view.review)
    else:
        queue_screen.render(frame, state, now)
    return frame

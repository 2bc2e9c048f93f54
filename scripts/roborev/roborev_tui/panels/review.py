"""Review screen renderer."""

from __future__ import annotations

from rich.text import Text

from roborev_tui.formatting import truncate, wrap_text
from roborev_tui.layout import review_viewport, review_wrap_width, scroll_window
from roborev_tui.models import AppState, Review
from roborev_tui.panels import add_help, add_line, add_title

HELP = "up/down: scroll | esc/q: back"


def title_for(review: Review) -> str:
    if review.job is None:
        return "Review"
    return f"Review: {truncate(review.job.git_ref, 17)} ({review.agent})"


def render(frame: Text, state: AppState, review: Review) -> None:
    add_title(frame, title_for(review))

    # Wrapped fresh each frame; the width may have changed since the last one.
    lines = wrap_text(review.output, review_wrap_width(state.width))
    viewport = review_viewport(state.height)
    start, end = scroll_window(len(lines), viewport, state.review_scroll)
    for line in lines[start:end]:
        add_line(frame, line)

    if len(lines) > viewport:
        add_line(frame, f"[{start + 1}-{end} of {len(lines)} lines]", "status")

    add_help(frame, HELP)

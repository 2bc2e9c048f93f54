"""Screen rendering helpers.

Styling lives here and only here: state carries semantic values (a job status,
a selected row) and these tables map them to rich styles at render time.
"""

from __future__ import annotations

from rich.text import Text

ROLE_STYLE = {
    "title": "bold color(205)",
    "status": "color(241)",
    "selected": "bold color(212)",
    "help": "color(241)",
    "error": "bold color(196)",
}

JOB_STATUS_STYLE = {
    "queued": "color(226)",
    "running": "color(33)",
    "done": "color(46)",
    "failed": "color(196)",
}

STATUS_COLUMN_WIDTH = 8


def style_for(role: str) -> str:
    return ROLE_STYLE.get(role, "")


def status_style(status: str) -> str:
    return JOB_STATUS_STYLE.get(status, "")


def new_frame() -> Text:
    return Text(no_wrap=True, overflow="crop", end="")


def add_line(frame: Text, text: str | Text = "", role: str | None = None) -> None:
    if isinstance(text, Text):
        frame.append_text(text)
    else:
        frame.append(text, style=style_for(role) if role else None)
    frame.append("\n")


def add_title(frame: Text, title: str) -> None:
    add_line(frame, title, "title")
    add_line(frame)


def add_help(frame: Text, bindings: str) -> None:
    add_line(frame)
    frame.append(bindings, style=style_for("help"))

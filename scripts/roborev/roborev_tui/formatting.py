"""Shared text and time formatting helpers for the dashboard screens."""

from __future__ import annotations

import re
from datetime import datetime, timezone

DEFAULT_WRAP_WIDTH = 100
ELLIPSIS = "..."

# The daemon emits nanoseconds; fromisoformat() wants at most six digits.
FRACTION_RE = re.compile(r"\.(\d+)")


def truncate(value: str, limit: int) -> str:
    """Hard-cut ``value`` to ``limit`` characters."""
    return value[:limit]


def truncate_ellipsis(value: str, limit: int) -> str:
    """Cut ``value`` to ``limit`` characters, marking the cut with ``...``."""
    if len(value) <= limit:
        return value
    keep = max(0, limit - len(ELLIPSIS))
    return value[:keep] + ELLIPSIS


def compact_relative_age(age_seconds: float | int | None) -> str:
    if age_seconds is None:
        return "n/a"

    seconds = max(0, int(age_seconds))
    if seconds < 60:
        return f"{seconds}s ago"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def format_elapsed(seconds: float) -> str:
    """Render a duration rounded to whole seconds, e.g. ``45s``, ``2m5s``, ``1h0m3s``."""
    total = max(0, int(round(seconds)))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{secs}s"


def job_elapsed(started_at: datetime | None, finished_at: datetime | None, now: datetime) -> str:
    if started_at is None:
        return ""
    end = finished_at if finished_at is not None else now
    return format_elapsed((end - started_at).total_seconds())


def wrap_text(text: str, width: int) -> list[str]:
    """Split ``text`` into display lines no longer than ``width`` columns.

    Embedded newlines always start a new line and empty lines survive. A line
    that is too long is broken at the last space in the back half of the
    window, or hard-cut at ``width`` when there is none. Spaces at a break are
    dropped from the start of the continuation line.

    Width values below 1 fall back to ``DEFAULT_WRAP_WIDTH``.
    """
    if width <= 0:
        width = DEFAULT_WRAP_WIDTH

    lines: list[str] = []
    for line in text.split("\n"):
        if len(line) <= width:
            lines.append(line)
            continue

        while len(line) > width:
            break_at = width
            for i in range(width, width // 2, -1):
                if i < len(line) and line[i] == " ":
                    break_at = i
                    break
            lines.append(line[:break_at])
            line = line[break_at:].lstrip(" ")
        if line:
            lines.append(line)
    return lines


def parse_iso_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    text = value.strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    text = FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)

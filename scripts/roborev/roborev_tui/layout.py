"""Viewport sizing and list windowing by terminal dimensions."""

from __future__ import annotations

# Title, blank, status line, blank, header, rule, footer, blank, help.
QUEUE_RESERVED_LINES = 9
# Title, blank, footer, blank, help.
REVIEW_RESERVED_LINES = 5
MIN_LIST_ROWS = 3
MAX_WRAP_WIDTH = 100


def queue_capacity(height: int, extra_lines: int = 0) -> int:
    return max(MIN_LIST_ROWS, height - QUEUE_RESERVED_LINES - extra_lines)


def review_viewport(height: int) -> int:
    return max(1, height - REVIEW_RESERVED_LINES)


def review_wrap_width(width: int) -> int:
    return min(width - 2, MAX_WRAP_WIDTH)


def visible_window(total: int, capacity: int, selected: int) -> tuple[int, int]:
    """Return the ``[start, end)`` slice of a list to show around ``selected``.

    Short lists are shown whole. Longer ones are centered on the selection and
    pushed back inside ``[0, total)`` at either end, so the window always holds
    exactly ``capacity`` rows (never fewer than ``MIN_LIST_ROWS``).
    """
    capacity = max(MIN_LIST_ROWS, capacity)
    if total <= capacity:
        return 0, total

    start = max(0, selected - capacity // 2)
    end = start + capacity
    if end > total:
        end = total
        start = end - capacity
    return start, end


def scroll_window(total: int, viewport: int, offset: int) -> tuple[int, int]:
    """Clamp a scroll offset against content length and return ``[start, end)``."""
    start = min(max(0, offset), max(0, total - 1))
    end = min(start + viewport, total)
    return start, end

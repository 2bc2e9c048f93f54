#!/usr/bin/env python3
"""Thin entrypoint for the review queue dashboard."""

from __future__ import annotations

from roborev_tui.app import main


if __name__ == "__main__":
    raise SystemExit(main())

"""Interactive review queue dashboard entrypoint."""

from __future__ import annotations

import argparse
import json
import logging
import os
import queue
import sys
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, Iterable

from rich.console import Console
from rich.live import Live

from roborev_tui.collectors import DaemonClient
from roborev_tui.collectors.jobs import collect as collect_jobs
from roborev_tui.collectors.review import collect as collect_review
from roborev_tui.collectors.status import collect as collect_status
from roborev_tui.config import Config, resolve_config
from roborev_tui.events import (
    Command,
    Event,
    FetchFailed,
    FetchJobs,
    FetchReview,
    FetchStatus,
    Quit,
    Resize,
    ScheduleTick,
)
from roborev_tui.keys import KeyReader, RawTerminal
from roborev_tui.models import AppState
from roborev_tui.renderer import render_frame
from roborev_tui.state import initial_commands, step
from roborev_tui.ticker import Ticker

logger = logging.getLogger("roborev_tui")

EVENT_QUEUE_SIZE = 256
LOOP_TIMEOUT = 0.1
FETCH_WORKERS = 4
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Dashboard:
    """Owns the event channel and the only thread that calls ``step``."""

    def __init__(self, client: DaemonClient, config: Config, console: Console | None = None,
                 executor: Executor | None = None):
        self.client = client
        self.config = config
        self.console = console or Console()
        self.events: queue.Queue[Event] = queue.Queue(maxsize=EVENT_QUEUE_SIZE)
        self.executor = executor or ThreadPoolExecutor(
            max_workers=FETCH_WORKERS, thread_name_prefix="roborev-fetch"
        )
        self.ticker = Ticker(config.refresh_seconds, self.post)
        self.state = AppState()
        # Poll kinds (FetchJobs, FetchStatus) with a request still outstanding.
        self._polls_in_flight: set[type] = set()
        self._poll_lock = threading.Lock()

    def post(self, event: Event) -> None:
        self.events.put(event)

    def _fetch(self, collect: Callable[..., Event], *args, poll: type | None = None) -> None:
        try:
            event = collect(self.client, *args)
        except Exception as exc:
            logger.exception("fetch worker crashed")
            event = FetchFailed(message=f"internal error: {exc}", kind="internal")
        finally:
            if poll is not None:
                with self._poll_lock:
                    self._polls_in_flight.discard(poll)
        self.post(event)

    def _submit_poll(self, command: Command, collect: Callable[..., Event], *args) -> None:
        """Submit a periodic fetch unless the previous one of its kind is still pending."""
        kind = type(command)
        with self._poll_lock:
            if kind in self._polls_in_flight:
                logger.debug("skip %s, previous request still pending", kind.__name__)
                return
            self._polls_in_flight.add(kind)
        self.executor.submit(self._fetch, collect, *args, poll=kind)

    def dispatch(self, commands: Iterable[Command]) -> bool:
        """Launch ``commands``; returns True when one of them asks to quit."""
        for command in commands:
            logger.debug("dispatch %r", command)
            if isinstance(command, Quit):
                return True
            if isinstance(command, ScheduleTick):
                self.ticker.arm()
            elif isinstance(command, FetchJobs):
                self._submit_poll(command, collect_jobs, command.limit)
            elif isinstance(command, FetchStatus):
                self._submit_poll(command, collect_status)
            elif isinstance(command, FetchReview):
                self.executor.submit(self._fetch, collect_review, command.job_id)
            else:
                raise TypeError(f"unknown command: {command!r}")
        return False

    def apply(self, event: Event) -> bool:
        self.state, commands = step(self.state, event, self.config.job_limit)
        return self.dispatch(commands)

    def process_pending(self) -> bool:
        """Fold every queued event into state without blocking."""
        while True:
            try:
                event = self.events.get_nowait()
            except queue.Empty:
                return False
            if self.apply(event):
                return True

    def sync_size(self) -> None:
        width, height = self.console.size
        if (width, height) != (self.state.width, self.state.height):
            self.post(Resize(width=width, height=height))

    def start(self) -> None:
        width, height = self.console.size
        self.apply(Resize(width=width, height=height))
        self.dispatch(initial_commands(self.config.job_limit))

    def shutdown(self) -> None:
        self.ticker.cancel()
        self.executor.shutdown(wait=False, cancel_futures=True)
        self.client.close()

    def run(self, fd: int | None = None) -> int:
        fd = sys.stdin.fileno() if fd is None else fd
        logger.info("dashboard starting against %s", self.client.server_url)
        with RawTerminal(fd) as terminal:
            reader = KeyReader(fd, self.post) if terminal.enabled else None
            if reader is not None:
                reader.start()
            try:
                self.start()
                with Live(render_frame(self.state), console=self.console, screen=True,
                          auto_refresh=False) as live:
                    while True:
                        self.sync_size()
                        try:
                            event = self.events.get(timeout=LOOP_TIMEOUT)
                        except queue.Empty:
                            continue
                        if self.apply(event):
                            break
                        live.update(render_frame(self.state), refresh=True)
            except KeyboardInterrupt:
                pass
            finally:
                if reader is not None:
                    reader.stop()
                self.shutdown()
        logger.info("dashboard stopped")
        return 0


def snapshot(client: DaemonClient, config: Config, width: int = 80, height: int = 24) -> AppState:
    """Fetch jobs and status once, synchronously, and fold them into a fresh state."""
    state = AppState(width=width, height=height)
    for event in (collect_jobs(client, config.job_limit), collect_status(client)):
        state, _ = step(state, event, config.job_limit)
    return state


def _json_output(config: Config, state: AppState) -> str:
    error = None
    if state.error is not None:
        error = {"message": state.error.message, "kind": state.error.kind}
    payload = {
        "server": config.server,
        "collected_at": datetime.now(timezone.utc).isoformat(),
        "jobs": [job.to_dict() for job in state.jobs],
        "status": state.status.to_dict(),
        "error": error,
    }
    return json.dumps(payload, indent=2)


def configure_logging(log_file: str | None, level: str = "INFO") -> None:
    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        # The dashboard owns the terminal; never fall back to stderr.
        handler = logging.NullHandler()
    logger.addHandler(handler)
    logger.setLevel(level.upper())


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Review queue terminal dashboard")
    parser.add_argument("--server", help="Daemon base URL (default: discovered or http://127.0.0.1:7373)")
    parser.add_argument("--config", help="Optional JSON config file")
    parser.add_argument("--refresh", type=int, help="Refresh interval seconds override")
    parser.add_argument("--limit", type=int, help="Maximum number of jobs to fetch")
    parser.add_argument("--log-file", default=os.environ.get("ROBOREV_TUI_LOG"), help="Write logs to this file")
    parser.add_argument("--log-level", default="INFO", help="Log level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--once", action="store_true", help="Print a single queue frame and exit")
    parser.add_argument("--json", action="store_true", help="Emit JSON payload and exit")
    args = parser.parse_args(argv)

    configure_logging(args.log_file, args.log_level)

    try:
        config = resolve_config(args.server, args.config, args.refresh, args.limit)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    client = DaemonClient(config.server, timeout=config.request_timeout)
    console = Console()

    if args.json or args.once:
        try:
            width, height = console.size
            state = snapshot(client, config, width, height)
        finally:
            client.close()
        if args.json:
            print(_json_output(config, state))
        else:
            console.print(render_frame(state))
        return 0

    return Dashboard(client, config, console=console).run()


if __name__ == "__main__":
    raise SystemExit(main())

# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

"""
Progress reporting for the lift pipeline.

A ``ProgressTracker`` splits a run into weighted phases. Code deep inside a
phase reports through ``report_progress`` without knowing about the
tracker; the active tracker is found through a context variable, and
reporting is a no-op when none is active:

    with ProgressTracker(phases={"points": 0.6, "walls": 0.4}) as progress:
        with progress.phase("points", "Accumulating samples"):
            for i, chunk in enumerate(chunks):
                ...
                report_progress(current=i + 1, total=len(chunks))

Progress within a phase never decreases, so nested helpers that restart at
zero do not move the bar backwards.
"""

import contextvars
import json
import sys
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn

# Shared with the logging handler so messages print above the bar
_console = Console(stderr=True, soft_wrap=False)

MODES = ("terminal", "json", "silent", "callback")

_active: contextvars.ContextVar = contextvars.ContextVar(
    "dtcc_lift_progress", default=None
)


def get_console() -> Console:
    return _console


def get_progress() -> Optional["ProgressTracker"]:
    """The tracker of the current context, if any."""
    return _active.get()


def report_progress(
    percent: float = None,
    message: str = None,
    current: int = None,
    total: int = None,
):
    """
    Report progress within the current phase.

    Parameters
    ----------
    percent : float, optional
        Progress of the phase, 0 to 100.
    message : str, optional
        Status message.
    current, total : int, optional
        Items done and items in total, used instead of ``percent``.
    """
    tracker = _active.get()
    if tracker is None:
        return
    if current is not None and total:
        percent = 100.0 * current / total
    tracker.update(percent, message)


@dataclass
class PhaseInfo:
    name: str
    weight: float
    progress: float = 0.0
    message: str = ""
    started: bool = False
    completed: bool = False

    @property
    def done(self) -> float:
        if self.completed:
            return 1.0
        return self.progress if self.started else 0.0


@dataclass
class ProgressState:
    phases: Dict[str, PhaseInfo]
    current_phase: Optional[str] = None
    message: str = ""
    start_time: float = 0.0

    @property
    def overall_percent(self) -> float:
        return sum(100.0 * p.weight * p.done for p in self.phases.values())


class ProgressTracker:
    """
    Weighted multi-phase progress tracker.

    Parameters
    ----------
    phases : dict, optional
        Phase name to relative weight. Unknown phases entered later get
        weight 1.
    mode : str, default "auto"
        ``"terminal"`` draws a rich progress bar, ``"json"`` prints
        ``##PROGRESS##{...}##`` lines, ``"callback"`` passes the state dict
        to ``callback`` and ``"silent"`` only tracks. ``"auto"`` picks the
        callback if given, else the bar on a terminal, else silent.
    output : file, optional
        Stream for JSON lines (default stderr).
    callback : callable, optional
        Receives the state dict in callback mode.
    min_update_interval : float, default 0.05
        Minimum seconds between two outputs.
    """

    def __init__(
        self,
        phases: Dict[str, float] = None,
        mode: str = "auto",
        output=None,
        callback: Callable[[dict], None] = None,
        min_update_interval: float = 0.05,
    ):
        weights = dict(phases or {})
        total = sum(weights.values()) or 1.0
        self.state = ProgressState(
            {name: PhaseInfo(name, w / total) for name, w in weights.items()}
        )
        self.output = output or sys.stderr
        self.callback = callback
        self.min_update_interval = min_update_interval
        self.mode = self._resolve_mode(mode)
        self._lock = threading.Lock()
        self._token = None
        self._last_output = 0.0
        self._bar: Optional[Progress] = None
        self._task = None

    def _resolve_mode(self, mode: str) -> str:
        if mode != "auto":
            return mode if mode in MODES else "silent"
        if self.callback is not None:
            return "callback"
        isatty = getattr(self.output, "isatty", None)
        return "terminal" if isatty is not None and isatty() else "silent"

    def __enter__(self):
        self._token = _active.set(self)
        self.state.start_time = time.time()
        if self.mode == "terminal":
            self._bar = Progress(
                TextColumn("{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=_console,
                transient=True,
            )
            self._bar.start()
            self._task = self._bar.add_task("Lifting", total=100)
        return self

    def __exit__(self, *args):
        _active.reset(self._token)
        if self._bar is not None:
            self._bar.stop()
            self._bar = None
        elif self.mode == "json":
            self._emit_json(dict(self.as_dict(), type="progress_complete", percent=100.0))

    @contextmanager
    def phase(self, name: str, message: str = None):
        """Enter a phase; it counts as complete when the block exits."""
        info = self.state.phases.setdefault(name, PhaseInfo(name, 1.0))
        info.started = True
        info.message = message or name
        self.state.current_phase = name
        self.state.message = info.message
        self._output(force=True)
        try:
            yield info
        finally:
            info.progress = 1.0
            info.completed = True
            self._output(force=True)

    def update(self, percent: float = None, message: str = None):
        """Advance the current phase; lower values than before are ignored."""
        with self._lock:
            info = self.state.phases.get(self.state.current_phase)
            if info is not None and percent is not None:
                info.progress = max(info.progress, min(1.0, percent / 100.0))
            if message:
                self.state.message = message
                if info is not None:
                    info.message = message
            self._output()

    def as_dict(self) -> dict:
        return {
            "type": "progress",
            "percent": round(self.state.overall_percent, 2),
            "message": self.state.message,
            "phase": self.state.current_phase,
            "phases": {
                name: {
                    "weight": round(p.weight, 3),
                    "progress": round(100.0 * p.progress, 1),
                    "completed": p.completed,
                }
                for name, p in self.state.phases.items()
            },
            "elapsed": round(time.time() - self.state.start_time, 2),
        }

    def _emit_json(self, data: dict):
        print(f"##PROGRESS##{json.dumps(data)}##", file=self.output, flush=True)

    def _output(self, force: bool = False):
        if self._bar is not None:
            self._bar.update(
                self._task,
                completed=self.state.overall_percent,
                description=self.state.message,
            )
        now = time.time()
        if not force and now - self._last_output < self.min_update_interval:
            return
        self._last_output = now
        if self.mode == "json":
            self._emit_json(self.as_dict())
        elif self.mode == "callback" and self.callback is not None:
            self.callback(self.as_dict())

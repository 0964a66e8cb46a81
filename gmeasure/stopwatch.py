"""A stopwatch that records elapsed durations on an experiment."""

from __future__ import annotations

import time
from datetime import timedelta
from typing import Any


def _elapsed(since_ns: int) -> int:
    return time.perf_counter_ns() - since_ns


def _to_timedelta(ns: int) -> timedelta:
    return timedelta(microseconds=ns // 1_000)


class Stopwatch:
    """Measures elapsed time and records it on its experiment.

    The stopwatch starts running when created. It can be paused, resumed and
    reset; time spent paused is not counted. A stopwatch is not thread-safe:
    use new_stopwatch() to get one for another thread.
    """

    def __init__(self, experiment: Any) -> None:
        self.experiment = experiment
        self._start = time.perf_counter_ns()
        self._pause_start = 0
        self._paused_ns = 0
        self._running = True

    def new_stopwatch(self) -> Stopwatch:
        """Return a fresh stopwatch recording on the same experiment."""
        return Stopwatch(self.experiment)

    def record(self, name: str, *args: object) -> Stopwatch:
        """Record the running time since creation or the last reset under the given name."""
        if not self._running:
            raise RuntimeError(
                "stopwatch is not running - call Resume or Reset before calling Record"
            )
        duration = _to_timedelta(_elapsed(self._start) - self._paused_ns)
        self.experiment.record_duration(name, duration, *args)
        return self

    def reset(self) -> Stopwatch:
        """Restart timing from now; a paused stopwatch starts running again."""
        self._running = True
        self._start = time.perf_counter_ns()
        self._paused_ns = 0
        return self

    def pause(self) -> Stopwatch:
        """Stop accumulating elapsed time until resume() is called."""
        if not self._running:
            raise RuntimeError(
                "stopwatch is not running - call Resume or Reset before calling Pause"
            )
        self._running = False
        self._pause_start = time.perf_counter_ns()
        return self

    def resume(self) -> Stopwatch:
        """Continue accumulating elapsed time after a pause."""
        if self._running:
            raise RuntimeError("stopwatch is running - call Pause before calling Resume")
        self._running = True
        self._paused_ns += _elapsed(self._pause_start)
        return self
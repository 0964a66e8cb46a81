"""Experiments: thread-safe collections of measurements with sampling and reports."""

from __future__ import annotations

import json
import queue
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import timedelta
from typing import Any

from .decorations import (
    DEFAULT_PRECISION_BUNDLE,
    Annotation,
    PrecisionBundle,
    SamplingConfig,
    Style,
    Units,
)
from .measurement import Measurement, MeasurementType, index_with_name
from .stats import Stats
from .stopwatch import Stopwatch
from .table import Divider, Table, cell, row

STYLE_RESET = "{{/}}"


def _to_ns(value: timedelta) -> int:
    return (value // timedelta(microseconds=1)) * 1_000


def _from_ns(ns: int) -> timedelta:
    return timedelta(microseconds=ns // 1_000)


@dataclass(frozen=True)
class _Decorations:
    annotation: str = ""
    units: str = ""
    precision_bundle: PrecisionBundle = DEFAULT_PRECISION_BUNDLE
    style: str = ""


def _describe(arg: object) -> str:
    if isinstance(arg, str):
        return json.dumps(arg)
    return repr(arg)


def _extract_decorations(args: tuple[object, ...]) -> _Decorations:
    found: dict[str, Any] = {}
    for arg in args:
        if type(arg) is Annotation:
            found["annotation"] = str(arg)
        elif type(arg) is Units:
            found["units"] = str(arg)
        elif type(arg) is Style:
            found["style"] = str(arg)
        elif isinstance(arg, PrecisionBundle):
            found["precision_bundle"] = arg
        else:
            raise TypeError(f"unrecognized argument {_describe(arg)}")
    return _Decorations(**found)


class _WorkerPool:
    """Hands sample indices to worker threads, one at a time."""

    def __init__(self, callback: Callable[[int], object], size: int) -> None:
        self._callback = callback
        self._queue: queue.Queue[int | None] = queue.Queue()
        self._errors: list[BaseException] = []
        self._threads = [threading.Thread(target=self._work, daemon=True) for _ in range(size)]

    def __enter__(self) -> _WorkerPool:
        for thread in self._threads:
            thread.start()
        return self

    def submit(self, idx: int | None) -> None:
        """Block until a worker has taken the index."""
        self._queue.put(idx)
        self._queue.join()

    def _work(self) -> None:
        while True:
            idx = self._queue.get()
            self._queue.task_done()
            if idx is None:
                return
            try:
                self._callback(idx)
            except BaseException as exc:  # reported once all workers stopped
                self._errors.append(exc)

    def __exit__(self, exc_type, exc, tb) -> bool:
        for _ in self._threads:
            self.submit(None)
        for thread in self._threads:
            thread.join()
        if self._errors and exc_type is None:
            raise self._errors[0]
        return False


def _run_samples(
    dispatch: Callable[[int], object],
    num_parallel: int,
    max_n: int | None,
    deadline_ns: int | None,
    min_interval_ns: int,
) -> None:
    idx = 0
    avg_dt = 0
    while True:
        start = time.perf_counter_ns()
        dispatch(idx)
        dt = time.perf_counter_ns() - start
        if num_parallel == 1 and dt < min_interval_ns:
            time.sleep((min_interval_ns - dt) / 1e9)
            dt = time.perf_counter_ns() - start
        if idx >= num_parallel:
            done = idx - num_parallel
            avg_dt = (avg_dt * done + dt) // (done + 1)
        idx += 1
        if max_n is not None and idx >= max_n:
            return
        if deadline_ns is not None and time.perf_counter_ns() + avg_dt > deadline_ns:
            return


@dataclass
class Experiment:
    """A named, thread-safe collection of measurements."""

    name: str = ""
    measurements: list[Measurement] = field(default_factory=list)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def _report(self, enable_styling: bool) -> str:
        table = Table()
        table.table_style.enable_text_styling = enable_styling
        table.append_row(
            row(
                cell("Name"),
                cell("N"),
                cell("Min"),
                cell("Median"),
                cell("Mean"),
                cell("StdDev"),
                cell("Max"),
                Divider("="),
                "{{bold}}",
            )
        )
        with self._lock:
            measurements = list(self.measurements)
        for measurement in measurements:
            r = row(measurement.style)
            if measurement.type is MeasurementType.NOTE:
                r.append_cell(cell(measurement.note))
            elif measurement.type in (MeasurementType.VALUE, MeasurementType.DURATION):
                name = measurement.name
                if measurement.units:
                    name += f" [{measurement.units}]"
                r.append_cell(cell(name))
                r.append_cell(*measurement.stats().cells())
            table.append_row(r)

        out = self.name + "\n"
        if enable_styling:
            out = "{{bold}}" + out + STYLE_RESET
        return out + table.render()

    def colorable_string(self) -> str:
        """Return a summary table of all measurements with style markup."""
        return self._report(True)

    def __str__(self) -> str:
        return self._report(False)

    def record_note(self, note: str, *args: object) -> None:
        """Record a textual note; accepts a Style decoration."""
        decorations = _extract_decorations(args)
        with self._lock:
            self.measurements.append(
                Measurement(
                    type=MeasurementType.NOTE,
                    experiment_name=self.name,
                    note=note,
                    style=decorations.style,
                )
            )

    def record_duration(self, name: str, duration: timedelta, *args: object) -> None:
        """Record a duration on the named duration measurement, creating it if needed."""
        self._record_duration(name, duration, _extract_decorations(args))

    def measure_duration(self, name: str, callback: Callable[[], object], *args: object) -> timedelta:
        """Time the callback, record the duration and return it."""
        start = time.perf_counter_ns()
        callback()
        duration = _from_ns(time.perf_counter_ns() - start)
        self.record_duration(name, duration, *args)
        return duration

    def sample_duration(
        self,
        name: str,
        callback: Callable[[int], object],
        sampling_config: SamplingConfig,
        *args: object,
    ) -> None:
        """Repeatedly time the callback and record each duration."""
        decorations = _extract_decorations(args)

        def timed(idx: int) -> None:
            start = time.perf_counter_ns()
            callback(idx)
            duration = _from_ns(time.perf_counter_ns() - start)
            self._record_duration(name, duration, decorations)

        self.sample(timed, sampling_config)

    def sample_annotated_duration(
        self,
        name: str,
        callback: Callable[[int], str],
        sampling_config: SamplingConfig,
        *args: object,
    ) -> None:
        """Repeatedly time the callback, annotating each duration with its return value."""
        decorations = _extract_decorations(args)

        def timed(idx: int) -> None:
            start = time.perf_counter_ns()
            annotation = callback(idx)
            duration = _from_ns(time.perf_counter_ns() - start)
            self._record_duration(name, duration, replace(decorations, annotation=str(annotation)))

        self.sample(timed, sampling_config)

    def _record_duration(self, name: str, duration: timedelta, decorations: _Decorations) -> None:
        with self._lock:
            idx = index_with_name(self.measurements, name)
            if idx is None:
                self.measurements.append(
                    Measurement(
                        type=MeasurementType.DURATION,
                        experiment_name=self.name,
                        name=name,
                        units="duration",
                        durations=[duration],
                        precision_bundle=decorations.precision_bundle,
                        style=decorations.style,
                        annotations=[decorations.annotation],
                    )
                )
                return
            measurement = self.measurements[idx]
            if measurement.type is not MeasurementType.DURATION:
                raise ValueError(
                    f"attempting to record duration with name '{name}'.  "
                    "That name is already in-use for recording values."
                )
            measurement.durations.append(duration)
            measurement.annotations.append(decorations.annotation)

    def new_stopwatch(self) -> Stopwatch:
        """Return a running stopwatch that records on this experiment."""
        return Stopwatch(self)

    def record_value(self, name: str, value: float, *args: object) -> None:
        """Record a value on the named value measurement, creating it if needed."""
        self._record_value(name, value, _extract_decorations(args))

    def measure_value(self, name: str, callback: Callable[[], float], *args: object) -> float:
        """Call the callback, record the value it returns and return it."""
        value = callback()
        self.record_value(name, value, *args)
        return value

    def sample_value(
        self,
        name: str,
        callback: Callable[[int], float],
        sampling_config: SamplingConfig,
        *args: object,
    ) -> None:
        """Repeatedly call the callback and record each returned value."""
        decorations = _extract_decorations(args)

        def sampled(idx: int) -> None:
            self._record_value(name, callback(idx), decorations)

        self.sample(sampled, sampling_config)

    def sample_annotated_value(
        self,
        name: str,
        callback: Callable[[int], tuple[float, str]],
        sampling_config: SamplingConfig,
        *args: object,
    ) -> None:
        """Repeatedly call the callback and record each returned (value, annotation)."""
        decorations = _extract_decorations(args)

        def sampled(idx: int) -> None:
            value, annotation = callback(idx)
            self._record_value(name, value, replace(decorations, annotation=str(annotation)))

        self.sample(sampled, sampling_config)

    def _record_value(self, name: str, value: float, decorations: _Decorations) -> None:
        with self._lock:
            idx = index_with_name(self.measurements, name)
            if idx is None:
                self.measurements.append(
                    Measurement(
                        type=MeasurementType.VALUE,
                        experiment_name=self.name,
                        name=name,
                        style=decorations.style,
                        units=decorations.units,
                        precision_bundle=decorations.precision_bundle,
                        values=[float(value)],
                        annotations=[decorations.annotation],
                    )
                )
                return
            measurement = self.measurements[idx]
            if measurement.type is not MeasurementType.VALUE:
                raise ValueError(
                    f"attempting to record value with name '{name}'.  "
                    "That name is already in-use for recording durations."
                )
            measurement.values.append(float(value))
            measurement.annotations.append(decorations.annotation)

    def sample(self, callback: Callable[[int], object], sampling_config: SamplingConfig) -> None:
        """Call the callback repeatedly with increasing indices, as the config allows."""
        config = sampling_config
        if config.n == 0 and config.duration == timedelta(0):
            raise ValueError(
                "you must specify at least one of SamplingConfig.N and SamplingConfig.Duration"
            )
        if config.min_sampling_interval > timedelta(0) and config.num_parallel > 1:
            raise ValueError(
                "you cannot specify both SamplingConfig.MinSamplingInterval "
                "and SamplingConfig.NumParallel"
            )
        deadline = None
        if config.duration > timedelta(0):
            deadline = time.perf_counter_ns() + _to_ns(config.duration)
        max_n = config.n if config.n > 0 else None
        num_parallel = max(1, config.num_parallel)
        min_interval = _to_ns(config.min_sampling_interval)

        if num_parallel == 1:
            _run_samples(callback, 1, max_n, deadline, min_interval)
            return
        with _WorkerPool(callback, num_parallel) as pool:
            _run_samples(pool.submit, num_parallel, max_n, deadline, min_interval)

    def get(self, name: str) -> Measurement:
        """Return the named measurement, or an empty Measurement if there is none."""
        with self._lock:
            idx = index_with_name(self.measurements, name)
            if idx is None:
                return Measurement()
            return self.measurements[idx]

    def get_stats(self, name: str) -> Stats:
        """Return the Stats of the named measurement."""
        measurement = self.get(name)
        with self._lock:
            return measurement.stats()

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible representation of the experiment."""
        with self._lock:
            return {
                "Name": self.name,
                "Measurements": [m.to_dict() for m in self.measurements],
            }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Experiment:
        """Build an experiment from the representation produced by to_dict."""
        return cls(
            name=data.get("Name", ""),
            measurements=[Measurement.from_dict(m) for m in data.get("Measurements") or []],
        )
"""Measurements: named collections of recorded values, durations or notes."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from .decorations import (
    DEFAULT_PRECISION_BUNDLE,
    PrecisionBundle,
    format_duration,
    round_duration,
)
from .stats import Stat, Stats, StatsType, _LabeledEnum
from .table import AlignType, Divider, Table, cell, row

STYLE_RESET = "{{/}}"


class MeasurementType(_LabeledEnum):
    """The kind of data a measurement holds."""

    INVALID = 0, "INVALID LOG ENTRY TYPE"
    NOTE = 1, "Note"
    DURATION = 2, "Duration"
    VALUE = 3, "Value"


def _to_ns(value: timedelta) -> int:
    return (value // timedelta(microseconds=1)) * 1_000


def _from_ns(ns: int) -> timedelta:
    return timedelta(microseconds=int(ns / 1_000))


def _div_trunc(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // denominator
    return -quotient if numerator < 0 else quotient


@dataclass
class Measurement:
    """All data captured for one named measurement of an experiment."""

    type: MeasurementType = MeasurementType.INVALID
    experiment_name: str = ""
    note: str = ""
    name: str = ""
    style: str = ""
    units: str = ""
    precision_bundle: PrecisionBundle = DEFAULT_PRECISION_BUNDLE
    durations: list[timedelta] = field(default_factory=list)
    values: list[float] = field(default_factory=list)
    annotations: list[str] = field(default_factory=list)

    def stats(self) -> Stats:
        """Summarise the measurement; notes and invalid measurements give empty Stats."""
        if self.type in (MeasurementType.INVALID, MeasurementType.NOTE):
            return Stats()

        out = Stats(
            experiment_name=self.experiment_name,
            measurement_name=self.name,
            style=self.style,
            units=self.units,
            precision_bundle=self.precision_bundle,
        )
        if self.type is MeasurementType.VALUE:
            out.type = StatsType.VALUE
            self._value_stats(out)
        else:
            out.type = StatsType.DURATION
            self._duration_stats(out)
        return out

    def _value_stats(self, out: Stats) -> None:
        values = self.values
        out.n = len(values)
        if not values:
            return
        order = sorted(range(out.n), key=values.__getitem__)
        mean = sum(values) / out.n
        if out.n % 2 == 0:
            median = (values[order[out.n // 2]] + values[order[out.n // 2 - 1]]) / 2.0
        else:
            median = values[order[(out.n - 1) // 2]]
        variance = sum((v - mean) * (v - mean) for v in values) / out.n
        out.value_bundle = {
            Stat.MIN: values[order[0]],
            Stat.MAX: values[order[-1]],
            Stat.MEAN: mean,
            Stat.MEDIAN: median,
            Stat.STDDEV: math.sqrt(variance),
        }
        out.annotation_bundle = {
            Stat.MIN: self.annotations[order[0]],
            Stat.MAX: self.annotations[order[-1]],
        }

    def _duration_stats(self, out: Stats) -> None:
        durations = [_to_ns(d) for d in self.durations]
        out.n = len(durations)
        if not durations:
            return
        order = sorted(range(out.n), key=durations.__getitem__)
        mean = _div_trunc(sum(durations), out.n)
        if out.n % 2 == 0:
            median = _div_trunc(
                durations[order[out.n // 2]] + durations[order[out.n // 2 - 1]], 2
            )
        else:
            median = durations[order[(out.n - 1) // 2]]
        variance = sum(float(d - mean) * float(d - mean) for d in durations) / out.n
        out.duration_bundle = {
            Stat.MIN: self.durations[order[0]],
            Stat.MAX: self.durations[order[-1]],
            Stat.MEAN: _from_ns(mean),
            Stat.MEDIAN: _from_ns(median),
            Stat.STDDEV: _from_ns(int(math.sqrt(variance))),
        }
        out.annotation_bundle = {
            Stat.MIN: self.annotations[order[0]],
            Stat.MAX: self.annotations[order[-1]],
        }

    def _report(self, enable_styling: bool) -> str:
        style = self.style if enable_styling else ""
        if self.type is MeasurementType.NOTE:
            out = f"{self.experiment_name} - Note\n{self.note}\n"
            if style:
                out = style + out + STYLE_RESET
            return out

        out = ""
        if self.type in (MeasurementType.VALUE, MeasurementType.DURATION):
            out = f"{self.experiment_name} - {self.name}"
            if self.units:
                out += f" [{self.units}]"
            if style:
                out = style + out + STYLE_RESET
            out += "\n" + str(self.stats()) + "\n"

        table = Table()
        table.table_style.enable_text_styling = enable_styling
        if self.type is MeasurementType.VALUE:
            table.append_row(
                row(
                    cell("Value", AlignType.CENTER),
                    cell("Annotation", AlignType.CENTER),
                    Divider("="),
                    style,
                )
            )
            for value, annotation in zip(self.values, self.annotations):
                table.append_row(
                    row(
                        cell(self.precision_bundle.value_format % value, AlignType.RIGHT),
                        cell(annotation, "{{gray}}", AlignType.LEFT),
                    )
                )
        elif self.type is MeasurementType.DURATION:
            table.append_row(
                row(
                    cell("Duration", AlignType.CENTER),
                    cell("Annotation", AlignType.CENTER),
                    Divider("="),
                    style,
                )
            )
            for duration, annotation in zip(self.durations, self.annotations):
                text = format_duration(round_duration(duration, self.precision_bundle.duration))
                table.append_row(
                    row(
                        cell(text, style, AlignType.RIGHT),
                        cell(annotation, "{{gray}}", AlignType.LEFT),
                    )
                )
        return out + table.render()

    def colorable_string(self) -> str:
        """Return a report of all data points with style markup."""
        return self._report(True)

    def __str__(self) -> str:
        return self._report(False)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible representation; durations are in nanoseconds."""
        return {
            "Type": self.type.to_json(),
            "ExperimentName": self.experiment_name,
            "Note": self.note,
            "Name": self.name,
            "Style": self.style,
            "Units": self.units,
            "PrecisionBundle": {
                "Duration": _to_ns(self.precision_bundle.duration),
                "ValueFormat": self.precision_bundle.value_format,
            },
            "Durations": [_to_ns(d) for d in self.durations],
            "Values": list(self.values),
            "Annotations": list(self.annotations),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Measurement:
        """Build a measurement from the representation produced by to_dict."""
        bundle = data.get("PrecisionBundle") or {}
        precision_bundle = PrecisionBundle(
            duration=_from_ns(bundle.get("Duration", _to_ns(DEFAULT_PRECISION_BUNDLE.duration))),
            value_format=bundle.get("ValueFormat", DEFAULT_PRECISION_BUNDLE.value_format),
        )
        return cls(
            type=MeasurementType.from_json(data.get("Type")),
            experiment_name=data.get("ExperimentName", ""),
            note=data.get("Note", ""),
            name=data.get("Name", ""),
            style=data.get("Style", ""),
            units=data.get("Units", ""),
            precision_bundle=precision_bundle,
            durations=[_from_ns(ns) for ns in data.get("Durations") or []],
            values=[float(v) for v in data.get("Values") or []],
            annotations=list(data.get("Annotations") or []),
        )


def index_with_name(measurements: Sequence[Measurement], name: str) -> int | None:
    """Return the position of the first measurement with this name, or None."""
    return next((i for i, m in enumerate(measurements) if m.name == name), None)
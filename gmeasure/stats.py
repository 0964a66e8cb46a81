"""Summary statistics of a measurement and the enums that name them."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import timedelta

from .decorations import (
    DEFAULT_PRECISION_BUNDLE,
    PrecisionBundle,
    format_duration,
    round_duration,
)
from .table import Cell, cell


class _LabeledEnum(enum.Enum):
    """Enum whose members carry a display label used for text and JSON."""

    def __new__(cls, value: int, label: str):
        member = object.__new__(cls)
        member._value_ = value
        member.label = label
        return member

    def __str__(self) -> str:
        return self.label

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)

    def to_json(self) -> str | None:
        """Return the label, or None for the invalid (zero) member."""
        if self.value == 0:
            return None
        return self.label

    @classmethod
    def from_json(cls, label: object):
        """Return the member with this label; unknown labels give the invalid member."""
        if label is not None and not isinstance(label, str):
            raise ValueError(f"cannot decode {label!r} as {cls.__name__}")
        for member in cls:
            if member.label == label:
                return member
        return cls(0)


class Stat(_LabeledEnum):
    """A statistic that can be requested of a Stats object."""

    INVALID = 0, "INVALID STAT"
    MIN = 1, "Min"
    MAX = 2, "Max"
    MEAN = 3, "Mean"
    MEDIAN = 4, "Median"
    STDDEV = 5, "StdDev"


class StatsType(_LabeledEnum):
    """Whether a Stats object summarises values or durations."""

    INVALID = 0, "INVALID STATS TYPE"
    VALUE = 1, "StatsTypeValue"
    DURATION = 2, "StatsTypeDuration"


def _nanoseconds(value: timedelta) -> int:
    return (value // timedelta(microseconds=1)) * 1_000


_CELL_STATS = (Stat.MIN, Stat.MEDIAN, Stat.MEAN, Stat.STDDEV, Stat.MAX)


@dataclass
class Stats:
    """Key statistics of one measurement."""

    type: StatsType = StatsType.INVALID
    experiment_name: str = ""
    measurement_name: str = ""
    units: str = ""
    style: str = ""
    precision_bundle: PrecisionBundle = DEFAULT_PRECISION_BUNDLE
    n: int = 0
    value_bundle: dict[Stat, float] = field(default_factory=dict)
    duration_bundle: dict[Stat, timedelta] = field(default_factory=dict)
    annotation_bundle: dict[Stat, str] = field(default_factory=dict)

    def value_for(self, stat: Stat) -> float:
        """Return the value of a statistic of a value measurement."""
        return self.value_bundle.get(stat, 0.0)

    def duration_for(self, stat: Stat) -> timedelta:
        """Return the duration of a statistic of a duration measurement."""
        return self.duration_bundle.get(stat, timedelta(0))

    def float_for(self, stat: Stat) -> float:
        """Return a statistic as a float; durations are given in nanoseconds."""
        if self.type is StatsType.VALUE:
            return self.value_for(stat)
        if self.type is StatsType.DURATION:
            return float(_nanoseconds(self.duration_for(stat)))
        return 0.0

    def string_for(self, stat: Stat) -> str:
        """Return a statistic formatted with the configured precision."""
        if self.type is StatsType.VALUE:
            return self.precision_bundle.value_format % self.value_for(stat)
        if self.type is StatsType.DURATION:
            rounded = round_duration(self.duration_for(stat), self.precision_bundle.duration)
            return format_duration(rounded)
        return ""

    def cells(self) -> list[Cell]:
        """Return table cells: N, then min, median, mean, stddev and max with annotations."""
        out = [cell(str(self.n))]
        for stat in _CELL_STATS:
            content = self.string_for(stat)
            annotation = self.annotation_bundle.get(stat, "")
            if annotation:
                content += "\n" + annotation
            out.append(cell(content))
        return out

    def __str__(self) -> str:
        return (
            f"{self.string_for(Stat.MIN)} < [{self.string_for(Stat.MEDIAN)}] | "
            f"<{self.string_for(Stat.MEAN)}> \u00b1{self.string_for(Stat.STDDEV)} "
            f"< {self.string_for(Stat.MAX)}"
        )
"""Decorations for recorded measurements, sampling configuration and duration helpers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import timedelta


class Units(str):
    """Units attached to a value measurement; ignored for durations."""


class Annotation(str):
    """A note attached to a single recorded data point."""


class Style(str):
    """Console style markup (e.g. ``{{blue}}{{bold}}``) attached to a measurement."""


@dataclass(frozen=True)
class PrecisionBundle:
    """How durations are rounded and values are formatted for display."""

    duration: timedelta = timedelta(microseconds=100)
    value_format: str = "%.3f"


DEFAULT_PRECISION_BUNDLE = PrecisionBundle()


def precision(p: timedelta | int) -> PrecisionBundle:
    """Return a precision bundle: a timedelta sets duration rounding, an int decimal places."""
    if isinstance(p, timedelta):
        return replace(DEFAULT_PRECISION_BUNDLE, duration=p)
    if isinstance(p, int) and not isinstance(p, bool):
        return replace(DEFAULT_PRECISION_BUNDLE, value_format=f"%.{p}f")
    raise TypeError("invalid precision type, must be timedelta or int")


@dataclass(frozen=True)
class SamplingConfig:
    """Limits and concurrency for repeatedly sampling a callback.

    Sampling stops when either ``n`` samples were taken or ``duration`` elapsed.
    ``min_sampling_interval`` and ``num_parallel`` may not both be set.
    """

    n: int = 0
    duration: timedelta = timedelta(0)
    min_sampling_interval: timedelta = timedelta(0)
    num_parallel: int = 0


_NS_PER_US = 1_000
_NS_PER_S = 1_000_000_000


def _nanoseconds(value: timedelta) -> int:
    return ((value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds) * _NS_PER_US


def _from_nanoseconds(ns: int) -> timedelta:
    return timedelta(microseconds=ns // _NS_PER_US)


def round_duration(duration: timedelta, multiple: timedelta) -> timedelta:
    """Round to the nearest multiple, halfway cases away from zero.

    A non-positive multiple leaves the duration unchanged.
    """
    d = _nanoseconds(duration)
    m = _nanoseconds(multiple)
    if m <= 0:
        return duration
    r = abs(d) % m
    if d < 0:
        rounded = d + r if r + r < m else d - m + r
    else:
        rounded = d - r if r + r < m else d + m - r
    return _from_nanoseconds(rounded)


def _with_fraction(value: int, digits: int) -> str:
    whole, frac = divmod(value, 10**digits)
    if not frac:
        return str(whole)
    return f"{whole}.{frac:0{digits}d}".rstrip("0")


def format_duration(duration: timedelta) -> str:
    """Format a duration compactly, e.g. ``1.5s``, ``500ms``, ``9m12.4s`` or ``1h0m0s``."""
    ns = _nanoseconds(duration)
    sign = "-" if ns < 0 else ""
    u = abs(ns)
    if u == 0:
        return "0s"
    if u < _NS_PER_US:
        return f"{sign}{u}ns"
    if u < 1_000_000:
        return f"{sign}{_with_fraction(u, 3)}\u00b5s"
    if u < _NS_PER_S:
        return f"{sign}{_with_fraction(u, 6)}ms"

    seconds, frac = divmod(u, _NS_PER_S)
    text = _with_fraction((seconds % 60) * _NS_PER_S + frac, 9) + "s"
    minutes = seconds // 60
    if minutes:
        text = f"{minutes % 60}m{text}"
        hours = minutes // 60
        if hours:
            text = f"{hours}h{text}"
    return sign + text
"""Record, summarise, rank and cache measurements of values and durations."""

__version__ = "1.17.0"
from datetime import timedelta

import pytest

from gmeasure.decorations import precision
from gmeasure.stats import Stat, Stats, StatsType


@pytest.fixture
def value_stats():
    return Stats(
        type=StatsType.VALUE,
        experiment_name="My Test Experiment",
        measurement_name="Sprockets",
        units="widgets",
        n=100,
        precision_bundle=precision(2),
        value_bundle={
            Stat.MIN: 17.48992,
            Stat.MAX: 293.4820,
            Stat.MEAN: 187.3023,
            Stat.MEDIAN: 87.2235,
            Stat.STDDEV: 73.6394,
        },
    )


@pytest.fixture
def duration_stats():
    ms = lambda n: timedelta(milliseconds=n)  # noqa: E731
    return Stats(
        type=StatsType.DURATION,
        experiment_name="My Test Experiment",
        measurement_name="Runtime",
        n=100,
        precision_bundle=precision(timedelta(milliseconds=100)),
        duration_bundle={
            Stat.MIN: ms(17375),
            Stat.MAX: ms(890321),
            Stat.MEAN: ms(328712),
            Stat.MEDIAN: ms(552390),
            Stat.STDDEV: ms(186259),
        },
    )


def test_value_summary(value_stats):
    assert str(value_stats) == "17.49 < [87.22] | <187.30> \u00b173.64 < 293.48"


def test_value_for(value_stats):
    assert value_stats.value_for(Stat.MIN) == 17.48992
    assert value_stats.value_for(Stat.MEAN) == 187.3023


def test_value_float_for(value_stats):
    assert value_stats.float_for(Stat.MIN) == 17.48992
    assert value_stats.float_for(Stat.MEAN) == 187.3023


def test_value_string_for(value_stats):
    assert value_stats.string_for(Stat.MIN) == "17.49"
    assert value_stats.string_for(Stat.MEAN) == "187.30"


def test_duration_summary(duration_stats):
    assert str(duration_stats) == "17.4s < [9m12.4s] | <5m28.7s> \u00b13m6.3s < 14m50.3s"


def test_duration_for(duration_stats):
    assert duration_stats.duration_for(Stat.MIN) == timedelta(milliseconds=17375)
    assert duration_stats.duration_for(Stat.MEAN) == timedelta(milliseconds=328712)


def test_duration_float_for_is_nanoseconds(duration_stats):
    assert duration_stats.float_for(Stat.MIN) == 17375e6
    assert duration_stats.float_for(Stat.MEAN) == 328712e6


def test_duration_string_for(duration_stats):
    assert duration_stats.string_for(Stat.MIN) == "17.4s"
    assert duration_stats.string_for(Stat.MEAN) == "5m28.7s"


def test_invalid_stats_give_zero_and_empty():
    stats = Stats()
    assert stats.float_for(Stat.MIN) == 0.0
    assert stats.string_for(Stat.MIN) == ""


def test_missing_stat_is_zero(value_stats):
    value_stats.value_bundle.pop(Stat.STDDEV)
    assert value_stats.value_for(Stat.STDDEV) == 0.0


def test_cells_include_annotations(value_stats):
    value_stats.annotation_bundle = {Stat.MIN: "low", Stat.MAX: "high"}
    cells = value_stats.cells()
    assert [c.contents for c in cells] == [
        ["100"],
        ["17.49", "low"],
        ["87.22"],
        ["187.30"],
        ["73.64"],
        ["293.48", "high"],
    ]


def test_enum_labels():
    assert str(Stat.from_json("Min")) == "Min"
    assert f"{Stat.from_json('StdDev')}" == "StdDev"
    assert str(StatsType.from_json("StatsTypeDuration")) == "StatsTypeDuration"


def test_enum_json_round_trip():
    assert Stat.MEDIAN.to_json() == "Median"
    assert Stat.from_json("Median") is Stat.MEDIAN
    assert Stat.INVALID.to_json() is None
    assert Stat.from_json(None) is Stat.INVALID
    assert Stat.from_json("nonsense") is Stat.INVALID


def test_enum_json_rejects_non_strings():
    with pytest.raises(ValueError):
        StatsType.from_json(3)
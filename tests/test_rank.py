from datetime import timedelta

import pytest

from gmeasure.decorations import precision
from gmeasure.rank import Ranking, RankingCriteria, rank_stats
from gmeasure.stats import Stat, Stats, StatsType


def make_value_stats(name, mn, mx, mean, median):
    return Stats(
        type=StatsType.VALUE,
        experiment_name="Exp-" + name,
        measurement_name=name,
        n=100,
        precision_bundle=precision(2),
        value_bundle={
            Stat.MIN: mn,
            Stat.MAX: mx,
            Stat.MEAN: mean,
            Stat.MEDIAN: median,
            Stat.STDDEV: 2.0,
        },
    )


def make_duration_stats(name, mn, mx, mean, median):
    s = timedelta(seconds=1)
    return Stats(
        type=StatsType.DURATION,
        experiment_name="Exp-" + name,
        measurement_name=name,
        n=100,
        precision_bundle=precision(timedelta(milliseconds=100)),
        duration_bundle={
            Stat.MIN: mn * s,
            Stat.MAX: mx * s,
            Stat.MEAN: mean * s,
            Stat.MEDIAN: median * s,
            Stat.STDDEV: timedelta(0),
        },
    )


@pytest.fixture(params=[make_value_stats, make_duration_stats])
def all_stats(request):
    make = request.param
    return {
        "A": make("A", 1, 2, 3, 4),
        "B": make("B", 2, 3, 4, 1),
        "C": make("C", 3, 4, 1, 2),
        "D": make("D", 4, 1, 2, 3),
    }


@pytest.mark.parametrize(
    "criteria, order",
    [
        (RankingCriteria.LOWER_MEAN_IS_BETTER, "CDAB"),
        (RankingCriteria.HIGHER_MEAN_IS_BETTER, "BADC"),
        (RankingCriteria.LOWER_MEDIAN_IS_BETTER, "BCDA"),
        (RankingCriteria.HIGHER_MEDIAN_IS_BETTER, "ADCB"),
        (RankingCriteria.LOWER_MIN_IS_BETTER, "ABCD"),
        (RankingCriteria.HIGHER_MIN_IS_BETTER, "DCBA"),
        (RankingCriteria.LOWER_MAX_IS_BETTER, "DABC"),
        (RankingCriteria.HIGHER_MAX_IS_BETTER, "CBAD"),
    ],
)
def test_ranking_by_criteria(all_stats, criteria, order):
    s = all_stats
    ranking = rank_stats(criteria, s["A"], s["B"], s["C"], s["D"])
    expected = [s[name] for name in order]
    assert ranking.winner() == expected[0]
    assert ranking.stats == expected
    assert ranking.criteria is criteria


def test_empty_ranking():
    ranking = rank_stats(RankingCriteria.LOWER_MEAN_IS_BETTER)
    assert ranking.winner() == Stats()
    assert str(ranking) == "Empty Ranking"
    assert Ranking().colorable_string() == "Empty Ranking"


def test_criteria_labels_and_json():
    assert str(RankingCriteria.LOWER_MIN_IS_BETTER) == "Lower Mins is Better"
    assert RankingCriteria.HIGHER_MAX_IS_BETTER.to_json() == "Higher Max is Better"
    assert RankingCriteria.LOWER_MEAN_IS_BETTER.to_json() is None
    assert RankingCriteria.from_json("Higher Median is Better") is RankingCriteria.HIGHER_MEDIAN_IS_BETTER


def _values():
    return [
        make_value_stats("A", 1, 2, 3, 4),
        make_value_stats("B", 2, 3, 4, 1),
        make_value_stats("C", 3, 4, 1, 2),
        make_value_stats("D", 4, 1, 2, 3),
    ]


def _durations():
    return [
        make_duration_stats("A", 1, 2, 3, 4),
        make_duration_stats("B", 2, 3, 4, 1),
        make_duration_stats("C", 3, 4, 1, 2),
        make_duration_stats("D", 4, 1, 2, 3),
    ]


def test_value_unstyled_report():
    ranking = rank_stats(RankingCriteria.LOWER_MEAN_IS_BETTER, *_values())
    assert str(ranking) == "\n".join([
        "Ranking Criteria: Lower Mean is Better",
        "Experiment | Name     | N   | Min  | Median | Mean | StdDev | Max ",
        "==================================================================",
        "Exp-C      | C        | 100 | 3.00 | 2.00   | 1.00 | 2.00   | 4.00",
        "*Winner*   | *Winner* |     |      |        |      |        |     ",
        "------------------------------------------------------------------",
        "Exp-D      | D        | 100 | 4.00 | 3.00   | 2.00 | 2.00   | 1.00",
        "------------------------------------------------------------------",
        "Exp-A      | A        | 100 | 1.00 | 4.00   | 3.00 | 2.00   | 2.00",
        "------------------------------------------------------------------",
        "Exp-B      | B        | 100 | 2.00 | 1.00   | 4.00 | 2.00   | 3.00",
        "",
    ])


def test_value_styled_report():
    ranking = rank_stats(RankingCriteria.LOWER_MEAN_IS_BETTER, *_values())
    assert ranking.colorable_string() == "\n".join([
        "{{bold}}Ranking Criteria: Lower Mean is Better",
        "{{/}}{{bold}}Experiment{{/}} | {{bold}}Name    {{/}} | {{bold}}N  {{/}} | {{bold}}Min {{/}} | {{bold}}Median{{/}} | {{bold}}Mean{{/}} | {{bold}}StdDev{{/}} | {{bold}}Max {{/}}",
        "==================================================================",
        "{{bold}}Exp-C     {{/}} | {{bold}}C       {{/}} | {{bold}}100{{/}} | {{bold}}3.00{{/}} | {{bold}}2.00  {{/}} | {{bold}}1.00{{/}} | {{bold}}2.00  {{/}} | {{bold}}4.00{{/}}",
        "{{bold}}*Winner*  {{/}} | {{bold}}*Winner*{{/}} |     |      |        |      |        |     ",
        "------------------------------------------------------------------",
        "Exp-D      | D        | 100 | 4.00 | 3.00   | 2.00 | 2.00   | 1.00",
        "------------------------------------------------------------------",
        "Exp-A      | A        | 100 | 1.00 | 4.00   | 3.00 | 2.00   | 2.00",
        "------------------------------------------------------------------",
        "Exp-B      | B        | 100 | 2.00 | 1.00   | 4.00 | 2.00   | 3.00",
        "",
    ])


def test_duration_unstyled_report():
    ranking = rank_stats(RankingCriteria.LOWER_MEAN_IS_BETTER, *_durations())
    assert str(ranking) == "\n".join([
        "Ranking Criteria: Lower Mean is Better",
        "Experiment | Name     | N   | Min | Median | Mean | StdDev | Max",
        "================================================================",
        "Exp-C      | C        | 100 | 3s  | 2s     | 1s   | 0s     | 4s ",
        "*Winner*   | *Winner* |     |     |        |      |        |    ",
        "----------------------------------------------------------------",
        "Exp-D      | D        | 100 | 4s  | 3s     | 2s   | 0s     | 1s ",
        "----------------------------------------------------------------",
        "Exp-A      | A        | 100 | 1s  | 4s     | 3s   | 0s     | 2s ",
        "----------------------------------------------------------------",
        "Exp-B      | B        | 100 | 2s  | 1s     | 4s   | 0s     | 3s ",
        "",
    ])


def test_duration_styled_report():
    ranking = rank_stats(RankingCriteria.LOWER_MEAN_IS_BETTER, *_durations())
    assert ranking.colorable_string() == "\n".join([
        "{{bold}}Ranking Criteria: Lower Mean is Better",
        "{{/}}{{bold}}Experiment{{/}} | {{bold}}Name    {{/}} | {{bold}}N  {{/}} | {{bold}}Min{{/}} | {{bold}}Median{{/}} | {{bold}}Mean{{/}} | {{bold}}StdDev{{/}} | {{bold}}Max{{/}}",
        "================================================================",
        "{{bold}}Exp-C     {{/}} | {{bold}}C       {{/}} | {{bold}}100{{/}} | {{bold}}3s {{/}} | {{bold}}2s    {{/}} | {{bold}}1s  {{/}} | {{bold}}0s    {{/}} | {{bold}}4s {{/}}",
        "{{bold}}*Winner*  {{/}} | {{bold}}*Winner*{{/}} |     |     |        |      |        |    ",
        "----------------------------------------------------------------",
        "Exp-D      | D        | 100 | 4s  | 3s     | 2s   | 0s     | 1s ",
        "----------------------------------------------------------------",
        "Exp-A      | A        | 100 | 1s  | 4s     | 3s   | 0s     | 2s ",
        "----------------------------------------------------------------",
        "Exp-B      | B        | 100 | 2s  | 1s     | 4s   | 0s     | 3s ",
        "",
    ])
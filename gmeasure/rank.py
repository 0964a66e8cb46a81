"""Ranking of Stats objects by a chosen criterion."""

from __future__ import annotations

from dataclasses import dataclass, field

from .stats import Stat, Stats, _LabeledEnum
from .table import Divider, Table, cell, row

STYLE_RESET = "{{/}}"


class RankingCriteria(_LabeledEnum):
    """The statistic and direction by which Stats are ranked."""

    LOWER_MEAN_IS_BETTER = 0, "Lower Mean is Better"
    HIGHER_MEAN_IS_BETTER = 1, "Higher Mean is Better"
    LOWER_MEDIAN_IS_BETTER = 2, "Lower Median is Better"
    HIGHER_MEDIAN_IS_BETTER = 3, "Higher Median is Better"
    LOWER_MIN_IS_BETTER = 4, "Lower Mins is Better"
    HIGHER_MIN_IS_BETTER = 5, "Higher Min is Better"
    LOWER_MAX_IS_BETTER = 6, "Lower Max is Better"
    HIGHER_MAX_IS_BETTER = 7, "Higher Max is Better"


_ORDERING: dict[RankingCriteria, tuple[Stat, bool]] = {
    RankingCriteria.LOWER_MEAN_IS_BETTER: (Stat.MEAN, False),
    RankingCriteria.HIGHER_MEAN_IS_BETTER: (Stat.MEAN, True),
    RankingCriteria.LOWER_MEDIAN_IS_BETTER: (Stat.MEDIAN, False),
    RankingCriteria.HIGHER_MEDIAN_IS_BETTER: (Stat.MEDIAN, True),
    RankingCriteria.LOWER_MIN_IS_BETTER: (Stat.MIN, False),
    RankingCriteria.HIGHER_MIN_IS_BETTER: (Stat.MIN, True),
    RankingCriteria.LOWER_MAX_IS_BETTER: (Stat.MAX, False),
    RankingCriteria.HIGHER_MAX_IS_BETTER: (Stat.MAX, True),
}


@dataclass
class Ranking:
    """Stats in rank order according to a criterion, best first."""

    criteria: RankingCriteria = RankingCriteria.LOWER_MEAN_IS_BETTER
    stats: list[Stats] = field(default_factory=list)

    def winner(self) -> Stats:
        """Return the best-ranked Stats, or empty Stats if there are none."""
        if not self.stats:
            return Stats()
        return self.stats[0]

    def _report(self, enable_styling: bool) -> str:
        if not self.stats:
            return "Empty Ranking"
        table = Table()
        table.table_style.enable_text_styling = enable_styling
        table.append_row(
            row(
                cell("Experiment"),
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
        for index, stats in enumerate(self.stats):
            name = stats.measurement_name
            if stats.units:
                name += f" [{stats.units}]"
            experiment_name = stats.experiment_name
            style = stats.style
            if index == 0:
                style = "{{bold}}" + style
                name += "\n*Winner*"
                experiment_name += "\n*Winner*"
            r = row(style)
            r.append_cell(cell(experiment_name), cell(name))
            r.append_cell(*stats.cells())
            table.append_row(r)

        out = f"Ranking Criteria: {self.criteria}\n"
        if enable_styling:
            out = "{{bold}}" + out + STYLE_RESET
        return out + table.render()

    def colorable_string(self) -> str:
        """Return the ranking table with style markup."""
        return self._report(True)

    def __str__(self) -> str:
        return self._report(False)


def rank_stats(criteria: RankingCriteria, *args: Stats) -> Ranking:
    """Rank the given Stats according to the criterion."""
    stat, descending = _ORDERING[criteria]
    ordered = sorted(args, key=lambda s: s.float_for(stat), reverse=descending)
    return Ranking(criteria=criteria, stats=ordered)
"""
Search statistics: counters the search increments while it runs.

The search reports into a StatisticsSink (see game.py). SearchStatistics is
the default sink: it counts transposition-table hits and keeps a histogram of
cutoffs keyed by "moves evaluated before the cutoff". A healthy move ordering
puts most of the histogram mass at 1: the first move tried already refutes
the node.
"""

from collections import Counter
from dataclasses import dataclass, field


@dataclass
class SearchStatistics:
    cache_hits: int = 0
    cutoff_histogram: Counter = field(default_factory=Counter)

    def record_cache_hit(self) -> None:
        self.cache_hits += 1

    def record_cutoff(self, moves_evaluated: int) -> None:
        self.cutoff_histogram[moves_evaluated] += 1

    @property
    def cutoffs(self) -> int:
        """Total number of cutoffs recorded."""
        return sum(self.cutoff_histogram.values())

    @property
    def first_move_cutoff_rate(self) -> float:
        """Fraction of cutoffs produced by the first move tried (0.0 if none)."""
        total = self.cutoffs
        if total == 0:
            return 0.0
        return self.cutoff_histogram[1] / total

    def reset(self) -> None:
        self.cache_hits = 0
        self.cutoff_histogram.clear()

    def summary(self) -> str:
        return (
            f"cache_hits={self.cache_hits} cutoffs={self.cutoffs} "
            f"first_move_cutoffs={self.first_move_cutoff_rate:.0%}"
        )

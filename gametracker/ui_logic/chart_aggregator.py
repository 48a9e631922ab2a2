"""
Chart aggregates derived from the current state.

Pure functions, recomputed after every render. The output shape
(`ChartSeries`: title, labels, values) is all a chart renderer needs; this
module knows nothing about colors or pixels.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Any, Optional

from ..schema import INTEREST_LEVELS, MAX_SCORE
from .state_manager import GameState

SCORE_LABELS = ["★" * n for n in range(1, MAX_SCORE + 1)]


@dataclass
class ChartSeries:
    """Labels plus one numeric series."""
    title: str
    labels: List[str] = field(default_factory=list)
    values: List[float] = field(default_factory=list)

    def as_dict(self) -> Dict[str, float]:
        return dict(zip(self.labels, self.values))

    @property
    def total(self) -> float:
        return sum(self.values)


@dataclass
class FinishedSummary:
    total: int = 0
    average_hours: float = 0.0


@dataclass
class ChartBundle:
    interest: ChartSeries
    scores: ChartSeries
    reasons: ChartSeries
    finished: FinishedSummary


def interest_distribution(records: Iterable[Mapping[str, Any]]) -> ChartSeries:
    """Count want-to-play records per interest level (all three levels always present)."""
    counts = {level: 0 for level in INTEREST_LEVELS}
    for record in records:
        level = record.get("interest_level")
        if level in counts:
            counts[level] += 1
    return ChartSeries("Interest Level", list(counts.keys()), list(counts.values()))


def score_histogram(records: Iterable[Mapping[str, Any]]) -> ChartSeries:
    """Five buckets of finished records by score; score 0 (unrated) is excluded."""
    buckets = [0] * MAX_SCORE
    for record in records:
        score = record.get("score") or 0
        if isinstance(score, int) and 1 <= score <= MAX_SCORE:
            buckets[score - 1] += 1
    return ChartSeries("Scores", list(SCORE_LABELS), buckets)


def reason_distribution(records: Iterable[Mapping[str, Any]]) -> ChartSeries:
    """Count abandoned records by reason, buckets in first-seen order."""
    counts: Dict[str, int] = {}
    for record in records:
        reason = str(record.get("reason") or "")
        counts[reason] = counts.get(reason, 0) + 1
    return ChartSeries("Reasons for Giving Up", list(counts.keys()), list(counts.values()))


def _hours(value: Optional[Any]) -> float:
    try:
        return float(value) if value not in (None, "") else 0.0
    except (TypeError, ValueError):
        return 0.0


def finished_summary(records: Iterable[Mapping[str, Any]]) -> FinishedSummary:
    """Total finished games and their average hours spent (one decimal)."""
    records = list(records)
    total = len(records)
    if total == 0:
        return FinishedSummary()
    hours = sum(_hours(r.get("hours_spent")) for r in records)
    return FinishedSummary(total=total, average_hours=round(hours / total, 1))


def aggregate(state: GameState) -> ChartBundle:
    return ChartBundle(
        interest=interest_distribution(state.want_to_play),
        scores=score_histogram(state.finished),
        reasons=reason_distribution(state.abandoned),
        finished=finished_summary(state.finished),
    )

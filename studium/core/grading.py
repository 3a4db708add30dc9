"""
Grade aggregation strategies.

A strategy turns a student's sequence of ``(grade, weight)`` pairs into a
single final grade. Strategies are pure functions with no state, so one
value can be shared by any number of courses.
"""

from enum import Enum
from typing import Callable, Dict, Iterable, NamedTuple

from .exceptions import ValidationError


class GradeEntry(NamedTuple):
    """One recorded grade and its weight."""
    grade: float
    weight: float = 1.0


def unweighted_mean(entries: Iterable[GradeEntry]) -> float:
    """Arithmetic mean of the grades, ignoring weights. Empty input gives 0."""
    grades = [grade for grade, _ in entries]
    if not grades:
        return 0.0
    return sum(grades) / len(grades)


def weighted_mean(entries: Iterable[GradeEntry]) -> float:
    """Weighted mean of the grades. A total weight of 0 gives 0."""
    total_weight = 0.0
    weighted_sum = 0.0
    for grade, weight in entries:
        total_weight += weight
        weighted_sum += grade * weight
    if total_weight == 0:
        return 0.0
    return weighted_sum / total_weight


class GradingStrategy(Enum):
    """Available grade aggregation policies."""
    UNWEIGHTED_MEAN = "unweighted_mean"
    WEIGHTED_MEAN = "weighted_mean"

    def compute(self, entries: Iterable[GradeEntry]) -> float:
        return _AGGREGATORS[self](entries)

    @classmethod
    def parse(cls, text: str) -> "GradingStrategy":
        try:
            return cls((text or "").strip().lower())
        except ValueError:
            raise ValidationError(
                f"Unknown grading strategy: {text!r}",
                error_code="UNKNOWN_STRATEGY",
                details={'strategy': text}
            ) from None


_AGGREGATORS: Dict[GradingStrategy, Callable[[Iterable[GradeEntry]], float]] = {
    GradingStrategy.UNWEIGHTED_MEAN: unweighted_mean,
    GradingStrategy.WEIGHTED_MEAN: weighted_mean,
}

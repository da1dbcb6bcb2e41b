"""
Analytics report types.

Everything here is derived on demand and never persisted. The report is
plain immutable data handed to whatever renders it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from drillcore.srs.progress_store import RatingCounts

from .trends import TrendComparison


class StrengthLabel(str, Enum):
    """Categorical bucket summarizing a group's ease."""

    TOO_EARLY = "Too early"
    WEAK = "Weak"
    MODERATE = "Moderate"
    GOOD = "Good"
    STRONG = "Strong"

    @classmethod
    def classify(
        cls,
        avg_ease: float,
        count: int,
        min_evidence: int,
        strong: float = 2.5,
        good: float = 2.3,
        moderate: float = 1.8,
    ) -> StrengthLabel:
        """
        Convert an average ease to a label.

        Groups with fewer than `min_evidence` items are always "Too early",
        whatever their average says.
        """
        if count < min_evidence:
            return cls.TOO_EARLY
        if avg_ease >= strong:
            return cls.STRONG
        if avg_ease >= good:
            return cls.GOOD
        if avg_ease >= moderate:
            return cls.MODERATE
        return cls.WEAK

    @property
    def is_rated(self) -> bool:
        return self is not StrengthLabel.TOO_EARLY

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            StrengthLabel.TOO_EARLY: "dim",
            StrengthLabel.WEAK: "red",
            StrengthLabel.MODERATE: "yellow",
            StrengthLabel.GOOD: "cyan",
            StrengthLabel.STRONG: "green",
        }[self]


@dataclass(frozen=True)
class ModuleSummary:
    """Strength of one course module."""

    module: int
    name: str
    avg_ease: float  # Recency-weighted, unrounded
    count: int
    mastered: int
    label: StrengthLabel


@dataclass(frozen=True)
class ConceptSummary:
    """Strength of one concept inside a module."""

    module: int
    concept: str
    avg_ease: float  # Recency-weighted, unrounded
    count: int
    mastered: int
    label: StrengthLabel
    link: str | None = None


@dataclass(frozen=True)
class WeakExercise:
    """One of the lowest-ease exercises."""

    key: str
    name: str
    ease_factor: float
    repetitions: int
    next_review: date | None

    def due_status(self, today: date | None = None) -> str:
        """Relative due date, e.g. 'Due today', 'Due 2 days ago', 'Due in 1 day'."""
        if self.next_review is None:
            return ""
        diff = (self.next_review - (today or date.today())).days
        if diff == 0:
            return "Due today"
        plural = "" if abs(diff) == 1 else "s"
        if diff < 0:
            return f"Due {abs(diff)} day{plural} ago"
        return f"Due in {diff} day{plural}"


@dataclass(frozen=True)
class AnalyticsReport:
    """Competence summary computed from the current store contents."""

    generated_on: date
    total_tracked: int
    mastered_count: int
    weak_count: int
    modules: tuple[ModuleSummary, ...] = ()
    concepts: tuple[ConceptSummary, ...] = ()
    weakest: tuple[WeakExercise, ...] = ()
    ratings: RatingCounts = field(default_factory=RatingCounts)
    trend: TrendComparison | None = None

    @property
    def modules_rated(self) -> int:
        """Modules with enough evidence for a strength label."""
        return sum(1 for m in self.modules if m.label.is_rated)

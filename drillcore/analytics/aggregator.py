"""
Analytics Aggregator.

Recomputes the competence summary from the review and progress stores
every time it is asked. Nothing here is cached; the only write is the
daily trend snapshot.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date

from loguru import logger

from drillcore.core.catalog import CourseCatalog
from drillcore.core.keys import is_flashcard, module_of, prettify_key, strip_variant_suffix
from drillcore.srs.progress_store import ProgressStore
from drillcore.srs.review_store import ReviewRecord, ReviewStore

from .report import (
    AnalyticsReport,
    ConceptSummary,
    ModuleSummary,
    StrengthLabel,
    WeakExercise,
)
from .trends import Snapshot, TrendTracker

# =============================================================================
# Configuration
# =============================================================================


@dataclass
class AnalyticsConfig:
    """Thresholds for strength labels and counts."""

    recency_days: float = 30.0  # Weight halves after this many days
    strong_ease: float = 2.5
    good_ease: float = 2.3
    moderate_ease: float = 1.8
    module_min_evidence: int = 5
    concept_min_evidence: int = 3
    weakest_limit: int = 10
    min_repetitions: int = 2  # Below this a record is too new to judge
    mastered_ease: float = 2.5
    weak_ease: float = 1.8


# =============================================================================
# Aggregator
# =============================================================================


class AnalyticsAggregator:
    """Builds AnalyticsReport objects from the current store contents."""

    def __init__(
        self,
        reviews: ReviewStore,
        progress: ProgressStore,
        trends: TrendTracker | None = None,
        catalog: CourseCatalog | None = None,
        config: AnalyticsConfig | None = None,
    ):
        """
        Initialize the aggregator.

        Args:
            reviews: Review record store
            progress: Progress store (rating breakdown)
            trends: Snapshot tracker; no snapshot is saved if None
            catalog: Module names and concept tables (empty if None)
            config: Custom thresholds (uses defaults if None)
        """
        self.reviews = reviews
        self.progress = progress
        self.trends = trends
        self.catalog = catalog or CourseCatalog()
        self.config = config or AnalyticsConfig()

    def recency_weight(self, record: ReviewRecord, today: date) -> float:
        """Weight 1 / (1 + age/30) where age is days since the last review."""
        last_review = record.last_review
        if last_review is None:
            return 1.0
        age = max(0, (today - last_review).days)
        return 1.0 / (1.0 + age / self.config.recency_days)

    def _label(self, avg_ease: float, count: int, min_evidence: int) -> StrengthLabel:
        return StrengthLabel.classify(
            avg_ease,
            count,
            min_evidence,
            strong=self.config.strong_ease,
            good=self.config.good_ease,
            moderate=self.config.moderate_ease,
        )

    def _is_mastered(self, record: ReviewRecord) -> bool:
        return (
            record.repetitions >= self.config.min_repetitions
            and record.ease_factor >= self.config.mastered_ease
        )

    def _is_weak(self, record: ReviewRecord) -> bool:
        return (
            record.repetitions >= self.config.min_repetitions
            and record.ease_factor < self.config.weak_ease
        )

    def _weighted_average(self, records: list[ReviewRecord], today: date) -> float:
        total_weight = 0.0
        weighted = 0.0
        for record in records:
            w = self.recency_weight(record, today)
            weighted += record.ease_factor * w
            total_weight += w
        return weighted / total_weight if total_weight else 0.0

    @staticmethod
    def _weakest_first(label: StrengthLabel, avg_ease: float) -> tuple[bool, float]:
        return (label is StrengthLabel.TOO_EARLY, avg_ease)

    def module_summaries(
        self, records: dict[str, ReviewRecord], today: date
    ) -> list[ModuleSummary]:
        """Per-module strength, weakest first, "Too early" last."""
        groups: dict[int, list[ReviewRecord]] = defaultdict(list)
        for key, record in records.items():
            module = module_of(key)
            if module is not None:
                groups[module].append(record)

        summaries = []
        for module, members in groups.items():
            avg = self._weighted_average(members, today)
            summaries.append(
                ModuleSummary(
                    module=module,
                    name=self.catalog.module_name(module),
                    avg_ease=avg,
                    count=len(members),
                    mastered=sum(1 for r in members if self._is_mastered(r)),
                    label=self._label(avg, len(members), self.config.module_min_evidence),
                )
            )
        summaries.sort(key=lambda s: (*self._weakest_first(s.label, s.avg_ease), s.module))
        return summaries

    def concept_summaries(
        self, records: dict[str, ReviewRecord], today: date
    ) -> list[ConceptSummary]:
        """Per-(module, concept) strength for keys the concept index knows."""
        groups: dict[tuple[int, str], list[ReviewRecord]] = defaultdict(list)
        for key, record in records.items():
            if is_flashcard(key):
                continue
            module = module_of(key)
            if module is None:
                continue
            concept = self.catalog.concept_for(strip_variant_suffix(key))
            if concept is None:
                continue
            groups[(module, concept)].append(record)

        summaries = []
        for (module, concept), members in groups.items():
            avg = self._weighted_average(members, today)
            summaries.append(
                ConceptSummary(
                    module=module,
                    concept=concept,
                    avg_ease=avg,
                    count=len(members),
                    mastered=sum(1 for r in members if self._is_mastered(r)),
                    label=self._label(avg, len(members), self.config.concept_min_evidence),
                    link=self.catalog.link_for(concept),
                )
            )
        summaries.sort(
            key=lambda s: (*self._weakest_first(s.label, s.avg_ease), s.module, s.concept)
        )
        return summaries

    def weakest_exercises(self, records: dict[str, ReviewRecord]) -> list[WeakExercise]:
        """Lowest-ease exercises with enough repetitions, flashcards excluded."""
        candidates = [
            r
            for r in records.values()
            if r.repetitions >= self.config.min_repetitions and not is_flashcard(r.key)
        ]
        candidates.sort(key=lambda r: (r.ease_factor, r.key))
        return [
            WeakExercise(
                key=r.key,
                name=prettify_key(r.key, r.label, self.catalog.module_names),
                ease_factor=r.ease_factor,
                repetitions=r.repetitions,
                next_review=r.next_review,
            )
            for r in candidates[: self.config.weakest_limit]
        ]

    def build_report(self, today: date | None = None) -> AnalyticsReport | None:
        """
        Compute the analytics report.

        Saves one trend snapshot as a side effect when a tracker is set.

        Args:
            today: Reference date (defaults to today)

        Returns:
            AnalyticsReport, or None if nothing has been reviewed yet
        """
        today = today or date.today()
        records = self.reviews.get_all()
        if not records:
            logger.debug("No review records; skipping analytics")
            return None

        mastered = sum(1 for r in records.values() if self._is_mastered(r))
        weak = sum(1 for r in records.values() if self._is_weak(r))
        current = Snapshot(total_tracked=len(records), mastered_count=mastered, weak_count=weak)

        trend = None
        if self.trends is not None:
            trend = self.trends.compare(current, today=today)
            self.trends.save_snapshot(len(records), mastered, weak, today=today)

        report = AnalyticsReport(
            generated_on=today,
            total_tracked=len(records),
            mastered_count=mastered,
            weak_count=weak,
            modules=tuple(self.module_summaries(records, today)),
            concepts=tuple(self.concept_summaries(records, today)),
            weakest=tuple(self.weakest_exercises(records)),
            ratings=self.progress.rating_counts(),
            trend=trend,
        )

        logger.debug(
            f"Built report: {report.total_tracked} tracked, {mastered} mastered, "
            f"{weak} weak, {report.modules_rated}/{len(report.modules)} modules rated"
        )
        return report

"""
Course engine: wires the stores and services for one course instance.

Data flow for a completed exercise:
    progress.update -> derive_quality -> reviews.record_review

Analytics are recomputed from the stores on every report request.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date, datetime

from loguru import logger

from drillcore.analytics import (
    AnalyticsAggregator,
    AnalyticsConfig,
    AnalyticsReport,
    TrendConfig,
    TrendTracker,
)
from drillcore.config import Settings, get_settings
from drillcore.core.catalog import CourseCatalog, load_catalog
from drillcore.srs import (
    ProgressRecord,
    ProgressStore,
    ReviewRecord,
    ReviewStore,
    SM2Config,
    derive_quality,
)
from drillcore.storage import PersistedStore
from drillcore.study import (
    CandidateFilter,
    Difficulty,
    QueueBuilder,
    QueueConfig,
    SessionMode,
    SessionQueue,
)


@dataclass
class AttemptResult:
    """Outcome of recording one exercise attempt."""

    progress: ProgressRecord
    quality: int
    review: ReviewRecord


class CourseEngine:
    """
    Facade over the scheduling and analytics components.

    Every component shares the same PersistedStore handle, so a review
    recorded here is visible to the next queue or report immediately.
    """

    def __init__(
        self,
        store: PersistedStore,
        catalog: CourseCatalog | None = None,
        rng: random.Random | None = None,
        session_size: int = 10,
        sm2_config: SM2Config | None = None,
        analytics_config: AnalyticsConfig | None = None,
        trend_config: TrendConfig | None = None,
    ):
        self.store = store
        self.catalog = catalog or CourseCatalog()

        self.reviews = ReviewStore(store, config=sm2_config)
        self.progress = ProgressStore(store)
        self.trends = TrendTracker(store, config=trend_config)
        self.queues = QueueBuilder(
            self.reviews,
            rng=rng,
            config=QueueConfig(default_count=session_size),
        )
        self.analytics = AnalyticsAggregator(
            self.reviews,
            self.progress,
            trends=self.trends,
            catalog=self.catalog,
            config=analytics_config,
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> CourseEngine:
        """Build an engine on the configured database, namespace and catalog."""
        settings = settings or get_settings()
        store = PersistedStore(settings.db_path, namespace=settings.namespace)
        return cls(
            store,
            catalog=load_catalog(settings.catalog_path),
            session_size=settings.session_size,
        )

    def record_attempt(
        self,
        key: str,
        self_rating: int,
        hints_used: bool = False,
        solution_viewed: bool = False,
        label: str | None = None,
        today: date | None = None,
    ) -> AttemptResult:
        """
        Record a completed exercise and schedule its next review.

        Args:
            key: Exercise key
            self_rating: 0 none, 1 got it, 2 struggled, 3 needed solution
            hints_used: Whether hints were opened
            solution_viewed: Whether the solution was revealed
            label: Display label stored with the review record
            today: Review date (defaults to today)

        Returns:
            AttemptResult with the merged progress, quality and review record
        """
        attempted_at = datetime.combine(today, datetime.now().time()) if today else None
        progress = self.progress.update(
            key,
            status="completed",
            self_rating=self_rating,
            hints_used=hints_used,
            solution_viewed=solution_viewed,
            last_attempted=attempted_at,
        )
        quality = derive_quality(progress)
        review = self.reviews.record_review(key, quality, label=label, today=today)

        logger.debug(f"Attempt on {key}: rating={self_rating} -> quality={quality}")
        return AttemptResult(progress=progress, quality=quality, review=review)

    def build_queue(
        self,
        mode: SessionMode | str,
        count: int | None = None,
        prefix: str | None = None,
        difficulty: Difficulty | str = Difficulty.MIXED,
        today: date | None = None,
    ) -> SessionQueue:
        """Build a session queue, optionally restricted to keys with a prefix."""
        candidate_filter: CandidateFilter | None = None
        if prefix:
            candidate_filter = lambda key: key.startswith(prefix)  # noqa: E731
        return self.queues.build(
            mode,
            count,
            candidate_filter=candidate_filter,
            catalog_items=self.catalog.items,
            difficulty=difficulty,
            today=today,
        )

    def report(self, today: date | None = None) -> AnalyticsReport | None:
        """Compute the analytics report (saves today's trend snapshot)."""
        return self.analytics.build_report(today=today)

    def close(self) -> None:
        self.store.close()

"""
SM-2 Review Record Store.

One review record per exercise key, updated with the SuperMemo 2 rule
every time the learner rates an exercise.

Quality scale (0-5):
5 - Got it, no hints
4 - Got it, used hints
3 - Struggled (minimum passing grade)
2 - No rating, solution viewed
1 - Needed the solution (reset)
0 - Not engaged
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Any

from loguru import logger

from drillcore.storage.json_store import SRS_COLLECTION, PersistedStore

if TYPE_CHECKING:
    from .progress_store import ProgressRecord

# =============================================================================
# SM-2 Configuration
# =============================================================================


@dataclass
class SM2Config:
    """Configuration for SM-2 algorithm."""

    initial_easiness: float = 2.5
    minimum_easiness: float = 1.3
    first_interval: int = 1  # Days for first review
    second_interval: int = 6  # Days for second review
    passing_grade: int = 3
    weak_easiness: float = 2.5  # Below this (with enough reps) counts as weak
    weak_min_repetitions: int = 2


# =============================================================================
# Review Record
# =============================================================================


@dataclass
class ReviewRecord:
    """SM-2 state for a single exercise key."""

    key: str
    ease_factor: float = 2.5
    interval: int = 0  # Days until next review
    repetitions: int = 0  # Consecutive passing reviews
    review_count: int = 0  # All reviews, resets included
    next_review: date | None = None
    label: str | None = None
    last_quality: int | None = None

    def is_due(self, today: date | None = None) -> bool:
        """Check if this exercise is due for review."""
        if self.next_review is None:
            return True
        return self.next_review <= (today or date.today())

    @property
    def last_review(self) -> date | None:
        """Approximate last review date, reconstructed as next_review - interval."""
        if self.next_review is None:
            return None
        return self.next_review - timedelta(days=self.interval)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: dict[str, Any] = {
            "easeFactor": self.ease_factor,
            "interval": self.interval,
            "repetitions": self.repetitions,
            "reviewCount": self.review_count,
            "nextReview": self.next_review.isoformat() if self.next_review else None,
        }
        if self.label:
            data["label"] = self.label
        if self.last_quality is not None:
            data["lastQuality"] = self.last_quality
        return data

    @classmethod
    def from_dict(cls, key: str, data: dict[str, Any]) -> ReviewRecord:
        """
        Create from a stored dictionary.

        Accepts nextReview as a date or a full ISO timestamp.

        Raises:
            KeyError, TypeError, ValueError: If the entry is malformed
        """
        next_review = data.get("nextReview")
        return cls(
            key=key,
            ease_factor=float(data["easeFactor"]),
            interval=int(data["interval"]),
            repetitions=int(data["repetitions"]),
            review_count=int(data.get("reviewCount") or 0),
            next_review=date.fromisoformat(next_review[:10]) if next_review else None,
            label=data.get("label") or None,
            last_quality=data.get("lastQuality"),
        )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def derive_quality(progress: ProgressRecord | None) -> int:
    """
    Convert an exercise attempt to an SM-2 quality score.

    The self-rating is the primary signal. Viewing the solution is the
    normal "check your answer" step; hints only lower a "got it" to 4.

    Args:
        progress: Latest attempt for the exercise

    Returns:
        Quality 0-5
    """
    if progress is None:
        return 0

    if progress.self_rating == 1:
        return 4 if progress.hints_used else 5
    if progress.self_rating == 2:
        return 3
    if progress.self_rating == 3:
        return 1

    # No rating yet
    if not progress.solution_viewed and not progress.hints_used:
        return 4
    if not progress.solution_viewed:
        return 3
    return 2


# =============================================================================
# Review Store
# =============================================================================


class ReviewStore:
    """
    Spaced-repetition state for every reviewed exercise.

    Records are created on first review, updated on every later one,
    and never deleted.
    """

    def __init__(self, store: PersistedStore, config: SM2Config | None = None):
        """
        Initialize the review store.

        Args:
            store: Shared persisted store handle
            config: Custom SM-2 configuration (uses defaults if None)
        """
        self.store = store
        self.config = config or SM2Config()

    # =========================================================================
    # SM-2 update
    # =========================================================================

    def calculate_next_review(
        self,
        record: ReviewRecord,
        quality: int,
        today: date | None = None,
    ) -> ReviewRecord:
        """
        Apply one SM-2 step to a record.

        Args:
            record: Current state for the exercise
            quality: Quality score (0-5)
            today: Review date (defaults to today)

        Returns:
            New ReviewRecord with updated ease, interval and next_review
        """
        today = today or date.today()

        if quality >= self.config.passing_grade:
            repetitions = record.repetitions + 1
            if repetitions == 1:
                interval = self.config.first_interval
            elif repetitions == 2:
                interval = self.config.second_interval
            else:
                interval = _round_half_up(record.interval * record.ease_factor)
        else:
            # Failed - reset to beginning
            repetitions = 0
            interval = self.config.first_interval

        # EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
        ef_delta = 0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02)
        ease = max(self.config.minimum_easiness, record.ease_factor + ef_delta)

        return replace(
            record,
            ease_factor=round(ease, 2),
            interval=interval,
            repetitions=repetitions,
            review_count=record.review_count + 1,
            next_review=today + timedelta(days=interval),
            last_quality=quality,
        )

    def record_review(
        self,
        key: str,
        quality: int,
        label: str | None = None,
        today: date | None = None,
    ) -> ReviewRecord:
        """
        Record a review result for an exercise and persist it.

        Args:
            key: Exercise key
            quality: Quality score (clamped to 0-5)
            label: Display label; the previous one is kept when omitted
            today: Review date (defaults to today)

        Returns:
            Updated ReviewRecord
        """
        if not 0 <= quality <= 5:
            clamped = min(5, max(0, quality))
            logger.warning(f"Quality {quality} for {key} out of range, using {clamped}")
            quality = clamped

        current = self.get(key)
        updated = self.calculate_next_review(current, quality, today=today)
        if label:
            updated = replace(updated, label=label)

        self.store.put(SRS_COLLECTION, key, updated.to_dict())

        logger.debug(
            f"Recorded review for {key}: quality={quality}, "
            f"next_review={updated.next_review}, interval={updated.interval}d, "
            f"ease={updated.ease_factor}"
        )
        return updated

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, key: str) -> ReviewRecord:
        """
        Get the record for an exercise.

        Returns:
            Stored record, or a fresh one for unknown or unreadable keys
        """
        data = self.store.get(SRS_COLLECTION, key)
        if isinstance(data, dict):
            try:
                return ReviewRecord.from_dict(key, data)
            except (KeyError, TypeError, ValueError):
                logger.warning(f"Malformed review record for {key}, starting fresh")
        return ReviewRecord(key=key, ease_factor=self.config.initial_easiness)

    def get_all(self) -> dict[str, ReviewRecord]:
        """All review records keyed by exercise key; malformed entries are skipped."""
        records: dict[str, ReviewRecord] = {}
        for key, data in self.store.load(SRS_COLLECTION).items():
            if not isinstance(data, dict):
                logger.warning(f"Skipping malformed review record {key!r}")
                continue
            try:
                records[key] = ReviewRecord.from_dict(key, data)
            except (KeyError, TypeError, ValueError):
                logger.warning(f"Skipping malformed review record {key!r}")
        return records

    def get_due_exercises(
        self,
        today: date | None = None,
        records: dict[str, ReviewRecord] | None = None,
    ) -> list[ReviewRecord]:
        """
        Get exercises due for review.

        Args:
            today: Reference date (defaults to today)
            records: Already-loaded records (loaded from the store if None)

        Returns:
            Records with next_review on or before today, most overdue first,
            then hardest (lowest ease) first
        """
        today = today or date.today()
        if records is None:
            records = self.get_all()
        due = [
            record
            for record in records.values()
            if record.next_review is not None and record.next_review <= today
        ]
        due.sort(key=lambda r: (r.next_review, r.ease_factor, r.key))
        return due

    def get_due_count(self, today: date | None = None) -> int:
        """Count exercises due for review today."""
        return len(self.get_due_exercises(today=today))

    def get_weakest_exercises(
        self,
        count: int | None = None,
        records: dict[str, ReviewRecord] | None = None,
    ) -> list[ReviewRecord]:
        """
        Get the exercises the learner struggles with most.

        A single review doesn't establish a pattern, so only records with
        enough repetitions and ease below the weak threshold qualify.

        Args:
            count: Maximum records to return (all if None)
            records: Already-loaded records (loaded from the store if None)

        Returns:
            Records sorted by ascending ease
        """
        if records is None:
            records = self.get_all()
        weak = [
            record
            for record in records.values()
            if record.repetitions >= self.config.weak_min_repetitions
            and record.ease_factor < self.config.weak_easiness
        ]
        weak.sort(key=lambda r: (r.ease_factor, r.key))
        return weak if count is None else weak[:count]

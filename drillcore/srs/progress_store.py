"""
Exercise-level progress tracking.

Stores the latest attempt per exercise key: status, hint/solution usage
and the learner's self-rating. No derived computation happens here.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any

from loguru import logger

from drillcore.storage.json_store import PROGRESS_COLLECTION, PersistedStore


class SelfRating(IntEnum):
    """How the learner rated an attempt."""

    NONE = 0
    GOT_IT = 1
    STRUGGLED = 2
    NEEDED_SOLUTION = 3


@dataclass
class ProgressRecord:
    """Latest attempt for one exercise."""

    key: str
    status: str = "attempted"  # 'attempted' or 'completed'
    self_rating: int = SelfRating.NONE
    hints_used: bool = False
    solution_viewed: bool = False
    last_attempted: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "status": self.status,
            "selfRating": int(self.self_rating),
            "hintsUsed": self.hints_used,
            "solutionViewed": self.solution_viewed,
            "lastAttempted": self.last_attempted.isoformat() if self.last_attempted else None,
        }

    @classmethod
    def from_dict(cls, key: str, data: dict[str, Any]) -> ProgressRecord:
        """Create from a stored dictionary."""
        last_attempted = data.get("lastAttempted")
        return cls(
            key=key,
            status=data.get("status") or "attempted",
            self_rating=int(data.get("selfRating") or 0),
            hints_used=bool(data.get("hintsUsed", False)),
            solution_viewed=bool(data.get("solutionViewed", False)),
            last_attempted=datetime.fromisoformat(last_attempted) if last_attempted else None,
        )


@dataclass(frozen=True)
class RatingCounts:
    """Self-rating breakdown across all exercises."""

    got_it: int = 0
    struggled: int = 0
    needed_solution: int = 0

    @property
    def total(self) -> int:
        return self.got_it + self.struggled + self.needed_solution

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


class ProgressStore:
    """Narrow fact store of exercise attempts."""

    def __init__(self, store: PersistedStore):
        self.store = store

    def get(self, key: str) -> ProgressRecord | None:
        """Get the latest attempt for an exercise, or None."""
        data = self.store.get(PROGRESS_COLLECTION, key)
        if not isinstance(data, dict):
            return None
        try:
            return ProgressRecord.from_dict(key, data)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring malformed progress record for {key}")
            return None

    def update(
        self,
        key: str,
        *,
        status: str | None = None,
        self_rating: int | None = None,
        hints_used: bool | None = None,
        solution_viewed: bool | None = None,
        last_attempted: datetime | None = None,
    ) -> ProgressRecord:
        """
        Merge an attempt into the stored record and persist it.

        Fields left as None keep their previous value; last_attempted
        defaults to now.

        Returns:
            The merged ProgressRecord
        """
        record = self.get(key) or ProgressRecord(key=key)

        if status is not None:
            record.status = status
        if self_rating is not None:
            record.self_rating = int(self_rating)
        if hints_used is not None:
            record.hints_used = hints_used
        if solution_viewed is not None:
            record.solution_viewed = solution_viewed
        record.last_attempted = last_attempted or datetime.now()

        self.store.put(PROGRESS_COLLECTION, key, record.to_dict())
        return record

    def load_all(self) -> dict[str, ProgressRecord]:
        """All progress records; malformed entries are skipped."""
        records: dict[str, ProgressRecord] = {}
        for key, data in self.store.load(PROGRESS_COLLECTION).items():
            if not isinstance(data, dict):
                logger.warning(f"Skipping malformed progress record {key!r}")
                continue
            try:
                records[key] = ProgressRecord.from_dict(key, data)
            except (TypeError, ValueError):
                logger.warning(f"Skipping malformed progress record {key!r}")
        return records

    def rating_counts(self, records: dict[str, ProgressRecord] | None = None) -> RatingCounts:
        """Count got-it / struggled / needed-solution ratings."""
        if records is None:
            records = self.load_all()
        got_it = struggled = needed = 0
        for record in records.values():
            if record.self_rating == SelfRating.GOT_IT:
                got_it += 1
            elif record.self_rating == SelfRating.STRUGGLED:
                struggled += 1
            elif record.self_rating == SelfRating.NEEDED_SOLUTION:
                needed += 1
        return RatingCounts(got_it=got_it, struggled=struggled, needed_solution=needed)

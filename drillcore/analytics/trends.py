"""
Daily analytics snapshots for week-over-week trends.

One snapshot per calendar date, overwritten when saved again the same
day, kept for a rolling window and pruned on every save. Saving must
never get in the way of showing a report, so storage failures are
logged and dropped.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, timedelta

from loguru import logger

from drillcore.storage.json_store import SNAPSHOT_COLLECTION, PersistedStore


@dataclass
class TrendConfig:
    """Configuration for snapshot retention and comparison."""

    retention_days: int = 30
    comparison_min_days: int = 5
    comparison_max_days: int = 10
    comparison_target_days: int = 7


@dataclass(frozen=True)
class Snapshot:
    """Aggregate counts for one day."""

    total_tracked: int
    mastered_count: int
    weak_count: int

    def to_dict(self) -> dict[str, int]:
        return {
            "totalTracked": self.total_tracked,
            "masteredCount": self.mastered_count,
            "weakCount": self.weak_count,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Snapshot:
        return cls(
            total_tracked=int(data["totalTracked"]),
            mastered_count=int(data["masteredCount"]),
            weak_count=int(data["weakCount"]),
        )


@dataclass(frozen=True)
class TrendComparison:
    """Current counts against an earlier snapshot."""

    baseline_date: date
    days_ago: int
    baseline: Snapshot
    current: Snapshot

    @property
    def tracked_delta(self) -> int:
        return self.current.total_tracked - self.baseline.total_tracked

    @property
    def mastered_delta(self) -> int:
        return self.current.mastered_count - self.baseline.mastered_count

    @property
    def weak_delta(self) -> int:
        return self.current.weak_count - self.baseline.weak_count

    def to_dict(self) -> dict:
        data = asdict(self)
        data["baseline_date"] = self.baseline_date.isoformat()
        return data


class TrendTracker:
    """Persists and queries daily snapshots."""

    def __init__(self, store: PersistedStore, config: TrendConfig | None = None):
        self.store = store
        self.config = config or TrendConfig()

    def get_snapshots(self) -> dict[date, Snapshot]:
        """All stored snapshots by date; malformed entries are skipped."""
        snapshots: dict[date, Snapshot] = {}
        for day, data in self.store.load(SNAPSHOT_COLLECTION).items():
            try:
                snapshots[date.fromisoformat(day)] = Snapshot.from_dict(data)
            except (KeyError, TypeError, ValueError):
                logger.warning(f"Skipping malformed snapshot {day!r}")
        return snapshots

    def save_snapshot(
        self,
        total_tracked: int,
        mastered_count: int,
        weak_count: int,
        today: date | None = None,
    ) -> Snapshot:
        """
        Save today's snapshot and prune entries outside the window.

        Returns:
            The snapshot (even if persisting it failed)
        """
        today = today or date.today()
        snapshot = Snapshot(
            total_tracked=total_tracked,
            mastered_count=mastered_count,
            weak_count=weak_count,
        )

        cutoff = today - timedelta(days=self.config.retention_days)
        kept: dict[str, dict] = {}
        for day, data in self.store.load(SNAPSHOT_COLLECTION).items():
            try:
                if date.fromisoformat(day) >= cutoff:
                    kept[day] = data
            except (TypeError, ValueError):
                continue
        kept[today.isoformat()] = snapshot.to_dict()

        if not self.store.replace(SNAPSHOT_COLLECTION, kept):
            logger.warning("Could not persist analytics snapshot; continuing without it")
        else:
            logger.debug(f"Saved snapshot for {today} ({len(kept)} retained)")
        return snapshot

    def find_comparison_snapshot(self, today: date | None = None) -> tuple[date, Snapshot] | None:
        """
        Find the snapshot to compare against.

        Returns:
            (date, snapshot) of the entry 5-10 days old closest to 7 days
            (older wins a tie), or None
        """
        today = today or date.today()
        best: tuple[int, int, date, Snapshot] | None = None

        for day, snapshot in self.get_snapshots().items():
            age = (today - day).days
            if not self.config.comparison_min_days <= age <= self.config.comparison_max_days:
                continue
            rank = (abs(age - self.config.comparison_target_days), -age, day, snapshot)
            if best is None or rank[:2] < best[:2]:
                best = rank

        if best is None:
            return None
        return best[2], best[3]

    def compare(self, current: Snapshot, today: date | None = None) -> TrendComparison | None:
        """Compare current counts with the comparison snapshot, if one exists."""
        today = today or date.today()
        found = self.find_comparison_snapshot(today=today)
        if found is None:
            return None
        baseline_date, baseline = found
        return TrendComparison(
            baseline_date=baseline_date,
            days_ago=(today - baseline_date).days,
            baseline=baseline,
            current=current,
        )

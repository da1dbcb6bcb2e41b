"""
Session Queue Builder.

Builds the ordered, length-bounded list of exercise keys for a practice
session. Modes:
- review: exercises due today
- weakest: repeatedly-reviewed exercises with low ease
- mixed: due + weakest, de-duplicated
- discover: exercises never reviewed, padded with already-seen ones

Review, weakest and mixed sessions are never backfilled: when fewer
candidates exist than requested the queue is simply shorter, and the
caller shows a "not enough items" state.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date
from enum import Enum

from loguru import logger

from drillcore.core.catalog import CatalogItem
from drillcore.core.keys import strip_variant_suffix
from drillcore.srs.review_store import ReviewRecord, ReviewStore

CandidateFilter = Callable[[str], bool]


@dataclass
class QueueConfig:
    """Configuration for session queue sizes."""

    default_count: int = 10
    max_count: int = 100


class SessionMode(str, Enum):
    """How session candidates are selected."""

    REVIEW = "review"
    WEAKEST = "weakest"
    MIXED = "mixed"
    DISCOVER = "discover"


class Difficulty(str, Enum):
    """Difficulty filter for discover sessions."""

    MIXED = "mixed"
    EASY = "easy"  # difficulty <= 1
    MEDIUM = "medium"  # difficulty == 2
    HARD = "hard"  # difficulty >= 3

    def accepts(self, difficulty: int) -> bool:
        if self is Difficulty.EASY:
            return difficulty <= 1
        if self is Difficulty.MEDIUM:
            return difficulty == 2
        if self is Difficulty.HARD:
            return difficulty >= 3
        return True


@dataclass(frozen=True)
class SessionQueue:
    """A prepared practice session."""

    mode: SessionMode | None  # None when the requested mode was not recognized
    keys: tuple[str, ...]
    requested: int
    available: int  # Candidates that matched before truncation

    @property
    def is_empty(self) -> bool:
        return not self.keys

    @property
    def is_short(self) -> bool:
        """True when fewer items were found than requested."""
        return len(self.keys) < self.requested

    def __len__(self) -> int:
        return len(self.keys)


def _accept_all(key: str) -> bool:
    return True


class QueueBuilder:
    """
    Builds session queues from the review store.

    A pure function of the stored records, the candidate filter and the
    random source; building a queue never writes anything.
    """

    def __init__(
        self,
        reviews: ReviewStore,
        rng: random.Random | None = None,
        config: QueueConfig | None = None,
    ):
        """
        Initialize the builder.

        Args:
            reviews: Review record store
            rng: Random source (a fresh unseeded Random if None)
            config: Queue size configuration (uses defaults if None)
        """
        self.reviews = reviews
        self.rng = rng or random.Random()
        self.config = config or QueueConfig()

    def build(
        self,
        mode: SessionMode | str,
        count: int | None = None,
        candidate_filter: CandidateFilter | None = None,
        catalog_items: Iterable[CatalogItem] | None = None,
        difficulty: Difficulty | str = Difficulty.MIXED,
        today: date | None = None,
    ) -> SessionQueue:
        """
        Build a session queue.

        Args:
            mode: Selection mode
            count: Maximum queue length (config default if None)
            candidate_filter: Predicate on exercise keys (all keys if None)
            catalog_items: Exercise universe for discover mode
            difficulty: Difficulty filter for discover mode
            today: Reference date for due checks

        Returns:
            SessionQueue with at most `count` keys drawn uniformly at random
            from the candidates
        """
        if count is None:
            count = self.config.default_count
        count = min(max(0, count), self.config.max_count)

        try:
            mode = SessionMode(mode)
        except ValueError:
            logger.warning(f"Unknown session mode {mode!r}, returning an empty queue")
            return SessionQueue(mode=None, keys=(), requested=count, available=0)
        try:
            difficulty = Difficulty(difficulty)
        except ValueError:
            logger.warning(f"Unknown difficulty {difficulty!r}, using mixed")
            difficulty = Difficulty.MIXED
        accept = candidate_filter or _accept_all

        records = self.reviews.get_all()

        if mode is SessionMode.DISCOVER:
            keys = self._discover(records, catalog_items or (), accept, difficulty, count)
            available = len(keys)
        else:
            candidates = self._srs_candidates(mode, records, accept, today)
            available = len(candidates)
            self.rng.shuffle(candidates)
            keys = candidates[:count]

        queue = SessionQueue(mode=mode, keys=tuple(keys), requested=count, available=available)

        logger.debug(
            f"Built {mode.value} queue: {len(queue)}/{count} keys "
            f"({available} candidates)"
        )
        return queue

    def _srs_candidates(
        self,
        mode: SessionMode,
        records: dict[str, ReviewRecord],
        accept: CandidateFilter,
        today: date | None,
    ) -> list[str]:
        """Candidate keys in priority order for review / weakest / mixed."""
        due: list[str] = []
        weak: list[str] = []

        if mode in (SessionMode.REVIEW, SessionMode.MIXED):
            due = [
                r.key
                for r in self.reviews.get_due_exercises(today=today, records=records)
                if accept(r.key)
            ]
        if mode in (SessionMode.WEAKEST, SessionMode.MIXED):
            weak = [
                r.key
                for r in self.reviews.get_weakest_exercises(records=records)
                if accept(r.key)
            ]

        # dict preserves first-seen order
        return list(dict.fromkeys(due + weak))

    def _discover(
        self,
        records: dict[str, ReviewRecord],
        items: Iterable[CatalogItem],
        accept: CandidateFilter,
        difficulty: Difficulty,
        count: int,
    ) -> list[str]:
        """Unseen exercises first, then already-seen ones, each pool shuffled."""
        unseen: list[str] = []
        seen: list[str] = []

        for item in items:
            if not accept(item.key) or not difficulty.accepts(item.difficulty):
                continue
            if item.key in records or strip_variant_suffix(item.key) in records:
                seen.append(item.key)
            else:
                unseen.append(item.key)

        unseen = list(dict.fromkeys(unseen))
        seen = list(dict.fromkeys(seen))
        self.rng.shuffle(unseen)
        self.rng.shuffle(seen)

        return (unseen + seen)[:count]

    def preselect_best_mode(
        self,
        candidate_filter: CandidateFilter | None = None,
        today: date | None = None,
    ) -> SessionMode:
        """
        Pick a default mode for the session picker.

        Review if anything is due, else weakest if anything is weak,
        else discover.
        """
        accept = candidate_filter or _accept_all
        records = self.reviews.get_all()

        if any(accept(r.key) for r in self.reviews.get_due_exercises(today=today, records=records)):
            return SessionMode.REVIEW
        if any(accept(r.key) for r in self.reviews.get_weakest_exercises(records=records)):
            return SessionMode.WEAKEST
        return SessionMode.DISCOVER

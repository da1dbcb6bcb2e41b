"""
SRS: per-exercise review scheduling and attempt history.
"""

from .progress_store import ProgressRecord, ProgressStore, RatingCounts, SelfRating
from .review_store import ReviewRecord, ReviewStore, SM2Config, derive_quality

__all__ = [
    # Scheduling
    "ReviewRecord",
    "ReviewStore",
    "SM2Config",
    "derive_quality",
    # Attempts
    "ProgressRecord",
    "ProgressStore",
    "RatingCounts",
    "SelfRating",
]

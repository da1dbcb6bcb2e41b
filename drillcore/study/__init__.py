"""
Study: practice session queue building.
"""

from .queue_builder import (
    CandidateFilter,
    Difficulty,
    QueueBuilder,
    QueueConfig,
    SessionMode,
    SessionQueue,
)

__all__ = [
    "CandidateFilter",
    "Difficulty",
    "QueueBuilder",
    "QueueConfig",
    "SessionMode",
    "SessionQueue",
]

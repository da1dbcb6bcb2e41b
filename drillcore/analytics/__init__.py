"""
Analytics: competence report and week-over-week trends.
"""

from .aggregator import AnalyticsAggregator, AnalyticsConfig
from .report import (
    AnalyticsReport,
    ConceptSummary,
    ModuleSummary,
    StrengthLabel,
    WeakExercise,
)
from .trends import Snapshot, TrendComparison, TrendConfig, TrendTracker

__all__ = [
    "AnalyticsAggregator",
    "AnalyticsConfig",
    "AnalyticsReport",
    "ConceptSummary",
    "ModuleSummary",
    "Snapshot",
    "StrengthLabel",
    "TrendComparison",
    "TrendConfig",
    "TrendTracker",
    "WeakExercise",
]

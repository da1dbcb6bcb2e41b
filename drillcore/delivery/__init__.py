"""
Delivery: engine wiring and the terminal front-end.

Components:
- CourseEngine: shared store plus review, progress, queue and analytics services
- cli: Typer commands rendering with Rich
"""

from .engine import AttemptResult, CourseEngine

__all__ = [
    "AttemptResult",
    "CourseEngine",
]

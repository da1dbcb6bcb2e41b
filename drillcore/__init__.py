"""
drillcore: review scheduling and progress analytics for self-study courses.
"""

__version__ = "1.0.0"

"""
Core Module - Shared key conventions and course metadata.

Components:
- keys: Exercise key parsing (lesson, flashcard, algorithm, unrecognized)
- catalog: Read-only course lookup tables (module names, concepts, items)
"""

from drillcore.core.catalog import CatalogItem, CourseCatalog, load_catalog
from drillcore.core.keys import (
    AlgoKey,
    FlashcardKey,
    LessonKey,
    ParsedKey,
    UnrecognizedKey,
    is_flashcard,
    module_of,
    parse_key,
    prettify_key,
    strip_variant_suffix,
)

__all__ = [
    # Keys
    "ParsedKey",
    "LessonKey",
    "FlashcardKey",
    "AlgoKey",
    "UnrecognizedKey",
    "parse_key",
    "module_of",
    "is_flashcard",
    "strip_variant_suffix",
    "prettify_key",
    # Catalog
    "CatalogItem",
    "CourseCatalog",
    "load_catalog",
]

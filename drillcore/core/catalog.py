"""
Course catalog: read-only metadata supplied by the course build.

- module_names: module number -> display name
- concept_index: base exercise key -> concept name
- concept_links: concept name -> lesson anchor
- items: every practicable exercise key with its difficulty (discover mode)

Missing entries are simply absent; lookups never fail.
"""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field, ValidationError


class CatalogItem(BaseModel):
    """An exercise that can be offered in a discover session."""

    key: str
    difficulty: int = 2
    label: str | None = None


class CourseCatalog(BaseModel):
    """Lookup tables for one course instance."""

    module_names: dict[int, str] = Field(default_factory=dict)
    concept_index: dict[str, str] = Field(default_factory=dict)
    concept_links: dict[str, str] = Field(default_factory=dict)
    items: list[CatalogItem] = Field(default_factory=list)

    def module_name(self, module: int) -> str:
        """Display name for a module, falling back to 'Module N'."""
        return self.module_names.get(module) or f"Module {module}"

    def concept_for(self, base_key: str) -> str | None:
        """Concept name for a variant-stripped exercise key."""
        return self.concept_index.get(base_key)

    def link_for(self, concept: str) -> str | None:
        """Lesson anchor for a concept, if the course defines one."""
        return self.concept_links.get(concept)


def load_catalog(path: Path | None) -> CourseCatalog:
    """
    Load a catalog JSON file.

    Args:
        path: Catalog file, or None for an empty catalog

    Returns:
        Parsed catalog; an empty one if the file is missing, unreadable or invalid
    """
    if path is None:
        return CourseCatalog()

    if not path.exists():
        logger.warning(f"Catalog not found: {path}")
        return CourseCatalog()

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        catalog = CourseCatalog.model_validate(data)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Ignoring invalid catalog {path}: {e}")
        return CourseCatalog()

    logger.debug(
        f"Loaded catalog: {len(catalog.module_names)} modules, "
        f"{len(catalog.concept_index)} concept keys, {len(catalog.items)} items"
    )
    return catalog

"""
Exercise key parsing.

Keys are produced by the course content and follow three conventions:

    m{module}_{type}_{index}[_v{variant}]   lesson drills   m2_warmup_1, m1_challenge_4_v9
    fc_m{module}_{index}                    flashcards      fc_m1_0
    algo_{category}_{problem}_{variant}     algorithm items algo_arrays_two-sum_v1

Anything else parses to UnrecognizedKey. Module grouping only needs the
leading m{module}_ or fc_m{module}_ prefix.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Union

_LESSON_RE = re.compile(r"^m(\d+)_([\w-]+?)_(\d+)(?:_v(\d+))?$", re.IGNORECASE)
_MODULE_PREFIX_RE = re.compile(r"^(?:fc_)?m(\d+)_")
_FLASHCARD_RE = re.compile(r"^fc_m(\d+)_(\d+)$")
_ALGO_RE = re.compile(r"^algo_([A-Za-z0-9-]+)_(.+)_([A-Za-z0-9-]+)$")
_VARIANT_SUFFIX_RE = re.compile(r"_v\d+$")


@dataclass(frozen=True)
class LessonKey:
    """A drill, warmup or challenge inside a lesson module."""

    raw: str
    module: int
    kind: str
    index: int
    variant: int | None = None


@dataclass(frozen=True)
class FlashcardKey:
    """A flashcard; uses a different quality scale than exercises."""

    raw: str
    module: int
    index: int


@dataclass(frozen=True)
class AlgoKey:
    """An algorithm practice problem variant."""

    raw: str
    category: str
    problem: str
    variant: str


@dataclass(frozen=True)
class UnrecognizedKey:
    """A key matching no known convention."""

    raw: str


ParsedKey = Union[LessonKey, FlashcardKey, AlgoKey, UnrecognizedKey]


def parse_key(key: str) -> ParsedKey:
    """
    Classify an exercise key.

    Args:
        key: Raw exercise key

    Returns:
        The matching tagged key type (UnrecognizedKey when nothing matches)
    """
    if not isinstance(key, str):
        return UnrecognizedKey(raw=str(key))

    match = _FLASHCARD_RE.match(key)
    if match:
        return FlashcardKey(raw=key, module=int(match.group(1)), index=int(match.group(2)))

    match = _LESSON_RE.match(key)
    if match:
        variant = match.group(4)
        return LessonKey(
            raw=key,
            module=int(match.group(1)),
            kind=match.group(2).lower(),
            index=int(match.group(3)),
            variant=int(variant) if variant is not None else None,
        )

    match = _ALGO_RE.match(key)
    if match:
        return AlgoKey(
            raw=key,
            category=match.group(1),
            problem=match.group(2),
            variant=match.group(3),
        )

    return UnrecognizedKey(raw=key)


def module_of(key: str) -> int | None:
    """Module number for any key starting with m{N}_ or fc_m{N}_, None otherwise."""
    if not isinstance(key, str):
        return None
    match = _MODULE_PREFIX_RE.match(key)
    return int(match.group(1)) if match else None


def is_flashcard(key: str) -> bool:
    """Check whether a key belongs to a flashcard."""
    return key.startswith("fc_")


def strip_variant_suffix(key: str) -> str:
    """Strip variant suffix: m1_challenge_4_v9 -> m1_challenge_4."""
    return _VARIANT_SUFFIX_RE.sub("", key)


def prettify_key(
    key: str,
    label: str | None = None,
    module_names: Mapping[int, str] | None = None,
) -> str:
    """
    Human-readable name for an exercise key.

    Uses the stored label when there is one; otherwise derives a name
    from the key ("Module 2 - Warmup 1", "M1 Flashcard 1 (Basics)").
    """
    if label:
        return label

    parsed = parse_key(key)
    if isinstance(parsed, LessonKey):
        name = f"Module {parsed.module} - {parsed.kind.capitalize()} {parsed.index}"
        if parsed.variant is not None:
            name += f" (v{parsed.variant})"
        return name

    if isinstance(parsed, FlashcardKey):
        module_name = (module_names or {}).get(parsed.module, "")
        name = f"M{parsed.module} Flashcard {parsed.index + 1}"
        return f"{name} ({module_name})" if module_name else name

    if isinstance(parsed, AlgoKey):
        problem = parsed.problem.replace("-", " ").replace("_", " ").title()
        return f"{problem} [{parsed.category}/{parsed.variant}]"

    return key

"""Normalize loosely-typed values returned by LLM providers."""

import math
import re
from typing import Any, Optional

from hr_assistant.models.document_analysis import DOCUMENT_CATEGORIES

CATEGORY_ALIASES: dict[str, str] = {
    "employment law": "employment_law",
    "labor law": "employment_law",
    "labour law": "employment_law",
    "policies": "policy",
    "hiring": "recruitment",
    "learning": "training",
    "benefit": "benefits",
    "compensation": "benefits",
}

_FENCE_OPEN = re.compile(r"^```[a-zA-Z]*\s*")


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code block (```json ... ```)."""
    content = text.strip()
    if content.startswith("```"):
        content = _FENCE_OPEN.sub("", content, count=1)
        if content.endswith("```"):
            content = content[:-3]
    return content.strip()


def normalize_category(value: Any) -> Optional[str]:
    """Map an LLM-supplied category onto the closed taxonomy.

    Returns None when the value is not a string or names no known category.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    key = value.strip().lower()
    if key in CATEGORY_ALIASES:
        return CATEGORY_ALIASES[key]
    key = re.sub(r"[\s\-]+", "_", key)
    return key if key in DOCUMENT_CATEGORIES else None


def coerce_string_list(value: Any, limit: int) -> Optional[list[str]]:
    """Return up to ``limit`` trimmed, non-empty strings, or None if not a list."""
    if not isinstance(value, list):
        return None
    items = []
    for item in value:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            items.append(text)
    return items[:limit]


def coerce_confidence(value: Any, default: int) -> int:
    """Parse a 0-100 confidence score; zero or unparseable values give ``default``.

    Fractions strictly between 0 and 1 are read as a 0-1 scale and multiplied
    by 100, so ``0.85`` becomes 85.
    """
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, str):
        try:
            value = float(value.strip().rstrip("%"))
        except ValueError:
            return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    if not isinstance(value, (int, float)):
        return default
    if 0 < value < 1:
        value *= 100
    score = int(round(value))
    if score == 0:
        return default
    return max(0, min(100, score))

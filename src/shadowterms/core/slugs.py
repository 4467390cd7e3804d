"""Slug helpers shared by posts and shadow terms."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Callable


def slugify(text: str) -> str:
    """Convert a human-readable title to a URL-friendly slug.

    Examples:
        "Garbanzo Bean" -> "garbanzo-bean"
        "French Fry"    -> "french-fry"
        "Mira's Haven"  -> "miras-haven"
    """
    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower()
    text = re.sub(r"['\"]", "", text)
    text = re.sub(r"[^a-z0-9]+", "-", text)
    return re.sub(r"-+", "-", text).strip("-")


def unique_slug(base: str, is_taken: Callable[[str], bool]) -> str:
    """Return *base*, or *base* suffixed ``-2``, ``-3`` ... until free."""
    if not is_taken(base):
        return base
    n = 2
    while is_taken(f"{base}-{n}"):
        n += 1
    return f"{base}-{n}"


__all__ = ["slugify", "unique_slug"]

"""URL slug helpers."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Callable

_NON_WORD = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lowercase ASCII slug with dash separators (``"Villa Ödön" -> "villa-odon"``)."""
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return _NON_WORD.sub("-", ascii_text.lower()).strip("-")


def unique_slug(base: str, is_taken: Callable[[str], bool]) -> str:
    """Return ``base`` or the first free ``base-2``, ``base-3``... variant."""
    candidate = base
    suffix = 2
    while is_taken(candidate):
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate

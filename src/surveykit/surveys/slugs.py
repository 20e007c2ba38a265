from __future__ import annotations

import re
import unicodedata
from typing import Callable, Optional


FALLBACK_SLUG = "survey"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

SlugExists = Callable[[str, Optional[int]], bool]


def slugify(text: str) -> str:
    """ASCII slug: lowercase, runs of anything but ``a-z0-9`` become one dash.

    >>> slugify("Annual Survey 2024")
    'annual-survey-2024'
    >>> slugify("  Café_crème!  ")
    'cafe-creme'
    """
    ascii_text = unicodedata.normalize("NFKD", text or "").encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM.sub("-", ascii_text.lower()).strip("-")


def generate_unique_slug(name: str, exists: SlugExists, ignore: Optional[int] = None) -> str:
    """Slugify ``name`` and suffix ``-1``, ``-2``, ... until ``exists`` says it is free.

    ``ignore`` is the id of the record being updated; it is handed to
    ``exists`` so that record's own slug never counts as a collision.
    """
    base = slugify(name) or FALLBACK_SLUG
    candidate = base
    counter = 1
    while exists(candidate, ignore):
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate

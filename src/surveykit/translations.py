from __future__ import annotations

from typing import Dict, Mapping, Optional


Localized = Dict[str, str]


def translate(values: Optional[Mapping[str, str]], locale: str, fallback: Optional[str] = None) -> Optional[str]:
    """Return the text stored for ``locale``, falling back to ``fallback``.

    Empty strings count as missing so a half-translated record still shows
    the fallback text.
    """
    if not values:
        return None
    text = values.get(locale)
    if text:
        return text
    if fallback and fallback != locale:
        return values.get(fallback) or None
    return None


def with_translation(values: Optional[Mapping[str, str]], locale: str, text: str) -> Localized:
    # Always a fresh dict: JSON columns only persist on reassignment
    updated: Localized = dict(values or {})
    updated[locale] = text
    return updated

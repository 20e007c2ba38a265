from __future__ import annotations

from datetime import datetime
from typing import Any


def is_active(survey: Any, now: datetime) -> bool:
    """``valid_from <= now <= valid_until``; an unset bound does not restrict."""
    valid_from = getattr(survey, "valid_from", None)
    valid_until = getattr(survey, "valid_until", None)
    if valid_from is not None and now < valid_from:
        return False
    if valid_until is not None and now > valid_until:
        return False
    return True

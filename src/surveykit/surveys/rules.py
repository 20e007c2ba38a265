from __future__ import annotations

from typing import Any, Dict, Iterable


def combined_rules(questions: Iterable[Any]) -> Dict[str, Any]:
    """Map each question key to its rules, in question order.

    A later question with the same key replaces the earlier one.
    """
    return {question.key: question.rules for question in questions}

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Protocol

from pydantic import ValidationError

from ..errors import ConfigurationError
from .schema import DEFAULT_LIMIT_PER_PARTICIPANT, UNLIMITED, SurveySettings


logger = logging.getLogger(__name__)


class Participant(Protocol):
    id: Any


def survey_settings(survey: Any) -> SurveySettings:
    """Validate ``survey.settings``; a missing mapping means all defaults."""
    raw: Optional[Mapping[str, Any]] = getattr(survey, "settings", None)
    try:
        return SurveySettings.model_validate(raw if raw is not None else {})
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid survey settings: {exc}") from exc


def accepts_guest_entries(survey: Any) -> bool:
    return bool(survey_settings(survey).accept_guest_entries)


def limit_per_participant(survey: Any) -> Optional[int]:
    """The maximum number of entries a participant may submit, or None for no limit.

    Accepting guest entries disables per-participant limiting entirely.
    """
    if accepts_guest_entries(survey):
        return None
    limit = survey_settings(survey).limit_per_participant
    if limit is None:
        limit = DEFAULT_LIMIT_PER_PARTICIPANT
    return None if limit == UNLIMITED else limit


def is_eligible(
    survey: Any,
    participant: Optional[Participant],
    count_prior_entries: Callable[[], int],
) -> bool:
    """Whether ``participant`` (None for a guest) may submit a new entry.

    ``count_prior_entries`` is only called when a finite limit applies.
    """
    if participant is None:
        allowed = accepts_guest_entries(survey)
        logger.debug("Guest eligibility for survey %s: %s", getattr(survey, "id", None), allowed)
        return allowed

    limit = limit_per_participant(survey)
    if limit is None:
        return True

    prior = count_prior_entries()
    allowed = limit > prior
    logger.debug(
        "Participant %s on survey %s: %d of %d entries used, eligible=%s",
        participant.id,
        getattr(survey, "id", None),
        prior,
        limit,
        allowed,
    )
    return allowed

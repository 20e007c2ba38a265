from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..models import Survey
from ..stores import EntryStore, QuestionStore, SectionStore, SurveyStore
from . import eligibility
from .eligibility import Participant
from .rules import combined_rules
from .schema import QuestionSpec, SurveySpec


logger = logging.getLogger(__name__)


def load_survey_spec(path: Union[str, Path]) -> SurveySpec:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Survey file not found: {path}")
    return SurveySpec.model_validate_json(path.read_text(encoding="utf-8"))


def import_survey(
    spec: SurveySpec,
    *,
    surveys: SurveyStore,
    sections: SectionStore,
    questions: QuestionStore,
) -> Survey:
    """Create a survey with its sections and questions from a definition."""
    survey = surveys.save(
        Survey(
            name=dict(spec.name),
            description=dict(spec.description),
            valid_from=spec.valid_from,
            valid_until=spec.valid_until,
            settings=spec.settings.model_dump(by_alias=True, exclude_unset=True),
        )
    )
    survey_id = survey.id or 0
    for position, section_spec in enumerate(spec.sections):
        section = sections.add(
            sections.bindings.section(survey_id=survey_id, name=dict(section_spec.name), position=position)
        )
        for q_position, question_spec in enumerate(section_spec.questions):
            _add_question(questions, question_spec, survey_id, q_position, section_id=section.id)
    offset = sum(len(s.questions) for s in spec.sections)
    for q_position, question_spec in enumerate(spec.questions, start=offset):
        _add_question(questions, question_spec, survey_id, q_position)
    logger.info("Imported survey %s (%s)", survey.id, survey.slug)
    return survey


def _add_question(
    questions: QuestionStore,
    spec: QuestionSpec,
    survey_id: int,
    position: int,
    section_id: Optional[int] = None,
) -> Any:
    return questions.add(
        questions.bindings.question(
            survey_id=survey_id,
            section_id=section_id,
            key=spec.key,
            content=dict(spec.content),
            type=spec.type,
            options=spec.options,
            rules=spec.rules,
            position=position,
        )
    )


def is_eligible(survey: Survey, participant: Optional[Participant] = None, *, entries: EntryStore) -> bool:
    """Check if a participant (or a guest, when None) may submit the survey."""
    return eligibility.is_eligible(
        survey,
        participant,
        lambda: entries.count_by_participant(survey.id or 0, participant.id if participant else None),
    )


def entries_from(survey: Survey, participant: Participant, *, entries: EntryStore) -> List[Any]:
    return entries.list_by_participant(survey.id or 0, participant.id)


def last_entry(survey: Survey, participant: Optional[Participant] = None, *, entries: EntryStore) -> Optional[Any]:
    """The participant's first stored entry; None for guests."""
    if participant is None:
        return None
    return entries.find_first_by_participant(survey.id or 0, participant.id)


def rules(survey: Survey, *, questions: QuestionStore) -> Dict[str, Any]:
    """Combined validation rules of the survey, keyed by question key."""
    return combined_rules(questions.list_by_survey(survey.id or 0))

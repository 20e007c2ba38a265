from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt


UNLIMITED = -1
DEFAULT_LIMIT_PER_PARTICIPANT = 1


class SurveySettings(BaseModel):
    """Known keys of a survey's free-form ``settings`` mapping.

    Unknown keys are kept as extras so round-tripping never loses data.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    accept_guest_entries: Optional[StrictBool] = Field(default=None, alias="accept-guest-entries")
    # None means "not configured"; readers fall back to False and DEFAULT_LIMIT_PER_PARTICIPANT
    limit_per_participant: Optional[StrictInt] = Field(default=None, alias="limit-per-participant")


class QuestionSpec(BaseModel):
    key: Optional[str] = None
    content: Dict[str, str] = Field(default_factory=dict)
    type: str = "text"
    options: Optional[List[str]] = None  # for type="radio"/"multiselect"
    rules: Any = None


class SectionSpec(BaseModel):
    name: Dict[str, str] = Field(default_factory=dict)
    questions: List[QuestionSpec] = Field(default_factory=list)


class SurveySpec(BaseModel):
    name: Dict[str, str]
    description: Dict[str, str] = Field(default_factory=dict)
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    settings: SurveySettings = Field(default_factory=SurveySettings)
    sections: List[SectionSpec] = Field(default_factory=list)
    # Questions that belong to no section
    questions: List[QuestionSpec] = Field(default_factory=list)

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column, DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from .surveys import eligibility, window
from .translations import translate


SLUG_CONSTRAINT = "uq_surveyslug_locale_slug"


class Survey(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    # Plain DateTime columns: timestamps are naive UTC
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_column=Column(DateTime, nullable=False))
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column=Column(DateTime, nullable=False))

    # Translatable fields: locale code -> text
    name: Dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    slug: Dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    description: Dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    valid_from: Optional[datetime] = Field(default=None, sa_column=Column(DateTime, index=True))
    valid_until: Optional[datetime] = Field(default=None, sa_column=Column(DateTime, index=True))
    settings: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    def name_in(self, locale: str, fallback: Optional[str] = None) -> Optional[str]:
        return translate(self.name, locale, fallback)

    def slug_in(self, locale: str, fallback: Optional[str] = None) -> Optional[str]:
        return translate(self.slug, locale, fallback)

    def description_in(self, locale: str, fallback: Optional[str] = None) -> Optional[str]:
        return translate(self.description, locale, fallback)

    def accepts_guest_entries(self) -> bool:
        return eligibility.accepts_guest_entries(self)

    def limit_per_participant(self) -> Optional[int]:
        return eligibility.limit_per_participant(self)

    def is_active(self, now: datetime) -> bool:
        return window.is_active(self, now)


class SurveySlug(SQLModel, table=True):
    """One row per (survey, locale); the unique constraint guards concurrent writers."""

    __table_args__ = (UniqueConstraint("locale", "slug", name=SLUG_CONSTRAINT),)

    id: Optional[int] = Field(default=None, primary_key=True)
    survey_id: int = Field(foreign_key="survey.id", index=True)
    locale: str = Field(max_length=16)
    slug: str = Field(index=True)


class Section(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    survey_id: int = Field(foreign_key="survey.id", index=True)
    name: Dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    position: int = Field(default=0)


class Question(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    survey_id: int = Field(foreign_key="survey.id", index=True)
    section_id: Optional[int] = Field(default=None, foreign_key="section.id")
    key: Optional[str] = Field(default=None, index=True)
    content: Dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    type: str = Field(default="text")
    options: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))
    rules: Any = Field(default=None, sa_column=Column(JSON))
    position: int = Field(default=0)


class Entry(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_column=Column(DateTime, nullable=False))
    survey_id: int = Field(foreign_key="survey.id", index=True)
    # None marks a guest entry
    participant_id: Optional[int] = Field(default=None, index=True)
    # JSON blob with answers keyed by question key
    answers: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

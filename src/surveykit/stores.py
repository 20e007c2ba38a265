from __future__ import annotations

import logging
from datetime import datetime
from functools import partial
from typing import ContextManager, Dict, List, Optional, Type

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, or_, select

from . import db
from .bindings import ModelBindings, resolve_bindings
from .config import Settings
from .errors import ConfigurationError, ConflictError, NotFoundError
from .models import SLUG_CONSTRAINT, Survey, SurveySlug
from .surveys.eligibility import survey_settings
from .surveys.slugs import generate_unique_slug


logger = logging.getLogger(__name__)

# Fields copied from the caller's survey onto the stored row on every save
_SURVEY_FIELDS = ("name", "description", "valid_from", "valid_until", "settings")


def _is_slug_conflict(exc: IntegrityError) -> bool:
    # SQLite reports the columns, other backends the constraint name
    message = str(exc.orig)
    return SLUG_CONSTRAINT in message or "surveyslug.locale, surveyslug.slug" in message


class _Store:
    def __init__(self, bind: Optional[Engine] = None, bindings: Optional[ModelBindings] = None) -> None:
        self.bind = bind or db.engine
        self.bindings = bindings or resolve_bindings()

    def session(self) -> ContextManager[Session]:
        return db.get_session(self.bind)


class SurveyStore(_Store):
    def __init__(
        self,
        bind: Optional[Engine] = None,
        bindings: Optional[ModelBindings] = None,
        *,
        max_attempts: Optional[int] = None,
    ) -> None:
        super().__init__(bind, bindings)
        if max_attempts is None:
            max_attempts = Settings().slug_max_attempts
        if max_attempts < 1:
            raise ConfigurationError(f"max_attempts must be at least 1, got {max_attempts}")
        self.max_attempts = max_attempts

    def save(self, survey: Survey) -> Survey:
        """Create or update ``survey`` and return the stored row.

        Slugs are recomputed from the current name before every write. A
        unique-constraint violation from a concurrent writer restarts the
        save, which then picks the next free suffix.
        """
        survey_settings(survey)
        for attempt in range(1, self.max_attempts + 1):
            with self.session() as session:
                row = self._row_for(session, survey)
                slugs = self._before_save(session, row)
                session.add(row)
                try:
                    session.flush()
                    self._sync_slug_index(session, row.id or 0, slugs)
                    session.commit()
                except IntegrityError as exc:
                    session.rollback()
                    if not _is_slug_conflict(exc):
                        raise
                    logger.warning(
                        "Slug conflict saving survey %s (attempt %d/%d): %s",
                        survey.id,
                        attempt,
                        self.max_attempts,
                        exc.orig,
                    )
                    continue
                session.refresh(row)
                logger.info("Saved survey %s with slugs %s", row.id, row.slug)
                return row
        raise ConflictError(
            f"Could not assign a unique slug to survey {survey.name} after {self.max_attempts} attempts",
            attempts=self.max_attempts,
        )

    def _row_for(self, session: Session, survey: Survey) -> Survey:
        if survey.id is None:
            row = Survey()
        else:
            row = session.get(Survey, survey.id)
            if not row:
                raise NotFoundError(f"Survey {survey.id} not found")
            row.updated_at = datetime.utcnow()
        for field in _SURVEY_FIELDS:
            value = getattr(survey, field)
            setattr(row, field, dict(value) if isinstance(value, dict) else value)
        return row

    def _before_save(self, session: Session, row: Survey) -> Dict[str, str]:
        slugs: Dict[str, str] = {}
        for locale, name in row.name.items():
            exists = partial(self._slug_taken, session, locale)
            slugs[locale] = generate_unique_slug(name, exists, ignore=row.id)
        row.slug = slugs
        return slugs

    def _sync_slug_index(self, session: Session, survey_id: int, slugs: Dict[str, str]) -> None:
        existing = {
            index.locale: index
            for index in session.exec(select(SurveySlug).where(SurveySlug.survey_id == survey_id)).all()
        }
        for locale, slug in slugs.items():
            index = existing.pop(locale, None)
            if index is None:
                session.add(SurveySlug(survey_id=survey_id, locale=locale, slug=slug))
            elif index.slug != slug:
                index.slug = slug
                session.add(index)
        for stale in existing.values():
            session.delete(stale)
        session.flush()

    @staticmethod
    def _slug_taken(session: Session, locale: str, candidate: str, ignore: Optional[int] = None) -> bool:
        stmt = select(SurveySlug.id).where(
            (SurveySlug.locale == locale) & (func.lower(SurveySlug.slug) == candidate.lower())
        )
        if ignore is not None:
            stmt = stmt.where(SurveySlug.survey_id != ignore)
        return session.exec(stmt).first() is not None

    def slug_exists(self, candidate: str, locale: str, exclude_id: Optional[int] = None) -> bool:
        with self.session() as session:
            return self._slug_taken(session, locale, candidate, exclude_id)

    def find_by_id(self, survey_id: int) -> Survey:
        with self.session() as session:
            survey = session.get(Survey, survey_id)
            if not survey:
                raise NotFoundError(f"Survey {survey_id} not found")
            return survey

    def find_by_slug(self, slug: str, locale: str) -> Optional[Survey]:
        with self.session() as session:
            stmt = (
                select(Survey)
                .join(SurveySlug, SurveySlug.survey_id == Survey.id)
                .where((SurveySlug.locale == locale) & (func.lower(SurveySlug.slug) == slug.lower()))
            )
            return session.exec(stmt).first()

    def list_active(self, now: datetime) -> List[Survey]:
        """Surveys whose validity window contains ``now``; unset bounds are open."""
        with self.session() as session:
            stmt = (
                select(Survey)
                .where(or_(Survey.valid_from.is_(None), Survey.valid_from <= now))
                .where(or_(Survey.valid_until.is_(None), Survey.valid_until >= now))
                .order_by(Survey.id)
            )
            return list(session.exec(stmt).all())

    def delete(self, survey_id: int) -> None:
        """Delete a survey together with its entries, questions, sections and slugs."""
        with self.session() as session:
            survey = session.get(Survey, survey_id)
            if not survey:
                raise NotFoundError(f"Survey {survey_id} not found")
            children: List[Type[SQLModel]] = [
                self.bindings.entry,
                self.bindings.question,
                self.bindings.section,
                SurveySlug,
            ]
            for model in children:
                for child in session.exec(select(model).where(model.survey_id == survey_id)).all():
                    session.delete(child)
                # Questions reference sections, so flush each level in order
                session.flush()
            session.delete(survey)
            session.commit()
        logger.info("Deleted survey %s", survey_id)


class EntryStore(_Store):
    @property
    def model(self) -> Type[SQLModel]:
        return self.bindings.entry

    def add(self, entry: SQLModel) -> SQLModel:
        with self.session() as session:
            session.add(entry)
            session.commit()
            session.refresh(entry)
            return entry

    def _by_participant(self, survey_id: int, participant_id: Optional[int]):  # type: ignore[no-untyped-def]
        model = self.model
        if participant_id is None:
            who = model.participant_id.is_(None)
        else:
            who = model.participant_id == participant_id
        return select(model).where((model.survey_id == survey_id) & who)

    def count_by_participant(self, survey_id: int, participant_id: Optional[int]) -> int:
        stmt = select(func.count()).select_from(self._by_participant(survey_id, participant_id).subquery())
        with self.session() as session:
            return session.exec(stmt).one()

    def list_by_participant(self, survey_id: int, participant_id: Optional[int]) -> List[SQLModel]:
        model = self.model
        with self.session() as session:
            stmt = self._by_participant(survey_id, participant_id).order_by(model.id)
            return list(session.exec(stmt).all())

    def find_first_by_participant(self, survey_id: int, participant_id: Optional[int]) -> Optional[SQLModel]:
        model = self.model
        with self.session() as session:
            stmt = self._by_participant(survey_id, participant_id).order_by(model.id)
            return session.exec(stmt).first()

    def find_latest_by_participant(self, survey_id: int, participant_id: Optional[int]) -> Optional[SQLModel]:
        model = self.model
        with self.session() as session:
            stmt = self._by_participant(survey_id, participant_id).order_by(
                model.created_at.desc(), model.id.desc()
            )
            return session.exec(stmt).first()

    def list_by_survey(self, survey_id: int) -> List[SQLModel]:
        model = self.model
        with self.session() as session:
            stmt = select(model).where(model.survey_id == survey_id).order_by(model.id)
            return list(session.exec(stmt).all())


class SectionStore(_Store):
    def add(self, section: SQLModel) -> SQLModel:
        with self.session() as session:
            session.add(section)
            session.commit()
            session.refresh(section)
            return section

    def list_by_survey(self, survey_id: int) -> List[SQLModel]:
        model = self.bindings.section
        with self.session() as session:
            stmt = select(model).where(model.survey_id == survey_id).order_by(model.position, model.id)
            return list(session.exec(stmt).all())


class QuestionStore(_Store):
    def add(self, question: SQLModel) -> SQLModel:
        """Store a question; one saved without a key gets ``q<id>``."""
        with self.session() as session:
            session.add(question)
            session.commit()
            session.refresh(question)
            if not question.key:
                question.key = f"q{question.id}"
                session.add(question)
                session.commit()
                session.refresh(question)
            return question

    def list_by_survey(self, survey_id: int) -> List[SQLModel]:
        model = self.bindings.question
        with self.session() as session:
            stmt = select(model).where(model.survey_id == survey_id).order_by(model.position, model.id)
            return list(session.exec(stmt).all())

    def list_by_section(self, section_id: int) -> List[SQLModel]:
        model = self.bindings.question
        with self.session() as session:
            stmt = select(model).where(model.section_id == section_id).order_by(model.position, model.id)
            return list(session.exec(stmt).all())

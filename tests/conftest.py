from __future__ import annotations

from dataclasses import dataclass

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from surveykit.db import init_db
from surveykit.stores import EntryStore, QuestionStore, SectionStore, SurveyStore


@dataclass(frozen=True)
class User:
    id: int


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def surveys(engine):
    return SurveyStore(engine, max_attempts=10)


@pytest.fixture
def entries(engine):
    return EntryStore(engine)


@pytest.fixture
def sections(engine):
    return SectionStore(engine)


@pytest.fixture
def questions(engine):
    return QuestionStore(engine)

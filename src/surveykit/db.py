from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session, create_engine

from .config import Settings


def make_engine(database_url: str, *, echo: bool = False) -> Engine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, echo=echo, connect_args=connect_args)


_settings = Settings()
engine = make_engine(_settings.database_url, echo=_settings.database_echo)


def init_db(bind: Optional[Engine] = None) -> None:
    """Create tables if they do not exist."""
    # Table classes register themselves on import
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


@contextmanager
def get_session(bind: Optional[Engine] = None) -> Iterator[Session]:
    with Session(bind or engine) as session:
        yield session

from __future__ import annotations

import importlib
from dataclasses import dataclass
from typing import Optional, Type

from sqlmodel import SQLModel

from .config import Settings
from .errors import ConfigurationError


@dataclass(frozen=True)
class ModelBindings:
    """Concrete table models playing the section, question and entry roles."""

    section: Type[SQLModel]
    question: Type[SQLModel]
    entry: Type[SQLModel]


def import_model(path: str) -> Type[SQLModel]:
    module_name, _, attr = path.rpartition(".")
    if not module_name:
        raise ConfigurationError(f"Model path must be dotted: {path!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import module for model {path!r}") from exc
    model = getattr(module, attr, None)
    if not (isinstance(model, type) and issubclass(model, SQLModel)):
        raise ConfigurationError(f"{path!r} is not a SQLModel class")
    return model


def resolve_bindings(settings: Optional[Settings] = None) -> ModelBindings:
    """Resolve the configured model paths once, at startup."""
    settings = settings or Settings()
    return ModelBindings(
        section=import_model(settings.section_model),
        question=import_model(settings.question_model),
        entry=import_model(settings.entry_model),
    )


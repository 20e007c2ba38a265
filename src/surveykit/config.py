from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library runtime settings loaded from environment/.env."""

    database_url: str = Field(default="sqlite:///./surveys.db", alias="DATABASE_URL")
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")
    default_locale: str = Field(default="en", alias="DEFAULT_LOCALE")
    fallback_locale: str = Field(default="en", alias="FALLBACK_LOCALE")
    slug_max_attempts: int = Field(default=10, ge=1, alias="SLUG_MAX_ATTEMPTS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Concrete models bound to the section/question/entry roles
    section_model: str = Field(default="surveykit.models.Section", alias="SECTION_MODEL")
    question_model: str = Field(default="surveykit.models.Question", alias="QUESTION_MODEL")
    entry_model: str = Field(default="surveykit.models.Entry", alias="ENTRY_MODEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        extra="ignore",
        populate_by_name=True,
    )

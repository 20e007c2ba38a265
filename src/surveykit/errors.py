from __future__ import annotations


class SurveyError(Exception):
    """Base class for every error raised by surveykit."""


class ConfigurationError(SurveyError):
    """Survey settings or model bindings are malformed."""


class NotFoundError(SurveyError):
    """A record looked up by identifier does not exist."""


class ConflictError(SurveyError):
    """A slug stayed taken after the bounded number of save attempts."""

    def __init__(self, message: str, *, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts

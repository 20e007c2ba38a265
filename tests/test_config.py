import pytest

from surveykit.bindings import ModelBindings, import_model, resolve_bindings
from surveykit.config import Settings
from surveykit.errors import ConfigurationError
from surveykit.models import Entry, Question, Section


def test_settings_defaults(monkeypatch):
    for name in ("DATABASE_URL", "DEFAULT_LOCALE", "SLUG_MAX_ATTEMPTS", "ENTRY_MODEL"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.default_locale == "en"
    assert settings.slug_max_attempts == 10
    assert settings.entry_model == "surveykit.models.Entry"


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///tmp/test.db")
    monkeypatch.setenv("SLUG_MAX_ATTEMPTS", "3")
    settings = Settings(_env_file=None)
    assert settings.database_url == "sqlite:///tmp/test.db"
    assert settings.slug_max_attempts == 3


def test_resolve_default_bindings():
    bindings = resolve_bindings(Settings(_env_file=None))
    assert bindings == ModelBindings(section=Section, question=Question, entry=Entry)


@pytest.mark.parametrize(
    "path",
    ["Entry", "surveykit.nope.Entry", "surveykit.models.Missing", "surveykit.models.translate"],
)
def test_bad_model_path(path):
    with pytest.raises(ConfigurationError):
        import_model(path)


def test_bad_binding_in_settings():
    with pytest.raises(ConfigurationError):
        resolve_bindings(Settings(_env_file=None, question_model="surveykit.models.Nope"))

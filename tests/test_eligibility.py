from types import SimpleNamespace

import pytest

from surveykit.errors import ConfigurationError
from surveykit.surveys.eligibility import accepts_guest_entries, is_eligible, limit_per_participant

from conftest import User


def make_survey(**settings):
    return SimpleNamespace(id=1, settings=settings)


def counter(n):
    calls = []

    def count():
        calls.append(n)
        return n

    count.calls = calls
    return count


@pytest.mark.parametrize("prior", [0, 1, 5, 100])
def test_guest_surveys_accept_everyone(prior):
    survey = make_survey(**{"accept-guest-entries": True, "limit-per-participant": 1})
    assert is_eligible(survey, None, counter(prior)) is True
    assert is_eligible(survey, User(id=3), counter(prior)) is True


def test_guest_flag_disables_participant_limit():
    survey = make_survey(**{"accept-guest-entries": True, "limit-per-participant": 2})
    assert limit_per_participant(survey) is None


def test_guests_rejected_when_flag_off():
    assert is_eligible(make_survey(**{"accept-guest-entries": False}), None, counter(0)) is False
    assert is_eligible(make_survey(), None, counter(0)) is False


@pytest.mark.parametrize("prior", [0, 1, 10])
def test_unlimited_participants(prior):
    survey = make_survey(**{"limit-per-participant": -1})
    count = counter(prior)
    assert is_eligible(survey, User(id=1), count) is True
    assert count.calls == []


def test_default_limit_is_one():
    survey = make_survey()
    assert limit_per_participant(survey) == 1
    assert is_eligible(survey, User(id=1), counter(0)) is True
    assert is_eligible(survey, User(id=1), counter(1)) is False


def test_explicit_null_limit_uses_default():
    assert limit_per_participant(make_survey(**{"limit-per-participant": None})) == 1


def test_explicit_null_guest_flag_means_no_guests():
    survey = make_survey(**{"accept-guest-entries": None, "limit-per-participant": 2})
    assert accepts_guest_entries(survey) is False
    assert limit_per_participant(survey) == 2
    assert is_eligible(survey, None, counter(0)) is False


@pytest.mark.parametrize("limit,prior,expected", [(0, 0, False), (3, 2, True), (3, 3, False), (3, 4, False)])
def test_finite_limit(limit, prior, expected):
    survey = make_survey(**{"limit-per-participant": limit})
    assert is_eligible(survey, User(id=1), counter(prior)) is expected


def test_guest_check_never_counts_entries():
    count = counter(0)
    is_eligible(make_survey(), None, count)
    assert count.calls == []


def test_missing_settings_use_defaults():
    survey = SimpleNamespace(id=1, settings=None)
    assert accepts_guest_entries(survey) is False
    assert limit_per_participant(survey) == 1


def test_unknown_settings_keys_are_ignored():
    assert limit_per_participant(make_survey(theme="dark", **{"limit-per-participant": 4})) == 4


@pytest.mark.parametrize("value", ["3", 2.5, True, [1]])
def test_malformed_limit_raises(value):
    survey = make_survey(**{"limit-per-participant": value})
    with pytest.raises(ConfigurationError):
        is_eligible(survey, User(id=1), counter(0))


def test_malformed_guest_flag_raises():
    with pytest.raises(ConfigurationError):
        accepts_guest_entries(make_survey(**{"accept-guest-entries": "yes"}))


def test_non_mapping_settings_raise():
    with pytest.raises(ConfigurationError):
        limit_per_participant(SimpleNamespace(id=1, settings=["limit-per-participant"]))

from types import SimpleNamespace

from surveykit.surveys.rules import combined_rules


def q(key, rules):
    return SimpleNamespace(key=key, rules=rules)


def test_rules_keyed_by_question():
    questions = [q("q1", "required"), q("q2", "numeric")]
    assert combined_rules(questions) == {"q1": "required", "q2": "numeric"}


def test_later_duplicate_wins_and_keeps_position():
    rules = combined_rules([q("a", "required"), q("b", None), q("a", ["numeric", "min:1"])])
    assert rules == {"a": ["numeric", "min:1"], "b": None}
    assert list(rules) == ["a", "b"]


def test_no_questions():
    assert combined_rules([]) == {}

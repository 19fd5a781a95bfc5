import logging

import pytest

from cardstack.domain.errors import DeckFormatError
from cardstack.infrastructure.decks import load_deck, parse_deck

DECK = """
subjects:
  - id: radical-one
    learn_cards: [meaning]
    quiz_cards: [meaning]
    data: {level: 1, position: 0, srs_id: 1}
  - id: kanji-one
    learn_cards: [meaning]
    quiz_cards: [meaning, reading]
    data:
      level: 1
      position: 1
      srs_id: 1
      required_subjects: [radical-one]
"""


def test_load_deck(tmp_path):
    path = tmp_path / "deck.yaml"
    path.write_text(DECK, encoding="utf-8")

    result = load_deck(path)

    assert [s.id for s in result.subjects] == ["radical-one", "kanji-one"]
    kanji = result.subjects[1]
    assert kanji.quiz_cards == ("meaning", "reading")
    assert kanji.required_subjects == ["radical-one"]
    assert kanji.level == 1
    assert result.missing_prereqs == {}
    assert result.cycles == []


def test_numeric_ids_become_strings():
    result = parse_deck("subjects:\n  - id: 42\n    quiz_cards: [front]\n")
    assert result.subjects[0].id == "42"


def test_empty_document():
    assert parse_deck("").subjects == []


def test_missing_prerequisite_is_reported(caplog):
    text = "subjects:\n  - id: a\n    data: {required_subjects: [ghost]}\n"
    with caplog.at_level(logging.WARNING):
        result = parse_deck(text, source="deck.yaml")

    assert result.missing_prereqs == {"a": ["ghost"]}
    assert "ghost" in caplog.text


def test_cycle_is_reported():
    text = """
subjects:
  - id: a
    data: {required_subjects: [b]}
  - id: b
    data: {required_subjects: [a]}
"""
    result = parse_deck(text)
    assert len(result.cycles) == 1
    assert set(result.cycles[0]) == {"a", "b"}


@pytest.mark.parametrize(
    "text",
    [
        "subjects: [unclosed",
        "- just\n- a list\n",
        "subjects:\n  - learn_cards: [front]\n",
        "subjects:\n  - id: a\n  - id: a\n",
        "subjects:\n  - id: ''\n",
    ],
)
def test_bad_decks_raise(text):
    with pytest.raises(DeckFormatError):
        parse_deck(text)

# tests/test_catalog.py
import json

import pytest

from history_review.catalog import load_badges, load_catalog
from history_review.models import BadgeKind


def test_catalog_loads_all_content(catalog):
    assert catalog.vocab_count == 22
    assert len(catalog.questions) == 30
    assert len(catalog.timeline_events) == 10
    assert len(catalog.badges) == 10
    assert len(catalog.short_answers) == 5


def test_timeline_ids_are_chronological_positions(catalog):
    assert [e.id for e in catalog.timeline_events] == list(range(1, 11))
    assert catalog.timeline_events[0].title == "Proclamation of 1763"
    assert catalog.timeline_events[-1].title == "Declaration of Independence"


def test_every_question_has_four_options(catalog):
    for q in catalog.questions:
        assert len(q.options) == 4
        assert 0 <= q.correct < 4


def test_question_ids_are_unique(catalog):
    ids = [q.id for q in catalog.questions]
    assert len(ids) == len(set(ids))


def test_vocabulary_terms_are_unique(catalog):
    terms = [v.term for v in catalog.vocabulary]
    assert len(terms) == len(set(terms))


def test_categories_and_topics(catalog):
    assert catalog.categories == ["Causes of Unrest", "Uncovering Loyalties", "Declaration"]
    assert "1776 Musical" in catalog.topics
    assert "Connections" in catalog.topics


def test_every_badge_kind_is_defined(catalog):
    assert {b.kind for b in catalog.badges} == set(BadgeKind)


def test_get_question(catalog):
    assert catalog.get_question(0).id == 0
    with pytest.raises(KeyError):
        catalog.get_question(999)


def test_get_term_and_badge(catalog):
    assert catalog.get_term("Boycott").category == "Causes of Unrest"
    assert catalog.get_term("Nope") is None
    assert catalog.get_badge("streak_7").name == "Week Warrior"
    assert catalog.get_badge("nope") is None


def test_unknown_badge_id_is_rejected(tmp_path):
    (tmp_path / "badges.json").write_text(json.dumps({"badges": [{"id": "speed_demon", "name": "Fast"}]}))
    with pytest.raises(ValueError):
        load_badges(tmp_path)


def test_load_catalog_from_other_directory(tmp_path):
    (tmp_path / "vocabulary.json").write_text(json.dumps({"vocabulary": [
        {"term": "Tax", "definition": "Money paid to a government", "category": "Causes"},
    ]}))
    (tmp_path / "questions.json").write_text(json.dumps({"questions": []}))
    (tmp_path / "timeline.json").write_text(json.dumps({"events": []}))
    (tmp_path / "badges.json").write_text(json.dumps({"badges": []}))
    (tmp_path / "short_answers.json").write_text(json.dumps({"prompts": []}))
    catalog = load_catalog(tmp_path)
    assert catalog.vocab_count == 1
    assert catalog.questions == ()


def test_known_terms_drops_unknown_entries(catalog):
    assert catalog.known_terms({"Tax", "Nope"}) == {"Tax"}
    assert catalog.known_terms(set()) == set()

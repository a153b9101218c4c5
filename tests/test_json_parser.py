"""Tests for the scraper candidate JSON parser."""

from __future__ import annotations

import json

import pytest

from news_curator.input.json_parser import load_candidates, parse_candidates


def test_parse_articles_object():
    data = {
        "articles": [
            {
                "title": " Imphal market reopens ",
                "url": "https://m.in/imphal",
                "state": "Manipur",
                "content": "Traders returned on Monday.",
                "scrapedAt": "2026-02-03T11:44:10.702Z",
            },
            {"title": "", "url": "https://m.in/empty"},
            {"title": "No url"},
            "not-an-object",
        ]
    }

    [candidate] = parse_candidates(data)

    assert candidate.title == "Imphal market reopens"
    assert candidate.proposed_state == "Manipur"
    assert candidate.body == "Traders returned on Monday."
    assert candidate.source == "m.in"
    assert candidate.scraped_at is not None and candidate.scraped_at.tzinfo is not None


def test_parse_bare_list_with_default_state():
    data = [
        {"title": "Aizawl rain", "url": "https://z.in/1"},
        {"title": "Lunglei fair", "url": "https://z.in/2", "proposedState": "Mizoram", "source": "Zozam"},
    ]

    candidates = parse_candidates(data, default_state="Mizoram")

    assert [c.proposed_state for c in candidates] == ["Mizoram", "Mizoram"]
    assert candidates[1].source == "Zozam"


def test_items_without_state_are_skipped():
    assert parse_candidates([{"title": "Orphan", "url": "https://z.in/3"}]) == []


def test_invalid_payload_raises():
    with pytest.raises(ValueError, match="articles"):
        parse_candidates({"items": []})
    with pytest.raises(ValueError):
        parse_candidates({"articles": "nope"})


def test_load_candidates_from_file(tmp_path):
    path = tmp_path / "candidates.json"
    path.write_text(json.dumps([{"title": "Gangtok", "url": "https://s.in/1", "state": "Sikkim"}]), encoding="utf-8")

    [candidate] = load_candidates(path)

    assert candidate.proposed_state == "Sikkim"
    assert candidate.scraped_at is None

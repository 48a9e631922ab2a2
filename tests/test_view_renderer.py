"""
Tests for table, detail and form projections.
"""

from gametracker.schema import ABANDONED_SCHEMA, FINISHED_SCHEMA, WANT_TO_PLAY_SCHEMA, CollectionKey
from gametracker.ui_logic.state_manager import GameState
from gametracker.ui_logic.view_renderer import (
    EMPTY_VALUE, ROW_ACTIONS, form_values, render_all, render_detail, render_table, truncate,
)


class TestRenderTable:
    """Collection tables."""

    def test_empty_collection_shows_placeholder(self):
        table = render_table(WANT_TO_PLAY_SCHEMA, [])
        assert table.visible is False
        assert table.rows == []
        assert table.placeholder == WANT_TO_PLAY_SCHEMA.empty_message

    def test_rows_in_insertion_order(self):
        records = [{"id": "2", "name": "B"}, {"id": "1", "name": "A"}]
        table = render_table(ABANDONED_SCHEMA, records)
        assert table.visible is True
        assert [row.record_id for row in table.rows] == ["2", "1"]
        assert table.rows[0].actions == ROW_ACTIONS
        assert table.headers == ["Game Name", "Category", "Reason", "Gameplay Time (h)", "Notes"]

    def test_long_text_truncated_with_tooltip(self):
        notes = "n" * 45
        table = render_table(ABANDONED_SCHEMA, [{"id": "1", "name": "Grindy", "notes": notes}])
        cell = table.rows[0].cells[-1]
        assert cell.display == "n" * 30 + "..."
        assert cell.tooltip == notes

    def test_score_rendered_as_stars(self):
        table = render_table(FINISHED_SCHEMA, [{"id": "1", "name": "Celeste", "score": 4, "hours_spent": 12.0}])
        cells = [c.display for c in table.rows[0].cells]
        assert cells[2] == "★★★★☆"
        assert cells[4] == "12"


def test_truncate_boundary():
    assert truncate("x" * 30) == "x" * 30
    assert truncate("x" * 31) == "x" * 30 + "..."
    assert truncate("abcdef", 3) == "abc..."


def test_render_all_covers_every_collection():
    tables = render_all(GameState())
    assert set(tables) == set(CollectionKey)
    assert all(not t.visible for t in tables.values())


def test_render_detail_marks_empty_values():
    record = {"id": "1", "name": "Celeste", "score": 0, "review": "", "hours_spent": None, "platform": "PC"}
    details = {d.label: d for d in render_detail(FINISHED_SCHEMA, record)}
    assert details["Game Name"].value == "Celeste"
    assert details["Platform"].value == "PC"
    assert details["Review"].value == EMPTY_VALUE
    assert details["Review"].is_empty
    assert details["Score"].is_empty
    assert details["Time Spent (h)"].value == EMPTY_VALUE


def test_form_values_defaults_and_existing():
    values = form_values(WANT_TO_PLAY_SCHEMA)
    assert values["interest_level"] == "Medium"
    assert values["status"] == "Already Released"
    assert values["name"] == ""

    values = form_values(WANT_TO_PLAY_SCHEMA, {"id": "1", "name": "Hades", "interest_level": "High"})
    assert values["name"] == "Hades"
    assert values["interest_level"] == "High"
    assert "id" not in values

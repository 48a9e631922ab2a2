"""
Integration tests for the GameManager controller with file-backed storage.
"""

import json
import pytest
from unittest.mock import Mock

from gametracker.exceptions import PersistenceError
from gametracker.schema import CollectionKey
from gametracker.settings import SearchSettings
from gametracker.ui_logic import GameManager, TabType
from gametracker.ui_logic.game_manager import FIX_ERRORS, LOAD_FAILED, SAVE_FAILED
from gametracker.ui_logic.game_search import GameSearchClient
from gametracker.ui_logic.navigation import ModalKind
from gametracker.ui_logic.notifications import Severity


def _messages(manager):
    return [(n.message, n.severity) for n in manager.notifications.active()]


@pytest.fixture
def manager(settings, clock):
    gm = GameManager(settings=settings, monotonic=clock)
    gm.start()
    return gm


class TestSubmit:
    """Form submission: validate -> create/update -> persist -> render."""

    def test_create_persists_and_notifies(self, manager, settings):
        manager.open_form("wantToPlay")
        outcome = manager.submit("wantToPlay", {"name": "Hades", "interest_level": "High"})

        assert outcome.ok and outcome.created
        assert manager.navigation.modal is None
        assert ('"Hades" was saved!', Severity.SUCCESS) in _messages(manager)
        assert manager.last_snapshot.tables[CollectionKey.WANT_TO_PLAY].visible

        stored = json.loads(json.loads(settings.storage_file.read_text(encoding="utf-8"))["gameTrackerData"])
        assert stored["wantToPlay"][0]["name"] == "Hades"
        assert stored["wantToPlay"][0]["interestLevel"] == "High"

    def test_invalid_submission(self, manager):
        manager.open_form("wantToPlay")
        outcome = manager.submit("wantToPlay", {"name": "A", "interest_level": "High"})

        assert not outcome.ok
        assert outcome.errors == {"name": "Name must have at least 2 characters"}
        assert manager.validation.field_error("form-wantToPlay", "name")
        assert (FIX_ERRORS, Severity.ERROR) in _messages(manager)
        assert manager.records("wantToPlay") == ()
        assert manager.navigation.modal is not None

    def test_edit_existing_record(self, manager):
        created = manager.submit("finished", {"name": "Celeste", "score": 4}).record
        values = manager.open_form("finished", created["id"])
        assert values["name"] == "Celeste"
        assert manager.navigation.modal.is_edit

        values["score"] = 5
        outcome = manager.submit("finished", values, record_id=created["id"])
        assert outcome.ok and not outcome.created
        assert manager.get_by_id("finished", created["id"])["score"] == 5
        assert len(manager.records("finished")) == 1

    def test_edit_of_vanished_record(self, manager):
        outcome = manager.submit("finished", {"name": "Celeste", "score": 4}, record_id="gone")
        assert not outcome.ok
        assert ("This game no longer exists.", Severity.ERROR) in _messages(manager)

    def test_close_modal_discards_errors(self, manager):
        manager.open_form("abandoned")
        manager.submit("abandoned", {"name": ""})
        manager.close_modal()
        assert manager.navigation.modal is None
        assert manager.validation.field_errors("form-abandoned") == {}


class TestDelete:
    """Deletion always goes through the confirmation prompt."""

    def test_decline_keeps_record(self, manager):
        record = manager.submit("abandoned", {"name": "Grindy", "reason": "No Time"}).record
        assert manager.request_delete("abandoned", record["id"])
        assert manager.confirmation.message == 'Are you sure you want to delete "Grindy"?'
        assert manager.confirm(False) is False
        assert manager.get_by_id("abandoned", record["id"]) is not None

    def test_confirm_deletes(self, manager):
        record = manager.submit("abandoned", {"name": "Grindy"}).record
        manager.request_delete("abandoned", record["id"])
        assert manager.confirm(True) is True
        assert manager.records("abandoned") == ()
        assert ('"Grindy" was deleted.', Severity.ERROR) in _messages(manager)
        assert not manager.last_snapshot.tables[CollectionKey.ABANDONED].visible

    def test_unknown_id(self, manager):
        assert manager.request_delete("abandoned", "missing") is False
        assert not manager.confirmation.is_open


class TestLifecycle:
    """Loading, saving and autosave."""

    def test_reload_from_storage(self, manager, settings, clock):
        manager.submit("finished", {"name": "Celeste", "score": 5, "hours_spent": "10"})
        again = GameManager(settings=settings, monotonic=clock)
        snapshot = again.start()
        assert [r["name"] for r in again.records("finished")] == ["Celeste"]
        assert snapshot.charts.finished.average_hours == 10.0

    def test_corrupt_storage_starts_empty(self, settings, clock):
        settings.storage_file.write_text(json.dumps({"gameTrackerData": "{broken"}), encoding="utf-8")
        gm = GameManager(settings=settings, monotonic=clock)
        gm.start()
        assert gm.records("wantToPlay") == ()
        assert (LOAD_FAILED, Severity.ERROR) in _messages(gm)

    def test_save_failure_notifies(self, settings, clock):
        storage = Mock()
        storage.get_item.return_value = None
        storage.set_item.side_effect = PersistenceError("read-only")
        gm = GameManager(settings=settings, storage=storage, monotonic=clock)
        gm.start()
        outcome = gm.submit("wantToPlay", {"name": "Hades"})
        assert outcome.ok
        assert len(gm.records("wantToPlay")) == 1
        assert (SAVE_FAILED, Severity.ERROR) in _messages(gm)

    def test_tick_autosaves(self, manager, clock, settings):
        assert manager.tick() is False
        clock.advance(settings.autosave_interval_seconds)
        assert manager.tick() is True

    def test_shutdown_saves(self, settings, clock):
        storage = Mock()
        storage.get_item.return_value = None
        gm = GameManager(settings=settings, storage=storage, monotonic=clock)
        gm.shutdown()
        storage.set_item.assert_not_called()
        gm.start()
        gm.shutdown()
        storage.set_item.assert_called_once()


class TestRenderingAndNavigation:
    """Snapshots, chart sinks, tabs and modals."""

    def test_chart_sink_receives_bundles(self, manager):
        sink = Mock()
        manager.add_chart_sink(sink)
        manager.submit("finished", {"name": "Celeste", "score": 3})
        bundle = sink.call_args[0][0]
        assert bundle.scores.values == [0, 0, 1, 0, 0]

    def test_failing_sink_does_not_break_render(self, manager):
        manager.add_chart_sink(Mock(side_effect=RuntimeError("no display")))
        snapshot = manager.render()
        assert snapshot is manager.last_snapshot

    def test_switch_tab_updates_state(self, manager):
        assert manager.switch_tab(TabType.FINISHED)
        assert manager.state_manager.get_state().active_tab == TabType.FINISHED
        assert not manager.switch_tab(TabType.FINISHED)
        assert manager.handle_shortcut("3", ctrl=True)
        assert manager.state_manager.get_state().active_tab == TabType.ABANDONED

    def test_escape_closes_form(self, manager):
        manager.open_form("wantToPlay")
        assert manager.handle_shortcut("Escape")
        assert manager.navigation.modal is None

    def test_open_view(self, manager):
        record = manager.submit("wantToPlay", {"name": "Hades"}).record
        details = manager.open_view("wantToPlay", record["id"])
        assert details[0].value == "Hades"
        assert manager.navigation.modal.kind == ModalKind.VIEW
        assert manager.open_view("wantToPlay", "missing") is None

    def test_open_form_unknown_id_opens_add_form(self, manager):
        values = manager.open_form("wantToPlay", "missing")
        assert values["interest_level"] == "Medium"
        assert not manager.navigation.modal.is_edit


class TestExportAndSearch:
    """CSV export and debounced search through the controller."""

    def test_export_empty(self, manager):
        result = manager.export_csv("wantToPlay")
        assert not result.ok
        assert ("Nothing to export.", Severity.ERROR) in _messages(manager)

    def test_export_all(self, manager):
        manager.submit("finished", {"name": "Celeste", "score": 5})
        results = manager.export_all()
        assert results[CollectionKey.FINISHED].ok
        assert not results[CollectionKey.WANT_TO_PLAY].ok
        assert ("games_finished.csv exported!", Severity.SUCCESS) in _messages(manager)

    def test_search_games(self, settings, clock):
        response = Mock()
        response.json.return_value = {"results": [{"name": "Hades"}, {"name": "Hades II"}]}
        session = Mock()
        session.get.return_value = response
        client = GameSearchClient(SearchSettings(api_key="k"), session=session)

        gm = GameManager(settings=settings, search_client=client, monotonic=clock)
        outcome = gm.search_games("hades", sleep=clock.sleep)
        assert outcome.suggestions == ["Hades", "Hades II"]

    def test_search_not_configured(self, manager, clock):
        outcome = manager.search_games("hades", sleep=clock.sleep)
        assert outcome.message == "Search is not configured."

"""
Top-level controller for the Game Tracker.

`GameManager` owns the single state container and wires the managers
together. UI code (Streamlit, CLI, tests) talks to this class only:

- forms go through `submit()` (validate -> create/update -> persist -> render)
- deletes go through `request_delete()` + `confirm()`
- every mutation and failed validation emits a notification
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional
import atexit
import logging
import time

from ..exceptions import RecordValidationError
from ..schema import SCHEMAS, CollectionKey, Record, get_schema, to_collection_key
from ..settings import Settings, load_settings
from .chart_aggregator import ChartBundle, aggregate
from .csv_export import ExportResult, export_collection
from .game_search import GameSearchClient, GameSearchService, SearchDebouncer, SearchOutcome
from .navigation import NavigationState
from .notifications import ConfirmationPrompt, NotificationCenter, Severity
from .persistence import AutosavePolicy, JsonFileStorage, PersistenceAdapter
from .state_manager import StateManager, TabType
from .validation_manager import ValidationManager
from .view_renderer import DetailField, TableView, form_values, render_all, render_detail

logger = logging.getLogger(__name__)

FIX_ERRORS = "Please fix the errors in the form"
LOAD_FAILED = "Saved data could not be read; starting with empty lists."
SAVE_FAILED = "Changes are kept for this session but could not be saved."


@dataclass
class SubmitOutcome:
    ok: bool
    record: Optional[Record] = None
    errors: Dict[str, str] = field(default_factory=dict)
    created: bool = False


@dataclass
class RenderSnapshot:
    tables: Dict[CollectionKey, TableView]
    charts: ChartBundle


class GameManager:
    """
    Single owner of the application state and its collaborators.

    Args:
        settings: Resolved settings; loaded from config/env when omitted
        storage: Key-value store for the persistence slot
        search_client: Game search client (tests inject a fake)
        clock: Wall clock used to mint record ids
        monotonic: Monotonic clock for notifications, autosave and debounce
        save_on_exit: Register a final save with `atexit` on start
    """

    def __init__(self, settings: Optional[Settings] = None, storage: Optional[JsonFileStorage] = None,
                 search_client: Optional[GameSearchClient] = None,
                 clock: Callable[[], float] = time.time,
                 monotonic: Callable[[], float] = time.monotonic,
                 save_on_exit: bool = False):
        self.settings = settings or load_settings()
        storage = storage or JsonFileStorage(self.settings.storage_file)

        self.persistence = PersistenceAdapter(storage, self.settings.slot_key)
        self.state_manager = StateManager(self.persistence, clock=clock)
        self.validation = ValidationManager()
        self.navigation = NavigationState()
        self.notifications = NotificationCenter(self.settings.notification_seconds, clock=monotonic)
        self.confirmation = ConfirmationPrompt()
        self.search = GameSearchService(
            search_client or GameSearchClient(self.settings.search),
            SearchDebouncer(self.settings.search.debounce_seconds, clock=monotonic),
        )
        self.autosave = AutosavePolicy(self.state_manager.save, self.settings.autosave_interval_seconds,
                                       clock=monotonic)
        self.last_snapshot: Optional[RenderSnapshot] = None

        self._save_on_exit = save_on_exit
        self._started = False
        self._chart_sinks: List[Callable[[ChartBundle], None]] = []
        self.state_manager.add_listener("persist_failed", self._on_persist_failed)

    # --- Lifecycle ---
    def start(self) -> RenderSnapshot:
        """Load persisted data (once) and produce the first render."""
        if not self._started:
            ok, error = self.state_manager.load()
            if not ok:
                logger.error(f"Starting with empty state: {error}")
                self.notifications.notify(LOAD_FAILED, Severity.ERROR)
            self.navigation.active_tab = self.state_manager.get_state().active_tab
            if self._save_on_exit:
                atexit.register(self.shutdown)
            self._started = True
        return self.render()

    def tick(self, now: Optional[float] = None) -> bool:
        """Give the periodic autosave a chance to run."""
        return self.autosave.maybe_save(now)

    def shutdown(self) -> None:
        """Session end: save one last time."""
        if self._started:
            self.state_manager.save()

    # --- Rendering ---
    def add_chart_sink(self, sink: Callable[[ChartBundle], None]) -> None:
        """Register a chart renderer that receives every new aggregate bundle."""
        self._chart_sinks.append(sink)

    def render(self) -> RenderSnapshot:
        """Rebuild all tables and charts from the current state."""
        state = self.state_manager.get_state()
        snapshot = RenderSnapshot(
            tables=render_all(state, self.settings.truncate_length),
            charts=aggregate(state),
        )
        for sink in self._chart_sinks:
            try:
                sink(snapshot.charts)
            except Exception as e:
                logger.error(f"Chart renderer failed: {e}")
        self.last_snapshot = snapshot
        return snapshot

    # --- Navigation ---
    def switch_tab(self, tab: TabType) -> bool:
        if not self.navigation.switch_tab(tab):
            return False
        self.state_manager.set_active_tab(tab)
        self.render()
        return True

    def handle_shortcut(self, key: str, ctrl: bool = False) -> bool:
        previous = self.navigation.active_tab
        handled = self.navigation.handle_shortcut(key, ctrl)
        if handled and self.navigation.active_tab != previous:
            self.state_manager.set_active_tab(self.navigation.active_tab)
            self.render()
        return handled

    def open_form(self, collection: Any, record_id: Optional[str] = None) -> Dict[str, Any]:
        """Open the add/edit form and return the initial field values."""
        key = to_collection_key(collection)
        schema = get_schema(key)
        record = self.state_manager.get_by_id(key, record_id) if record_id else None
        if record_id and record is None:
            logger.warning(f"Edit requested for unknown '{key.value}' record {record_id}")
            record_id = None
        self.validation.clear_errors(schema.form_id)
        self.navigation.open_form(key, record_id)
        return form_values(schema, record)

    def open_view(self, collection: Any, record_id: str) -> Optional[List[DetailField]]:
        key = to_collection_key(collection)
        record = self.state_manager.get_by_id(key, record_id)
        if record is None:
            return None
        self.navigation.open_view(key, record_id)
        return render_detail(get_schema(key), record)

    def close_modal(self) -> None:
        """Close any modal, discarding an in-progress edit."""
        modal = self.navigation.modal
        if modal is not None:
            self.validation.clear_errors(get_schema(modal.collection).form_id)
        self.navigation.close_modal()

    # --- CRUD ---
    def submit(self, collection: Any, values: Mapping[str, Any], record_id: Optional[str] = None) -> SubmitOutcome:
        """Validate a form submission and create or update the record."""
        key = to_collection_key(collection)
        schema = get_schema(key)

        result = self.validation.validate_form(schema.form_id, values, schema.rules_by_field())
        if not result.is_valid:
            self.notifications.notify(FIX_ERRORS, Severity.ERROR)
            return SubmitOutcome(ok=False, errors=result.messages())

        try:
            if record_id:
                record = self.state_manager.update(key, record_id, values)
                if record is None:
                    self.notifications.notify("This game no longer exists.", Severity.ERROR)
                    self.navigation.close_modal()
                    return SubmitOutcome(ok=False)
            else:
                record = self.state_manager.create(key, values)
        except RecordValidationError as e:
            logger.warning(str(e))
            self.notifications.notify(FIX_ERRORS, Severity.ERROR)
            return SubmitOutcome(ok=False)

        self.autosave.mark_saved()
        self.render()
        self.navigation.close_modal()
        self.notifications.notify(f'"{record["name"]}" was saved!')
        return SubmitOutcome(ok=True, record=record, created=not record_id)

    def request_delete(self, collection: Any, record_id: str) -> bool:
        """Ask for confirmation before deleting. Returns False for an unknown id."""
        key = to_collection_key(collection)
        record = self.state_manager.get_by_id(key, record_id)
        if record is None:
            logger.warning(f"Delete requested for unknown '{key.value}' record {record_id}")
            return False
        name = record.get("name", "")
        self.confirmation.request(
            f'Are you sure you want to delete "{name}"?',
            lambda: self._delete(key, record_id, name),
        )
        return True

    def confirm(self, answer: bool) -> bool:
        """Answer the pending confirmation prompt."""
        return self.confirmation.respond(answer)

    def _delete(self, key: CollectionKey, record_id: str, name: str) -> None:
        if self.state_manager.delete(key, record_id):
            self.autosave.mark_saved()
            self.render()
            self.notifications.notify(f'"{name}" was deleted.', Severity.ERROR)

    def get_by_id(self, collection: Any, record_id: str) -> Optional[Record]:
        return self.state_manager.get_by_id(collection, record_id)

    def records(self, collection: Any):
        return self.state_manager.records(collection)

    # --- Export & search ---
    def export_csv(self, collection: Any) -> ExportResult:
        key = to_collection_key(collection)
        result = export_collection(get_schema(key), self.state_manager.records(key))
        self.notifications.notify(result.message, Severity.SUCCESS if result.ok else Severity.ERROR)
        return result

    def export_all(self) -> Dict[CollectionKey, ExportResult]:
        return {key: self.export_csv(key) for key in SCHEMAS}

    def search_games(self, query: str, sleep: Callable[[float], None] = time.sleep) -> Optional[SearchOutcome]:
        """Debounced lookup; returns None when a newer query superseded this one."""
        self.search.request(query)
        outcome = self.search.wait_and_poll(sleep)
        if outcome is None or self.search.is_stale(outcome):
            return None
        return outcome

    # --- Internals ---
    def _on_persist_failed(self, error: Optional[str]) -> None:
        self.notifications.notify(SAVE_FAILED, Severity.ERROR)

"""
Framework-agnostic state management for the Game Tracker UI.

This module owns the application state (the three record collections plus
the active tab) and is the only place those collections are mutated. Every
mutation runs in the fixed order mutate -> persist -> notify, so listeners
that re-render always see the persisted state.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union, TYPE_CHECKING
from enum import Enum
import copy
import logging
import time

from ..exceptions import RecordNotFoundError, RecordValidationError
from ..schema import SCHEMAS, CollectionKey, Record, get_schema, to_collection_key

if TYPE_CHECKING:
    from .persistence import PersistenceAdapter

logger = logging.getLogger(__name__)

CollectionRef = Union[CollectionKey, str]


class TabType(Enum):
    """Enumeration of available tabs in the application."""
    WANT_TO_PLAY = "wantToPlay"
    FINISHED = "finished"
    ABANDONED = "abandoned"

    @property
    def collection(self) -> CollectionKey:
        return CollectionKey(self.value)


@dataclass
class GameState:
    """Aggregate application state: three collections and the active tab."""
    want_to_play: List[Record] = field(default_factory=list)
    finished: List[Record] = field(default_factory=list)
    abandoned: List[Record] = field(default_factory=list)
    active_tab: TabType = TabType.WANT_TO_PLAY

    def collection(self, key: CollectionRef) -> List[Record]:
        """Return the live list backing a collection."""
        key = to_collection_key(key)
        if key == CollectionKey.WANT_TO_PLAY:
            return self.want_to_play
        if key == CollectionKey.FINISHED:
            return self.finished
        return self.abandoned

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        """Persisted shape: {wantToPlay: [...], finished: [...], abandoned: [...]}"""
        return {
            key.value: [schema.to_storage(r) for r in self.collection(key)]
            for key, schema in SCHEMAS.items()
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GameState":
        """Build a state from its persisted shape.

        Missing collections become empty lists. Entries that are not objects,
        lack an id or repeat an id already seen are dropped.
        """
        state = cls()
        for key, schema in SCHEMAS.items():
            raw = data.get(key.value) or []
            if not isinstance(raw, list):
                logger.warning(f"Ignoring malformed '{key.value}' collection in saved data")
                continue
            seen = set()
            target = state.collection(key)
            for item in raw:
                if not isinstance(item, dict):
                    continue
                record = schema.from_storage(item)
                if not record["id"] or record["id"] in seen:
                    logger.warning(f"Dropping saved '{key.value}' record with missing or duplicate id")
                    continue
                seen.add(record["id"])
                target.append(record)
        return state


class StateManager:
    """
    Framework-agnostic state manager with reactive patterns.

    Performs create/update/delete on the collections, mints record ids,
    persists after every mutation and notifies listeners so views can
    re-render. Listener events:

    - "state_changed": (collection_key, action, record)
    - "persist_failed": (error_message,)
    """

    def __init__(self, persistence: Optional["PersistenceAdapter"] = None,
                 clock: Callable[[], float] = time.time):
        """Initialize the state manager with empty state.

        Args:
            persistence: Adapter used to save after each mutation; None keeps
                the state in memory only
            clock: Wall clock in seconds, used to mint ids
        """
        self._state = GameState()
        self._persistence = persistence
        self._clock = clock
        self._listeners: Dict[str, List[Callable]] = {}
        self.last_persist_error: Optional[str] = None

    def get_state(self) -> GameState:
        """Get the current application state."""
        return self._state

    def set_state(self, new_state: GameState) -> None:
        """Replace the entire state (used once after loading) and notify."""
        self._state = new_state
        self._notify_listeners("state_changed", None, "load", None)

    def load(self) -> Tuple[bool, Optional[str]]:
        """Load the persisted state. Called once at application start."""
        if self._persistence is None:
            return True, None
        ok, error, state = self._persistence.load()
        self.set_state(state)
        return ok, error

    def save(self) -> bool:
        """Persist the current state; failures are logged and reported, never raised."""
        if self._persistence is None:
            return True
        ok, error = self._persistence.save(self._state)
        if ok:
            self.last_persist_error = None
            return True
        self.last_persist_error = error
        logger.error(f"Persisting state failed; in-memory state kept: {error}")
        self._notify_listeners("persist_failed", error)
        return False

    # --- Queries ---
    def records(self, collection: CollectionRef) -> Tuple[Record, ...]:
        """Read-only snapshot of a collection in display order."""
        return tuple(copy.deepcopy(r) for r in self._state.collection(collection))

    def get_by_id(self, collection: CollectionRef, record_id: str) -> Optional[Record]:
        """Return a copy of the record with `record_id`, or None."""
        index = self._index_of(collection, record_id)
        if index is None:
            return None
        return copy.deepcopy(self._state.collection(collection)[index])

    def counts(self) -> Dict[CollectionKey, int]:
        return {key: len(self._state.collection(key)) for key in CollectionKey}

    # --- Mutations ---
    def create(self, collection: CollectionRef, fields: Mapping[str, Any]) -> Record:
        """Append a new record with a freshly minted id.

        Raises:
            RecordValidationError: when a required business field is empty
        """
        key = to_collection_key(collection)
        schema = get_schema(key)
        record = schema.coerce(fields)
        self._check_required(key, record)

        record_id = self._mint_id(key)
        record = {"id": record_id, **record}
        self._state.collection(key).append(record)
        logger.info(f"Created '{key.value}' record {record_id}")

        self.save()
        self._notify_listeners("state_changed", key, "create", copy.deepcopy(record))
        return copy.deepcopy(record)

    def update(self, collection: CollectionRef, record_id: str, fields: Mapping[str, Any]) -> Optional[Record]:
        """Replace every field of an existing record, keeping its id and position.

        An unknown id is a logged no-op and returns None.
        """
        key = to_collection_key(collection)
        index = self._index_of(key, record_id)
        if index is None:
            logger.warning(str(RecordNotFoundError(key.value, record_id)))
            return None

        schema = get_schema(key)
        record = schema.coerce(fields)
        self._check_required(key, record)
        record = {"id": record_id, **record}
        self._state.collection(key)[index] = record
        logger.info(f"Updated '{key.value}' record {record_id}")

        self.save()
        self._notify_listeners("state_changed", key, "update", copy.deepcopy(record))
        return copy.deepcopy(record)

    def delete(self, collection: CollectionRef, record_id: str) -> bool:
        """Remove a record. Confirmation must have been obtained by the caller.

        Returns:
            True when a record was removed; an unknown id is a logged no-op
        """
        key = to_collection_key(collection)
        index = self._index_of(key, record_id)
        if index is None:
            logger.warning(str(RecordNotFoundError(key.value, record_id)))
            return False

        removed = self._state.collection(key).pop(index)
        logger.info(f"Deleted '{key.value}' record {record_id}")

        self.save()
        self._notify_listeners("state_changed", key, "delete", removed)
        return True

    def set_active_tab(self, tab: TabType) -> None:
        """Set the active tab."""
        self._state.active_tab = tab

    # --- Listeners ---
    def add_listener(self, event: str, callback: Callable) -> None:
        """Add a listener for state change events."""
        if event not in self._listeners:
            self._listeners[event] = []
        self._listeners[event].append(callback)

    def remove_listener(self, event: str, callback: Callable) -> None:
        """Remove a listener for state change events."""
        if event in self._listeners:
            try:
                self._listeners[event].remove(callback)
            except ValueError:
                pass

    def _notify_listeners(self, event: str, *args, **kwargs) -> None:
        """Notify all listeners for a specific event."""
        if event in self._listeners:
            for callback in list(self._listeners[event]):
                try:
                    callback(*args, **kwargs)
                except Exception as e:
                    logger.error(f"Error in state listener callback: {e}")

    # --- Internals ---
    def _index_of(self, collection: CollectionRef, record_id: str) -> Optional[int]:
        for i, record in enumerate(self._state.collection(collection)):
            if record.get("id") == record_id:
                return i
        return None

    def _mint_id(self, key: CollectionKey) -> str:
        existing = {r.get("id") for r in self._state.collection(key)}
        candidate = int(self._clock() * 1000)
        while str(candidate) in existing:
            candidate += 1
        return str(candidate)

    def _check_required(self, key: CollectionKey, record: Record) -> None:
        schema = get_schema(key)
        missing = [f for f in schema.required_fields() if record.get(f) in ("", None)]
        if missing:
            raise RecordValidationError(
                f"Missing required field(s) for '{key.value}': {', '.join(missing)}"
            )

"""
Persistence for the Game Tracker state.

The whole state is serialized as one JSON document stored under a single
named slot of a small key-value store. `JsonFileStorage` provides that store
on top of one JSON file; `PersistenceAdapter` implements save/load against
it and never lets a missing or corrupt slot escape as an exception.
"""

from pathlib import Path
from typing import Callable, Dict, Optional, Tuple
import json
import logging
import os
import tempfile
import time

from ..exceptions import PersistenceError
from .state_manager import GameState

logger = logging.getLogger(__name__)

DEFAULT_SLOT_KEY = "gameTrackerData"


class JsonFileStorage:
    """Durable string key-value store backed by a single JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Storage file {self.path} is unreadable: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"Storage file {self.path} does not hold a key-value object")
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".storage-", suffix=".json")
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise PersistenceError(f"Cannot write storage file {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return None if value is None else str(value)

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except PersistenceError as e:
            logger.warning(f"Overwriting unreadable storage file: {e}")
            data = {}
        data[key] = value
        self._write_all(data)


class PersistenceAdapter:
    """Save and load the full `GameState` to and from one storage slot."""

    def __init__(self, storage: JsonFileStorage, slot_key: str = DEFAULT_SLOT_KEY):
        """Initialize the adapter.

        Args:
            storage: Key-value store providing get_item/set_item
            slot_key: Fixed name of the slot holding the serialized state
        """
        self.storage = storage
        self.slot_key = slot_key

    def save(self, state: GameState) -> Tuple[bool, Optional[str]]:
        """Serialize the state into the slot.

        Returns:
            Tuple of (success, error_message)
        """
        try:
            payload = json.dumps(state.to_dict(), ensure_ascii=False, allow_nan=False)
            self.storage.set_item(self.slot_key, payload)
            logger.debug(f"State saved to slot '{self.slot_key}'")
            return True, None
        except (TypeError, ValueError) as e:
            error_msg = f"Error serializing state: {e}"
            logger.error(error_msg)
            return False, error_msg
        except PersistenceError as e:
            error_msg = f"Error saving state: {e}"
            logger.error(error_msg)
            return False, error_msg

    def load(self) -> Tuple[bool, Optional[str], GameState]:
        """Deserialize the state from the slot.

        Returns:
            Tuple of (success, error_message, state). The state is the
            canonical empty state whenever the slot is missing, unreadable or
            does not parse; a missing slot is not an error.
        """
        try:
            raw = self.storage.get_item(self.slot_key)
        except PersistenceError as e:
            error_msg = f"Error loading state: {e}"
            logger.error(error_msg)
            return False, error_msg, GameState()

        if raw is None:
            logger.info(f"No saved data in slot '{self.slot_key}'; starting empty")
            return True, None, GameState()

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            error_msg = f"Error parsing saved data: {e}"
            logger.error(error_msg)
            return False, error_msg, GameState()

        if not isinstance(data, dict):
            error_msg = "Saved data is not a JSON object"
            logger.error(error_msg)
            return False, error_msg, GameState()

        try:
            state = GameState.from_dict(data)
        except (TypeError, ValueError, OverflowError, AttributeError) as e:
            error_msg = f"Error decoding saved data: {e}"
            logger.error(error_msg)
            return False, error_msg, GameState()

        logger.info(
            f"Data loaded successfully: {len(state.want_to_play)} to play, "
            f"{len(state.finished)} finished, {len(state.abandoned)} abandoned"
        )
        return True, None, state


class AutosavePolicy:
    """Opportunistic periodic save.

    There is no timer thread: the owner calls `maybe_save()` on every
    interaction and a save happens once `interval_seconds` have elapsed
    since the last one.
    """

    def __init__(self, save: Callable[[], bool], interval_seconds: float = 30.0,
                 clock: Callable[[], float] = time.monotonic):
        self._save = save
        self.interval_seconds = interval_seconds
        self._clock = clock
        self._last_saved = clock()

    def mark_saved(self, now: Optional[float] = None) -> None:
        self._last_saved = self._clock() if now is None else now

    def maybe_save(self, now: Optional[float] = None) -> bool:
        """Save if the interval has elapsed. Returns True when a save ran."""
        now = self._clock() if now is None else now
        if now - self._last_saved < self.interval_seconds:
            return False
        self._save()
        self._last_saved = now
        return True

"""
Framework-agnostic business logic for the Game Tracker UI.

Nothing in this package imports a UI framework; the Streamlit app and the
command-line runner both drive the same managers.

Core principles:
- No UI framework imports or dependencies
- One schema per collection shared by validation, rendering and export
- Mutations always run mutate -> persist -> render
"""

from .state_manager import StateManager, GameState, TabType
from .validation_manager import ValidationManager
from .persistence import PersistenceAdapter, JsonFileStorage
from .game_manager import GameManager

__all__ = [
    "StateManager",
    "GameState",
    "TabType",
    "ValidationManager",
    "PersistenceAdapter",
    "JsonFileStorage",
    "GameManager",
]

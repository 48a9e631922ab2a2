"""Error taxonomy for the game tracker.

None of these are fatal to a running session: managers catch them at
their boundaries, log them and turn them into notifications or inline
messages.
"""

from typing import Any, Optional


class GameTrackerError(Exception):
    """Base class for all game tracker errors."""


class RecordValidationError(GameTrackerError):
    """A submitted record failed field validation.

    Carries the `ValidationResult` so callers can surface field messages.
    """

    def __init__(self, message: str, result: Optional[Any] = None):
        super().__init__(message)
        self.result = result


class PersistenceError(GameTrackerError):
    """The persistence slot could not be read or written."""


class RecordNotFoundError(GameTrackerError, LookupError):
    """An update or delete referenced an id that is not in the collection."""

    def __init__(self, collection: str, record_id: str):
        super().__init__(f"No record with id '{record_id}' in '{collection}'")
        self.collection = collection
        self.record_id = record_id


class ExternalServiceError(GameTrackerError):
    """The game search service is unreachable or not configured."""

    def __init__(self, message: str, not_configured: bool = False):
        super().__init__(message)
        self.not_configured = not_configured

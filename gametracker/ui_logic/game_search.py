"""
Game name suggestions from an external search API (RAWG-compatible).

The client degrades instead of failing: a missing API key or any network,
HTTP or decoding problem becomes an `ExternalServiceError`, which
`GameSearchService` turns into an inline message. Lookups are debounced by
a clock-driven `SearchDebouncer`; results of a superseded lookup are stale
and must be dropped by the caller.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple
import logging
import time

import requests

from ..exceptions import ExternalServiceError
from ..settings import SearchSettings

logger = logging.getLogger(__name__)

NO_RESULTS = "No results found."
NOT_CONFIGURED = "Search is not configured."
UNAVAILABLE = "Search is unavailable right now."
CACHE_SIZE = 32


class GameSearchClient:
    """Thin HTTP client for the game search endpoint.

    Args:
        settings: Base URL, API key, timeout and result limits
        session: Optional requests session (tests inject a mock)
    """

    def __init__(self, settings: SearchSettings, session: Optional[requests.Session] = None) -> None:
        self.settings = settings
        self._session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.api_key and self.settings.base_url)

    def search(self, query: str) -> List[str]:
        """Return up to `max_results` game names matching `query`.

        Queries shorter than `min_query_length` return an empty list without
        a request.

        Raises:
            ExternalServiceError: service not configured or request failed
        """
        query = (query or "").strip()
        if len(query) < self.settings.min_query_length:
            return []
        if not self.is_configured:
            raise ExternalServiceError("Game search API key is not configured", not_configured=True)

        params = {
            "key": self.settings.api_key,
            "search": query,
            "page_size": self.settings.max_results,
        }
        try:
            resp = self._session.get(self.settings.base_url, params=params, timeout=self.settings.timeout_seconds)
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as exc:
            logger.warning("Game search for %r failed: %s", query, exc)
            raise ExternalServiceError(f"Game search failed: {exc}") from exc
        except ValueError as exc:
            logger.warning("Game search for %r returned invalid JSON: %s", query, exc)
            raise ExternalServiceError("Game search returned an invalid response") from exc

        results = payload.get("results") if isinstance(payload, dict) else None
        names: List[str] = []
        for item in results or []:
            name = item.get("name") if isinstance(item, dict) else None
            if name:
                names.append(str(name))
            if len(names) >= self.settings.max_results:
                break
        return names


class SearchDebouncer:
    """Clock-driven debounce: a new query supersedes the pending one.

    No timers or threads; the owner polls `due()` on each interaction.
    """

    def __init__(self, quiet_seconds: float = 0.5, clock: Callable[[], float] = time.monotonic) -> None:
        self.quiet_seconds = quiet_seconds
        self._clock = clock
        self._generation = 0
        self._pending: Optional[Tuple[int, str, float]] = None

    @property
    def generation(self) -> int:
        return self._generation

    def schedule(self, query: str, now: Optional[float] = None) -> int:
        """Queue a lookup, cancelling any pending one. Returns its generation token."""
        now = self._clock() if now is None else now
        self._generation += 1
        self._pending = (self._generation, query, now + self.quiet_seconds)
        return self._generation

    def cancel(self) -> None:
        self._generation += 1
        self._pending = None

    def remaining(self, now: Optional[float] = None) -> float:
        if self._pending is None:
            return 0.0
        now = self._clock() if now is None else now
        return max(0.0, self._pending[2] - now)

    def due(self, now: Optional[float] = None) -> Optional[Tuple[int, str]]:
        """Pop the pending lookup once its quiet period has passed."""
        if self._pending is None:
            return None
        now = self._clock() if now is None else now
        generation, query, fire_at = self._pending
        if now < fire_at:
            return None
        self._pending = None
        return generation, query

    def is_current(self, generation: int) -> bool:
        """True when no newer lookup was scheduled after `generation`."""
        return generation == self._generation


@dataclass
class SearchOutcome:
    query: str
    suggestions: List[str] = field(default_factory=list)
    message: Optional[str] = None
    generation: int = 0


class GameSearchService:
    """Debounced suggestions that never raise."""

    def __init__(self, client: GameSearchClient, debouncer: Optional[SearchDebouncer] = None,
                 cache_size: int = CACHE_SIZE) -> None:
        self.client = client
        self.debouncer = debouncer or SearchDebouncer(client.settings.debounce_seconds)
        self.cache_size = cache_size
        # Least recently used queries first
        self._cache: "OrderedDict[str, List[str]]" = OrderedDict()

    def suggest(self, query: str, generation: int = 0) -> SearchOutcome:
        """Run one lookup now and describe the result for inline display."""
        query = (query or "").strip()
        if len(query) < self.client.settings.min_query_length:
            return SearchOutcome(query=query, generation=generation)
        try:
            if query in self._cache:
                self._cache.move_to_end(query)
                names = self._cache[query]
            else:
                names = self.client.search(query)
                self._remember(query, names)
        except ExternalServiceError as exc:
            message = NOT_CONFIGURED if exc.not_configured else UNAVAILABLE
            return SearchOutcome(query=query, message=message, generation=generation)
        if not names:
            return SearchOutcome(query=query, message=NO_RESULTS, generation=generation)
        return SearchOutcome(query=query, suggestions=names, generation=generation)

    def _remember(self, query: str, names: List[str]) -> None:
        self._cache[query] = names
        while len(self._cache) > self.cache_size:
            self._cache.popitem(last=False)

    def request(self, query: str, now: Optional[float] = None) -> int:
        return self.debouncer.schedule(query, now)

    def poll(self, now: Optional[float] = None) -> Optional[SearchOutcome]:
        """Fire the pending lookup if its quiet period is over."""
        ready = self.debouncer.due(now)
        if ready is None:
            return None
        generation, query = ready
        return self.suggest(query, generation)

    def is_stale(self, outcome: SearchOutcome) -> bool:
        return not self.debouncer.is_current(outcome.generation)

    def wait_and_poll(self, sleep: Callable[[float], None] = time.sleep) -> Optional[SearchOutcome]:
        """Block for the rest of the quiet period, then poll."""
        delay = self.debouncer.remaining()
        if delay > 0:
            sleep(delay)
        return self.poll()

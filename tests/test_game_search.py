"""
Tests for the game search client, debouncer and suggestion service.
"""

import pytest
import requests
from unittest.mock import Mock

from gametracker.exceptions import ExternalServiceError
from gametracker.settings import SearchSettings
from gametracker.ui_logic.game_search import (
    NO_RESULTS, NOT_CONFIGURED, UNAVAILABLE, GameSearchClient, GameSearchService, SearchDebouncer,
)


def _session(payload=None, error=None):
    response = Mock()
    response.json.return_value = payload
    if error is not None:
        response.raise_for_status.side_effect = error
    session = Mock()
    session.get.return_value = response
    return session


def _client(session, api_key="secret", **kwargs):
    return GameSearchClient(SearchSettings(api_key=api_key, **kwargs), session=session)


class TestGameSearchClient:
    """HTTP client behaviour with a mocked requests session."""

    def test_returns_names(self):
        session = _session({"results": [{"name": "Hades"}, {"name": "Hades II"}, {"slug": "no-name"}]})
        client = _client(session)
        assert client.search("hades") == ["Hades", "Hades II"]
        _, kwargs = session.get.call_args
        assert kwargs["params"] == {"key": "secret", "search": "hades", "page_size": 5}
        assert kwargs["timeout"] == 10.0

    def test_caps_results(self):
        payload = {"results": [{"name": f"Game {i}"} for i in range(10)]}
        assert len(_client(_session(payload), max_results=3).search("game")) == 3

    def test_short_query_skips_request(self):
        session = _session({"results": []})
        assert _client(session).search("ha") == []
        session.get.assert_not_called()

    def test_not_configured(self):
        with pytest.raises(ExternalServiceError) as exc_info:
            _client(_session(), api_key="").search("hades")
        assert exc_info.value.not_configured is True

    def test_http_error(self):
        session = _session(error=requests.HTTPError("500 Server Error"))
        with pytest.raises(ExternalServiceError) as exc_info:
            _client(session).search("hades")
        assert exc_info.value.not_configured is False

    def test_connection_error(self):
        session = Mock()
        session.get.side_effect = requests.ConnectionError("offline")
        with pytest.raises(ExternalServiceError):
            _client(session).search("hades")

    def test_invalid_json(self):
        response = Mock()
        response.json.side_effect = ValueError("not json")
        session = Mock()
        session.get.return_value = response
        with pytest.raises(ExternalServiceError):
            _client(session).search("hades")


class TestSearchDebouncer:
    """Clock-driven debounce with generation tokens."""

    def test_fires_after_quiet_period(self, clock):
        debouncer = SearchDebouncer(0.5, clock=clock)
        gen = debouncer.schedule("hades")
        assert debouncer.due() is None
        assert debouncer.remaining() == pytest.approx(0.5)
        clock.advance(0.5)
        assert debouncer.due() == (gen, "hades")
        assert debouncer.due() is None

    def test_new_query_supersedes_pending(self, clock):
        debouncer = SearchDebouncer(0.5, clock=clock)
        first = debouncer.schedule("had")
        clock.advance(0.3)
        second = debouncer.schedule("hades")
        clock.advance(0.3)
        assert debouncer.due() is None
        clock.advance(0.3)
        assert debouncer.due() == (second, "hades")
        assert not debouncer.is_current(first)
        assert debouncer.is_current(second)

    def test_cancel(self, clock):
        debouncer = SearchDebouncer(0.5, clock=clock)
        gen = debouncer.schedule("hades")
        debouncer.cancel()
        clock.advance(1)
        assert debouncer.due() is None
        assert not debouncer.is_current(gen)


class TestGameSearchService:
    """Suggestions never raise; failures become inline messages."""

    def test_suggestions(self, clock):
        service = GameSearchService(_client(_session({"results": [{"name": "Hades"}]})),
                                    SearchDebouncer(0.5, clock=clock))
        outcome = service.suggest("hades")
        assert outcome.suggestions == ["Hades"]
        assert outcome.message is None

    def test_no_results(self):
        service = GameSearchService(_client(_session({"results": []})))
        assert service.suggest("zzzzz").message == NO_RESULTS

    def test_not_configured_message(self):
        service = GameSearchService(_client(_session(), api_key=""))
        assert service.suggest("hades").message == NOT_CONFIGURED

    def test_unavailable_message(self):
        session = Mock()
        session.get.side_effect = requests.Timeout("slow")
        service = GameSearchService(_client(session))
        assert service.suggest("hades").message == UNAVAILABLE

    def test_results_cached(self):
        session = _session({"results": [{"name": "Hades"}]})
        service = GameSearchService(_client(session))
        service.suggest("hades")
        service.suggest("hades")
        assert session.get.call_count == 1

    def test_cache_keeps_recent_queries_only(self):
        session = _session({"results": [{"name": "Hades"}]})
        service = GameSearchService(_client(session), cache_size=2)
        service.suggest("aaa")
        service.suggest("bbb")
        service.suggest("aaa")
        service.suggest("ccc")
        assert session.get.call_count == 3

        service.suggest("aaa")
        assert session.get.call_count == 3
        service.suggest("bbb")
        assert session.get.call_count == 4

    def test_wait_and_poll(self, clock):
        service = GameSearchService(_client(_session({"results": [{"name": "Hades"}]})),
                                    SearchDebouncer(0.5, clock=clock))
        service.request("hades")
        outcome = service.wait_and_poll(sleep=clock.sleep)
        assert outcome.suggestions == ["Hades"]
        assert not service.is_stale(outcome)

    def test_stale_outcome(self, clock):
        service = GameSearchService(_client(_session({"results": [{"name": "Hades"}]})),
                                    SearchDebouncer(0.5, clock=clock))
        service.request("hades")
        clock.advance(0.5)
        outcome = service.poll()
        service.request("hades ii")
        assert service.is_stale(outcome)

from __future__ import annotations

"""Session helpers: the per-session GameManager and widget key bookkeeping.

Streamlit reruns the whole script on every interaction; the manager lives in
`st.session_state` so it is built, and its data loaded, once per session.
"""

import logging

import streamlit as st

from gametracker.io_paths import LOGS_DIR
from gametracker.settings import load_settings
from gametracker.ui_logic import GameManager
from gametracker.utils_logging import configure_logging

logger = logging.getLogger(__name__)

_MANAGER_KEY = "game_manager"
_NONCE_KEY = "form_nonce"


def get_game_manager() -> GameManager:
    """Return the session's GameManager, creating and starting it on first use."""
    if _MANAGER_KEY not in st.session_state:
        settings = load_settings()
        configure_logging(LOGS_DIR, debug=settings.debug)
        manager = GameManager(settings=settings, save_on_exit=True)
        manager.start()
        st.session_state[_MANAGER_KEY] = manager
        logger.info("Game tracker session started")
    return st.session_state[_MANAGER_KEY]


def widget_key(*parts: object) -> str:
    """Widget key scoped to the current form opening.

    Each time a form is opened the nonce changes, so widgets start from the
    values seeded for that opening instead of leftovers from the last one.
    """
    nonce = st.session_state.get(_NONCE_KEY, 0)
    return "-".join(str(p) for p in (*parts, nonce))


def bump_form_nonce() -> None:
    st.session_state[_NONCE_KEY] = int(st.session_state.get(_NONCE_KEY, 0)) + 1

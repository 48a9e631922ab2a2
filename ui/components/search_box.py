from __future__ import annotations

"""Game name search box with suggestions.

Typing at least three characters looks the name up through the manager's
debounced search service. Picking a suggestion fills the form's name field.
Results for a query that is no longer in the box are dropped.
"""

import streamlit as st

from gametracker.ui_logic import GameManager


def _fill_name(name_key: str, value: str) -> None:
    st.session_state[name_key] = value


def render_search_box(manager: GameManager, name_key: str, search_key: str) -> None:
    query = st.text_input("Search game name", key=search_key, placeholder="Type at least 3 letters")
    query = (query or "").strip()
    if len(query) < manager.settings.search.min_query_length:
        return

    cache_key = f"{search_key}-outcome"
    cached = st.session_state.get(cache_key)
    if cached is None or cached.query != query:
        outcome = manager.search_games(query)
        if outcome is None:
            return
        st.session_state[cache_key] = outcome
        cached = outcome

    if cached.message:
        st.caption(cached.message)
        return

    cols = st.columns(len(cached.suggestions))
    for i, name in enumerate(cached.suggestions):
        with cols[i]:
            st.button(name, key=f"{search_key}-pick-{i}", on_click=_fill_name, args=(name_key, name))

"""
Game Tracker UI

Three collections (want to play / finished / abandoned) in tabs, summary
charts on top, one GameManager per browser session.
"""

from pathlib import Path
import sys
import streamlit as st

# Ensure project root is on sys.path to enable gametracker imports
project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from gametracker.schema import get_schema
from gametracker.ui_logic import GameManager, TabType
from ui.services import get_game_manager
from ui.components.charts_panel import render_charts_panel
from ui.components.collection_tab import render_collection_tab
from ui.components.notifications import render_notifications


st.set_page_config(page_title="Game Tracker", page_icon="🎮", layout="wide", initial_sidebar_state="collapsed")

TAB_LABELS = {
    TabType.WANT_TO_PLAY: "🎯 Want to Play",
    TabType.FINISHED: "🏆 Finished",
    TabType.ABANDONED: "💤 Abandoned",
}


def _on_tab_change(manager: GameManager) -> None:
    manager.switch_tab(st.session_state["active_tab"])


def main() -> None:
    manager = get_game_manager()
    manager.tick()

    st.title("🎮 Game Tracker")
    st.caption("Games to play, finished and abandoned")

    render_charts_panel(manager)
    st.divider()

    tabs = list(TAB_LABELS)
    st.session_state["active_tab"] = manager.navigation.active_tab
    st.radio(
        "Collection",
        options=tabs,
        format_func=TAB_LABELS.get,
        horizontal=True,
        label_visibility="collapsed",
        key="active_tab",
        on_change=_on_tab_change,
        args=(manager,),
    )

    render_collection_tab(manager, get_schema(manager.navigation.active_tab.collection))

    # Toasts last: actions above may have queued new notifications
    render_notifications(manager)


if __name__ == "__main__":
    main()

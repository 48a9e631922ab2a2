from __future__ import annotations

"""Show manager notifications as Streamlit toasts, each exactly once."""

import streamlit as st

from gametracker.ui_logic import GameManager
from gametracker.ui_logic.notifications import Severity

_SHOWN_KEY = "shown_notifications"


def render_notifications(manager: GameManager) -> None:
    shown = st.session_state.setdefault(_SHOWN_KEY, set())
    active = manager.notifications.active()
    for notification in active:
        if notification.id in shown:
            continue
        icon = "✅" if notification.severity == Severity.SUCCESS else "⚠️"
        st.toast(notification.message, icon=icon)
        shown.add(notification.id)
    # Forget ids that have expired so the set does not grow for the whole session
    shown.intersection_update({n.id for n in active})

"""Service layer for the Streamlit UI.

Keeps session bookkeeping (one GameManager per browser session) out of
the components.
"""

from .session_service import get_game_manager, widget_key, bump_form_nonce

__all__ = [
    "get_game_manager",
    "widget_key",
    "bump_form_nonce",
]

"""
Tab and modal navigation state.

Pure presentation state: which tab is active and which modal (if any) is
open. Holds no business data, so closing a modal simply drops the
in-progress edit.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import logging

from ..schema import CollectionKey
from .state_manager import TabType

logger = logging.getLogger(__name__)

SHORTCUT_TABS = {
    "1": TabType.WANT_TO_PLAY,
    "2": TabType.FINISHED,
    "3": TabType.ABANDONED,
}


class ModalKind(Enum):
    FORM = "form"
    VIEW = "view"


@dataclass(frozen=True)
class ModalState:
    kind: ModalKind
    collection: CollectionKey
    record_id: Optional[str] = None

    @property
    def is_edit(self) -> bool:
        return self.kind == ModalKind.FORM and self.record_id is not None


class NavigationState:
    """Active tab plus at most one open modal."""

    def __init__(self, active_tab: TabType = TabType.WANT_TO_PLAY):
        self.active_tab = active_tab
        self.modal: Optional[ModalState] = None

    def switch_tab(self, tab: TabType) -> bool:
        """Activate a tab. Returns False when it was already active."""
        if tab == self.active_tab:
            return False
        self.active_tab = tab
        return True

    def open_form(self, collection: CollectionKey, record_id: Optional[str] = None) -> ModalState:
        """Open the add (no id) or edit form of a collection."""
        self.modal = ModalState(ModalKind.FORM, collection, record_id or None)
        return self.modal

    def open_view(self, collection: CollectionKey, record_id: str) -> ModalState:
        self.modal = ModalState(ModalKind.VIEW, collection, record_id)
        return self.modal

    def close_modal(self) -> None:
        if self.modal is not None:
            logger.debug(f"Closing {self.modal.kind.value} modal for '{self.modal.collection.value}'")
        self.modal = None

    def handle_shortcut(self, key: str, ctrl: bool = False) -> bool:
        """Keyboard shortcuts: Ctrl+1/2/3 switch tabs, Escape closes the modal.

        Returns:
            True when the key was handled
        """
        if key == "Escape":
            if self.modal is None:
                return False
            self.close_modal()
            return True
        if ctrl and key in SHORTCUT_TABS:
            self.switch_tab(SHORTCUT_TABS[key])
            return True
        return False

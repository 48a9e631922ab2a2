from __future__ import annotations

"""Base component class for the Streamlit UI.

All tabs/panels inherit from `BaseComponent` and implement the `render()`
method. Components receive the `GameManager` through their constructor and
never touch the record collections directly.
"""

from dataclasses import dataclass

from gametracker.ui_logic import GameManager


@dataclass
class BaseComponent:
    """Base class for all UI components.

    Attributes:
        manager: The session's GameManager (state owner and controller)
    """

    manager: GameManager

    def render(self) -> None:
        """Render the component.

        Subclasses must override this method to draw Streamlit widgets
        and route every change through the manager.
        """
        raise NotImplementedError("Subclasses must implement render()")

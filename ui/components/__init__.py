"""UI components package for the Streamlit application.

This package contains the base component class, one generic collection tab
configured per schema, the record form, the charts panel and the search box.
"""

from .base_component import BaseComponent  # re-export for convenience
from .charts_panel import ChartsPanel
from .collection_tab import CollectionTab

__all__ = [
    "BaseComponent",
    "ChartsPanel",
    "CollectionTab",
]

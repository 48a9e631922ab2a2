from __future__ import annotations

import streamlit as st

from gametracker.ui_logic import GameManager
from viz.interactive import build_figures
from .base_component import BaseComponent


class ChartsPanel(BaseComponent):
    """Summary charts: interest levels, scores and reasons for giving up.

    Reads the aggregate bundle of the latest render; recomputed on every
    rerun together with the tables.
    """

    def render(self) -> None:
        snapshot = self.manager.last_snapshot or self.manager.render()
        bundle = snapshot.charts
        figures = build_figures(bundle)

        st.subheader("Statistics")
        m1, m2 = st.columns(2)
        m1.metric("Finished games", bundle.finished.total)
        m2.metric("Average time", f"{bundle.finished.average_hours:.1f}h")

        c1, c2, c3 = st.columns(3)
        with c1:
            st.plotly_chart(figures["interest"], use_container_width=True, key="chart-interest")
        with c2:
            st.plotly_chart(figures["scores"], use_container_width=True, key="chart-scores")
        with c3:
            if bundle.reasons.labels:
                st.plotly_chart(figures["reasons"], use_container_width=True, key="chart-reasons")
            else:
                st.caption("No abandoned games yet.")


def render_charts_panel(manager: GameManager) -> None:
    ChartsPanel(manager).render()

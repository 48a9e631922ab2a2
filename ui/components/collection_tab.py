from __future__ import annotations

import streamlit as st

from gametracker.schema import CollectionSchema
from gametracker.ui_logic import GameManager
from gametracker.ui_logic.navigation import ModalKind
from gametracker.ui_logic.view_renderer import TableView, render_detail
from .base_component import BaseComponent
from .record_form import render_record_form, seed_form

_CONFIRM_OWNER = "confirm_collection"


class CollectionTab(BaseComponent):
    """One tab per collection, configured entirely by its schema.

    - Add / export buttons
    - The table (or its empty placeholder) with view/edit/delete per row
    - The open form or detail view for this collection, if any
    - The delete confirmation prompt
    """

    def __init__(self, manager: GameManager, schema: CollectionSchema) -> None:
        super().__init__(manager)
        self.schema = schema

    @property
    def _key(self) -> str:
        return self.schema.key.value

    def render(self) -> None:
        st.header(self.schema.title)
        self._render_toolbar()
        self._render_confirmation()
        self._render_modal()

        snapshot = self.manager.last_snapshot or self.manager.render()
        self._render_table(snapshot.tables[self.schema.key])

    def _render_toolbar(self) -> None:
        col_add, col_export, _ = st.columns([1, 1, 3])
        with col_add:
            if st.button(f"Add {self.schema.singular}", key=f"add-{self._key}", type="primary"):
                values = self.manager.open_form(self.schema.key)
                seed_form(self.schema, values, None)
                st.rerun()
        with col_export:
            if st.button("Export CSV", key=f"export-{self._key}"):
                st.session_state[f"export-result-{self._key}"] = self.manager.export_csv(self.schema.key)

        result = st.session_state.get(f"export-result-{self._key}")
        if result is not None and result.ok:
            st.download_button(
                label=f"Download {result.filename}",
                data=result.content,
                file_name=result.filename,
                mime="text/csv",
                key=f"download-{self._key}",
                on_click=lambda: st.session_state.pop(f"export-result-{self._key}", None),
            )

    def _render_confirmation(self) -> None:
        prompt = self.manager.confirmation
        if not prompt.is_open or st.session_state.get(_CONFIRM_OWNER) != self._key:
            return
        st.warning(prompt.message)
        col_yes, col_no, _ = st.columns([1, 1, 4])
        with col_yes:
            yes = st.button("Yes, delete", key=f"confirm-yes-{self._key}", type="primary")
        with col_no:
            no = st.button("No", key=f"confirm-no-{self._key}")
        if yes or no:
            self.manager.confirm(bool(yes))
            st.session_state.pop(_CONFIRM_OWNER, None)
            st.rerun()

    def _render_modal(self) -> None:
        modal = self.manager.navigation.modal
        if modal is None or modal.collection != self.schema.key:
            return
        if modal.kind == ModalKind.FORM:
            render_record_form(self.manager, self.schema, modal.record_id)
            return

        record = self.manager.get_by_id(self.schema.key, modal.record_id)
        if record is None:
            self.manager.close_modal()
            return
        with st.container(border=True):
            st.subheader(record.get("name", ""))
            for detail in render_detail(self.schema, record):
                label_col, value_col = st.columns([1, 3])
                label_col.markdown(f"**{detail.label}**")
                if detail.is_empty:
                    value_col.caption(detail.value)
                else:
                    value_col.text(detail.value)
            if st.button("Close", key=f"close-view-{self._key}"):
                self.manager.close_modal()
                st.rerun()

    def _render_table(self, table: TableView) -> None:
        if not table.visible:
            st.info(table.placeholder)
            return

        widths = [3] + [2] * (len(table.headers) - 1) + [2]
        header_cols = st.columns(widths)
        for col, header in zip(header_cols, table.headers + ["Actions"]):
            col.markdown(f"**{header}**")

        for row in table.rows:
            cols = st.columns(widths)
            for col, cell in zip(cols, row.cells):
                col.text(cell.display, help=cell.tooltip if cell.tooltip != cell.display else None)
            with cols[-1]:
                view_col, edit_col, delete_col = st.columns(3)
                if view_col.button("👁️", key=f"view-{self._key}-{row.record_id}", help="View"):
                    self.manager.open_view(self.schema.key, row.record_id)
                    st.rerun()
                if edit_col.button("✏️", key=f"edit-{self._key}-{row.record_id}", help="Edit"):
                    values = self.manager.open_form(self.schema.key, row.record_id)
                    seed_form(self.schema, values, row.record_id)
                    st.rerun()
                if delete_col.button("🗑️", key=f"delete-{self._key}-{row.record_id}", help="Delete"):
                    if self.manager.request_delete(self.schema.key, row.record_id):
                        st.session_state[_CONFIRM_OWNER] = self._key
                    st.rerun()


def render_collection_tab(manager: GameManager, schema: CollectionSchema) -> None:
    CollectionTab(manager, schema).render()

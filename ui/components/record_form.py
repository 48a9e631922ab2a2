from __future__ import annotations

"""
Add/edit form for one collection.

Widgets are generated from the collection schema, so the form, the table
and the validator never disagree about field names. Initial values are
seeded into `st.session_state` when the form opens; the widgets themselves
are created without `value=` arguments.
"""

from datetime import date
from typing import Any, Dict, Optional

import streamlit as st

from gametracker.schema import CollectionSchema, FieldSpec, InputKind, stars
from gametracker.ui_logic import GameManager
from ui.services import bump_form_nonce, widget_key
from .search_box import render_search_box


def _to_widget_value(spec: FieldSpec, value: Any) -> Any:
    if spec.input_kind == InputKind.DATE:
        try:
            return date.fromisoformat(str(value)) if value else None
        except ValueError:
            return None
    if spec.input_kind == InputKind.RATING:
        return int(value) if value else None
    if spec.input_kind == InputKind.NUMBER:
        if value is None:
            return ""
        return f"{value:g}" if isinstance(value, float) else str(value)
    return "" if value is None else value


def seed_form(schema: CollectionSchema, values: Dict[str, Any], record_id: Optional[str]) -> None:
    """Put a fresh opening's initial values into session state."""
    bump_form_nonce()
    for spec in schema.fields:
        st.session_state[widget_key(schema.form_id, record_id or "new", spec.key)] = _to_widget_value(
            spec, values.get(spec.key)
        )


def _render_widget(spec: FieldSpec, key: str) -> Any:
    if spec.input_kind == InputKind.TEXTAREA:
        return st.text_area(spec.label, key=key)
    if spec.input_kind == InputKind.DATE:
        return st.date_input(spec.label, key=key, format="YYYY-MM-DD")
    if spec.input_kind == InputKind.SELECT:
        options = list(spec.options)
        current = st.session_state.get(key)
        if current and current not in options:
            options.append(current)
        return st.selectbox(spec.label, options=options, key=key)
    if spec.input_kind == InputKind.RATING:
        return st.radio(
            spec.label,
            options=[1, 2, 3, 4, 5],
            format_func=stars,
            horizontal=True,
            key=key,
        )
    return st.text_input(spec.label, key=key)


def render_record_form(manager: GameManager, schema: CollectionSchema, record_id: Optional[str]) -> None:
    """Draw the open form; on submit hand the raw values to the manager."""
    form_id = schema.form_id
    scope = record_id or "new"
    title = f"Edit {schema.singular}" if record_id else f"Add {schema.singular}"

    with st.container(border=True):
        st.subheader(title)

        name_key = widget_key(form_id, scope, "name")
        render_search_box(manager, name_key, widget_key(form_id, scope, "search"))

        with st.form(key=widget_key(form_id, scope, "form"), clear_on_submit=False):
            values: Dict[str, Any] = {}
            for spec in schema.fields:
                values[spec.key] = _render_widget(spec, widget_key(form_id, scope, spec.key))
                error = manager.validation.field_error(form_id, spec.key)
                if error:
                    st.caption(f":red[{error}]")

            col_save, col_cancel = st.columns(2)
            with col_save:
                submitted = st.form_submit_button("Save", type="primary", use_container_width=True)
            with col_cancel:
                cancelled = st.form_submit_button("Cancel", use_container_width=True)

    if cancelled:
        manager.close_modal()
        st.rerun()
    if submitted:
        manager.submit(schema.key, values, record_id=record_id)
        # Rerun either way: success closes the form, failure shows field errors
        st.rerun()

"""
Read-only projections of the state for display.

Tables are rebuilt from scratch on every call: there is no diffing and no
cached row set. The same schema that drives validation decides the columns,
labels and form defaults here.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..schema import SCHEMAS, CollectionKey, CollectionSchema, InputKind, format_value, stars
from .state_manager import GameState

TRUNCATE_AT = 30
ROW_ACTIONS: Tuple[str, ...] = ("view", "edit", "delete")
EMPTY_VALUE = "Not provided"


@dataclass
class TableCell:
    display: str
    tooltip: str


@dataclass
class TableRow:
    record_id: str
    cells: List[TableCell]
    actions: Tuple[str, ...] = ROW_ACTIONS


@dataclass
class TableView:
    """Everything a UI needs to draw one collection table."""
    collection: CollectionKey
    headers: List[str]
    rows: List[TableRow] = field(default_factory=list)
    visible: bool = False
    placeholder: Optional[str] = None


@dataclass
class DetailField:
    label: str
    value: str
    is_empty: bool = False


def truncate(text: str, limit: int = TRUNCATE_AT) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def _cell(schema: CollectionSchema, key: str, record: Mapping[str, Any], limit: int) -> TableCell:
    spec = schema.field(key)
    value = record.get(key)
    if spec.input_kind == InputKind.RATING:
        rendered = stars(value)
        return TableCell(display=rendered, tooltip=rendered)
    text = format_value(spec, value)
    return TableCell(display=truncate(text, limit), tooltip=text)


def render_table(schema: CollectionSchema, records: Iterable[Mapping[str, Any]],
                 truncate_at: int = TRUNCATE_AT) -> TableView:
    """Project a collection into a table view.

    An empty collection yields an invisible table and the placeholder text.
    """
    records = list(records)
    view = TableView(
        collection=schema.key,
        headers=[label for _, label in schema.column_headers()],
    )
    if not records:
        view.placeholder = schema.empty_message
        return view

    view.visible = True
    for record in records:
        cells = [_cell(schema, key, record, truncate_at) for key in schema.columns]
        view.rows.append(TableRow(record_id=str(record.get("id", "")), cells=cells))
    return view


def render_all(state: GameState, truncate_at: int = TRUNCATE_AT) -> Dict[CollectionKey, TableView]:
    return {
        key: render_table(schema, state.collection(key), truncate_at)
        for key, schema in SCHEMAS.items()
    }


def render_detail(schema: CollectionSchema, record: Mapping[str, Any]) -> List[DetailField]:
    """Label/value pairs for the detail view; blank values read "Not provided"."""
    details: List[DetailField] = []
    for spec in schema.fields:
        value = record.get(spec.key)
        if spec.input_kind == InputKind.RATING and value:
            details.append(DetailField(spec.label, stars(value)))
            continue
        text = format_value(spec, value).strip()
        if spec.input_kind == InputKind.RATING or not text:
            details.append(DetailField(spec.label, EMPTY_VALUE, is_empty=True))
        else:
            details.append(DetailField(spec.label, text))
    return details


def form_values(schema: CollectionSchema, record: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Initial widget values for the add/edit form.

    New records start from the schema defaults; existing ones from their
    stored values.
    """
    values = schema.blank_record()
    if record:
        for spec in schema.fields:
            stored = record.get(spec.key)
            if stored not in (None, ""):
                values[spec.key] = stored
    return values

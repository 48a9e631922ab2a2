"""
CSV export of a collection.

Every data cell is quoted (embedded quotes doubled) and the file starts with
a UTF-8 byte-order mark so spreadsheet tools detect the encoding. An empty
collection produces no file at all.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple
import csv
import logging

import pandas as pd

from ..schema import CollectionSchema, format_value

logger = logging.getLogger(__name__)

NOTHING_TO_EXPORT = "Nothing to export."
BOM = "\ufeff"


@dataclass
class ExportResult:
    ok: bool
    message: str
    filename: Optional[str] = None
    content: Optional[bytes] = None

    def write_to(self, out_dir: Path) -> Optional[Path]:
        """Write the CSV under `out_dir`; returns None when there is nothing to write."""
        if not self.ok or self.content is None or not self.filename:
            return None
        out_dir = Path(out_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        path = out_dir / self.filename
        path.write_bytes(self.content)
        logger.info(f"Exported {path}")
        return path


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def export_records(records: Iterable[Mapping[str, Any]], columns: Sequence[Tuple[str, str]],
                   filename: str = "export.csv", formatter=_cell_text) -> ExportResult:
    """Build a CSV file from records.

    Args:
        records: Records in display order
        columns: Ordered (field key, display header) pairs
        filename: Name offered for the file
        formatter: Callable turning a stored value into cell text

    Returns:
        ExportResult; `ok` is False and `content` None when there are no records
    """
    records = list(records)
    if not records:
        return ExportResult(ok=False, message=NOTHING_TO_EXPORT)

    headers = [header for _, header in columns]
    rows = [[formatter(record.get(key)) for key, _ in columns] for record in records]
    frame = pd.DataFrame(rows, columns=headers, dtype=str)

    body = frame.to_csv(index=False, header=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
    text = ",".join(headers) + "\n" + body
    return ExportResult(
        ok=True,
        message=f"{filename} exported!",
        filename=filename,
        content=(BOM + text).encode("utf-8"),
    )


def export_collection(schema: CollectionSchema, records: Iterable[Mapping[str, Any]]) -> ExportResult:
    """Export a collection using the schema's export columns and filename."""
    columns = schema.column_headers(schema.export_columns)
    specs = {key: schema.field(key) for key, _ in columns}

    result = export_records(
        ({key: format_value(specs[key], r.get(key)) for key in specs} for r in records),
        columns,
        filename=schema.export_filename,
    )
    if not result.ok:
        logger.info(f"Nothing to export for '{schema.key.value}'")
    return result

"""
Declarative per-collection schema for the game tracker.

Each collection (want to play, finished, abandoned) is described once by a
`CollectionSchema`: its fields and how they are entered, the table columns,
the CSV export columns and the ordered validation rules. The form reader,
the validation manager, the view renderer, the persistence adapter and the
CSV exporter all read from this single source of truth.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
import logging
import math

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

INTEREST_LEVELS: Tuple[str, ...] = ("Low", "Medium", "High")
RELEASE_STATUSES: Tuple[str, ...] = ("Already Released", "Coming Soon", "Early Access")
ABANDON_REASONS: Tuple[str, ...] = (
    "Boring",
    "Too Difficult",
    "Lost Interest",
    "No Time",
    "Technical Issues",
    "Other",
)
MAX_SCORE = 5


class CollectionKey(Enum):
    """The three record collections. Values double as persistence keys."""
    WANT_TO_PLAY = "wantToPlay"
    FINISHED = "finished"
    ABANDONED = "abandoned"


class InputKind(Enum):
    """How a field is entered on its form."""
    TEXT = "text"
    TEXTAREA = "textarea"
    DATE = "date"
    NUMBER = "number"
    SELECT = "select"
    RATING = "rating"


class RuleKind(Enum):
    """Supported validation rule kinds."""
    REQUIRED = "required"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    PATTERN = "pattern"
    NUMERIC = "numeric"


@dataclass(frozen=True)
class ValidationRule:
    """A single validation descriptor for one field.

    - parameter: length bound for MIN_LENGTH/MAX_LENGTH, regex for PATTERN
    - message: overrides the default message of the rule kind
    """
    field: str
    kind: RuleKind
    parameter: Any = None
    message: Optional[str] = None


@dataclass(frozen=True)
class FieldSpec:
    """Describes one record field: label, persisted key and input kind."""
    key: str
    label: str
    storage_key: str
    input_kind: InputKind = InputKind.TEXT
    options: Tuple[str, ...] = ()
    default: Any = ""


@dataclass(frozen=True)
class CollectionSchema:
    """Typed configuration for one collection."""
    key: CollectionKey
    title: str
    singular: str
    fields: Tuple[FieldSpec, ...]
    columns: Tuple[str, ...]
    export_columns: Tuple[str, ...]
    rules: Tuple[ValidationRule, ...]
    export_filename: str
    empty_message: str

    @property
    def form_id(self) -> str:
        return f"form-{self.key.value}"

    @property
    def field_keys(self) -> List[str]:
        return [f.key for f in self.fields]

    def field(self, key: str) -> FieldSpec:
        """Return the field spec for `key` or raise KeyError."""
        for spec in self.fields:
            if spec.key == key:
                return spec
        raise KeyError(f"Unknown field '{key}' for collection '{self.key.value}'")

    def rules_by_field(self) -> Dict[str, List[ValidationRule]]:
        """Group rules by field, keeping both field order and rule order."""
        grouped: Dict[str, List[ValidationRule]] = {}
        for rule in self.rules:
            grouped.setdefault(rule.field, []).append(rule)
        return grouped

    def required_fields(self) -> List[str]:
        return [key for key, rules in self.rules_by_field().items()
                if any(r.kind == RuleKind.REQUIRED for r in rules)]

    def column_headers(self, columns: Optional[Tuple[str, ...]] = None) -> List[Tuple[str, str]]:
        """Return (field key, display header) pairs for the given columns."""
        return [(key, self.field(key).label) for key in (columns or self.columns)]

    def blank_record(self) -> Record:
        """A record holding every field's default, without an id."""
        return {spec.key: spec.default for spec in self.fields}

    def coerce(self, values: Mapping[str, Any]) -> Record:
        """Normalise raw form values into a record (without id).

        Unknown keys are ignored and missing keys take the field default.
        """
        return {spec.key: coerce_value(spec, values.get(spec.key)) for spec in self.fields}

    def to_storage(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        """Translate an in-memory record to its persisted (camelCase) shape."""
        out: Dict[str, Any] = {"id": str(record.get("id", ""))}
        for spec in self.fields:
            out[spec.storage_key] = record.get(spec.key, spec.default)
        return out

    def from_storage(self, data: Mapping[str, Any]) -> Record:
        """Translate a persisted record back to its in-memory shape.

        Accepts both the persisted key and the in-memory key for each field.
        """
        record: Record = {"id": str(data.get("id", ""))}
        for spec in self.fields:
            raw = data.get(spec.storage_key, data.get(spec.key))
            record[spec.key] = coerce_value(spec, raw)
        return record


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _to_number(value: Any) -> Optional[float]:
    if _is_blank(value):
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        logger.warning(f"Discarding non-numeric value {value!r}")
        return None
    if not math.isfinite(number):
        logger.warning(f"Discarding non-finite value {value!r}")
        return None
    return number


def _to_score(value: Any) -> int:
    if _is_blank(value):
        return 0
    try:
        score = int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return 0
    if score < 0 or score > MAX_SCORE:
        return 0
    return score


def coerce_value(spec: FieldSpec, value: Any) -> Any:
    """Coerce a raw value according to the field's input kind."""
    if spec.input_kind == InputKind.NUMBER:
        return _to_number(value)
    if spec.input_kind == InputKind.RATING:
        return _to_score(value)
    if spec.input_kind == InputKind.SELECT:
        return spec.default if _is_blank(value) else str(value).strip()
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return "" if value is None else str(value).strip()


def format_value(spec: FieldSpec, value: Any) -> str:
    """Plain-text form of a stored value, used for tables and CSV cells."""
    if value is None:
        return ""
    if spec.input_kind == InputKind.NUMBER and isinstance(value, float):
        return f"{value:g}"
    return str(value)


def stars(score: Any) -> str:
    """Render a 0-5 score as filled and empty stars."""
    filled = _to_score(score)
    return "★" * filled + "☆" * (MAX_SCORE - filled)


def _name_rules() -> Tuple[ValidationRule, ...]:
    return (
        ValidationRule("name", RuleKind.REQUIRED, message="Game name is required"),
        ValidationRule("name", RuleKind.MIN_LENGTH, 2, "Name must have at least 2 characters"),
        ValidationRule("name", RuleKind.MAX_LENGTH, 100, "Name cannot exceed 100 characters"),
    )


def _name_field() -> FieldSpec:
    return FieldSpec("name", "Game Name", "name")


def _category_field() -> FieldSpec:
    return FieldSpec("category", "Category", "category")


WANT_TO_PLAY_SCHEMA = CollectionSchema(
    key=CollectionKey.WANT_TO_PLAY,
    title="Want to Play",
    singular="game to play",
    fields=(
        _name_field(),
        _category_field(),
        FieldSpec("subcategory", "Subcategory", "subcategory"),
        FieldSpec("release_date", "Release Date", "releaseDate", InputKind.DATE),
        FieldSpec("interest_level", "Interest", "interestLevel", InputKind.SELECT, INTEREST_LEVELS, "Medium"),
        FieldSpec("platforms", "Platforms", "platforms"),
        FieldSpec("status", "Status", "status", InputKind.SELECT, RELEASE_STATUSES, "Already Released"),
        FieldSpec("estimated_hours", "Estimated Time (h)", "estimatedHours", InputKind.NUMBER, default=None),
        FieldSpec("notes", "Notes", "notes", InputKind.TEXTAREA),
    ),
    columns=("name", "category", "release_date", "interest_level", "platforms", "status"),
    export_columns=(
        "name", "category", "subcategory", "release_date", "interest_level",
        "platforms", "status", "estimated_hours", "notes",
    ),
    rules=_name_rules() + (
        ValidationRule("interest_level", RuleKind.REQUIRED, message="Select the interest level"),
        ValidationRule("estimated_hours", RuleKind.NUMERIC, message="Estimated time must be a valid number"),
    ),
    export_filename="games_to_play.csv",
    empty_message="No games on your list yet. Add the first one!",
)

FINISHED_SCHEMA = CollectionSchema(
    key=CollectionKey.FINISHED,
    title="Finished",
    singular="finished game",
    fields=(
        _name_field(),
        _category_field(),
        FieldSpec("score", "Score", "score", InputKind.RATING, default=0),
        FieldSpec("date_finished", "Date Finished", "dateFinished", InputKind.DATE),
        FieldSpec("platform", "Platform", "platform"),
        FieldSpec("hours_spent", "Time Spent (h)", "hoursSpent", InputKind.NUMBER, default=None),
        FieldSpec("review", "Review", "review", InputKind.TEXTAREA),
    ),
    columns=("name", "category", "score", "platform", "hours_spent"),
    export_columns=("name", "category", "score", "date_finished", "platform", "hours_spent", "review"),
    rules=_name_rules() + (
        ValidationRule("score", RuleKind.REQUIRED, message="Select a score from 1 to 5 stars"),
        ValidationRule("score", RuleKind.PATTERN, r"^[0-5]$", "Score must be between 0 and 5"),
        ValidationRule("hours_spent", RuleKind.NUMERIC, message="Time spent must be a valid number"),
    ),
    export_filename="games_finished.csv",
    empty_message="No finished games yet.",
)

ABANDONED_SCHEMA = CollectionSchema(
    key=CollectionKey.ABANDONED,
    title="Abandoned",
    singular="abandoned game",
    fields=(
        _name_field(),
        _category_field(),
        FieldSpec("reason", "Reason", "reason", InputKind.SELECT, ABANDON_REASONS, "Boring"),
        FieldSpec("hours_played", "Gameplay Time (h)", "hoursPlayed", InputKind.NUMBER, default=None),
        FieldSpec("notes", "Notes", "notes", InputKind.TEXTAREA),
    ),
    columns=("name", "category", "reason", "hours_played", "notes"),
    export_columns=("name", "category", "reason", "hours_played", "notes"),
    rules=_name_rules() + (
        ValidationRule("reason", RuleKind.REQUIRED, message="Select a reason for giving up"),
        ValidationRule("hours_played", RuleKind.NUMERIC, message="Gameplay time must be a valid number"),
    ),
    export_filename="games_abandoned.csv",
    empty_message="No abandoned games. Keep it up!",
)

SCHEMAS: Dict[CollectionKey, CollectionSchema] = {
    CollectionKey.WANT_TO_PLAY: WANT_TO_PLAY_SCHEMA,
    CollectionKey.FINISHED: FINISHED_SCHEMA,
    CollectionKey.ABANDONED: ABANDONED_SCHEMA,
}


def to_collection_key(key: Union[CollectionKey, str]) -> CollectionKey:
    """Accept a `CollectionKey` or its string value (e.g. "wantToPlay")."""
    if isinstance(key, CollectionKey):
        return key
    try:
        return CollectionKey(key)
    except ValueError:
        raise KeyError(f"Unknown collection '{key}'") from None


def get_schema(key: Union[CollectionKey, str]) -> CollectionSchema:
    return SCHEMAS[to_collection_key(key)]

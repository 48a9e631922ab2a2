"""
Framework-agnostic form validation for the Game Tracker UI.

Rules are declared per collection in `gametracker.schema` as ordered
`ValidationRule` descriptors. This module evaluates them against raw form
values and keeps a per-form table of field error markings that any UI can
read to show messages next to the offending inputs.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
import logging
import math
import re

from ..schema import RuleKind, ValidationRule

logger = logging.getLogger(__name__)

RuleSet = Union[Mapping[str, Iterable[ValidationRule]], Iterable[ValidationRule]]

DEFAULT_MESSAGES = {
    RuleKind.REQUIRED: "This field is required",
    RuleKind.MIN_LENGTH: "Minimum of {parameter} characters",
    RuleKind.MAX_LENGTH: "Maximum of {parameter} characters",
    RuleKind.PATTERN: "Invalid format",
    RuleKind.NUMERIC: "Must be a valid number",
}


class ValidationError:
    """Represents a validation error with context."""

    def __init__(self, field: str, message: str, severity: str = "error", context: Optional[Dict] = None):
        """Initialize a validation error.

        Args:
            field: The field that failed validation
            message: Error message
            severity: Error severity (error, warning, info)
            context: Additional context information
        """
        self.field = field
        self.message = message
        self.severity = severity
        self.context = context or {}

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"

    def to_dict(self) -> Dict:
        """Convert to dictionary representation."""
        return {
            'field': self.field,
            'message': self.message,
            'severity': self.severity,
            'context': self.context
        }


class ValidationResult:
    """Represents the result of a validation operation."""

    def __init__(self, is_valid: bool = True, errors: Optional[List[ValidationError]] = None):
        self.is_valid = is_valid
        self.errors = errors or []

    def __bool__(self) -> bool:
        return self.is_valid

    def add_error(self, error: ValidationError) -> None:
        """Add an error to the result."""
        self.errors.append(error)
        self.is_valid = False

    def messages(self) -> Dict[str, str]:
        """Map of field -> first error message."""
        out: Dict[str, str] = {}
        for error in self.errors:
            out.setdefault(error.field, error.message)
        return out

    def to_dict(self) -> Dict:
        """Convert to dictionary representation."""
        return {
            'is_valid': self.is_valid,
            'errors': [error.to_dict() for error in self.errors],
            'error_count': len(self.errors),
        }


def _normalise_rules(rules: RuleSet) -> Dict[str, List[ValidationRule]]:
    if isinstance(rules, Mapping):
        return {str(k): list(v) for k, v in rules.items()}
    grouped: Dict[str, List[ValidationRule]] = {}
    for rule in rules:
        grouped.setdefault(rule.field, []).append(rule)
    return grouped


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else ""
    return str(value).strip()


def _is_empty(value: Any) -> bool:
    # A radio group with no selection arrives as None or 0
    if value is None:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    return _as_text(value) == ""


def _is_non_negative_number(text: str) -> bool:
    try:
        number = float(text)
    except ValueError:
        return False
    return math.isfinite(number) and number >= 0


class ValidationManager:
    """
    Framework-agnostic form validation.

    Evaluates ordered rule lists per field, short-circuiting on the first
    failing rule of each field, and remembers the resulting error markings
    per form until the next validation of that form.
    """

    def __init__(self):
        self._field_errors: Dict[str, Dict[str, str]] = {}

    def check_rule(self, rule: ValidationRule, value: Any) -> Optional[str]:
        """Evaluate a single rule.

        Returns:
            None when the rule passes, otherwise the error message
        """
        text = _as_text(value)
        failed = False

        if rule.kind == RuleKind.REQUIRED:
            failed = _is_empty(value)
        elif not text:
            # Non-required rules only apply to non-empty values
            failed = False
        elif rule.kind == RuleKind.MIN_LENGTH:
            failed = len(text) < int(rule.parameter)
        elif rule.kind == RuleKind.MAX_LENGTH:
            failed = len(text) > int(rule.parameter)
        elif rule.kind == RuleKind.PATTERN:
            pattern = rule.parameter if hasattr(rule.parameter, "search") else re.compile(str(rule.parameter))
            failed = pattern.search(text) is None
        elif rule.kind == RuleKind.NUMERIC:
            failed = not _is_non_negative_number(text)

        if not failed:
            return None
        if rule.message:
            return rule.message
        return DEFAULT_MESSAGES[rule.kind].format(parameter=rule.parameter)

    def validate_form(self, form_id: str, values: Mapping[str, Any], rules: RuleSet) -> ValidationResult:
        """Validate a whole form.

        Args:
            form_id: Identifier of the form whose markings are replaced
            values: Raw field values keyed by field name
            rules: Mapping field -> ordered rules, or a flat rule list

        Returns:
            ValidationResult holding at most one error per field
        """
        self.clear_errors(form_id)
        result = ValidationResult()

        for field, field_rules in _normalise_rules(rules).items():
            value = values.get(field)
            for rule in field_rules:
                message = self.check_rule(rule, value)
                if message is not None:
                    self._mark(form_id, field, message)
                    result.add_error(ValidationError(field, message, context={'rule': rule.kind.value}))
                    break

        if not result.is_valid:
            logger.debug(f"Form '{form_id}' failed validation: {result.messages()}")
        return result

    def validate(self, form_id: str, rules: RuleSet, values: Mapping[str, Any]) -> bool:
        """Boolean shortcut for `validate_form`."""
        return self.validate_form(form_id, values, rules).is_valid

    def validate_field(self, form_id: str, field: str, value: Any, rules: Iterable[ValidationRule]) -> Optional[str]:
        """Blur-time validation of one field.

        Clears the field's previous marking and validates only non-empty
        values, so leaving a field blank never shows an error before submit.
        """
        self._field_errors.get(form_id, {}).pop(field, None)
        if _is_empty(value):
            return None
        for rule in rules:
            message = self.check_rule(rule, value)
            if message is not None:
                self._mark(form_id, field, message)
                return message
        return None

    def field_errors(self, form_id: str) -> Dict[str, str]:
        """Current error markings of a form (field -> message)."""
        return dict(self._field_errors.get(form_id, {}))

    def field_error(self, form_id: str, field: str) -> Optional[str]:
        return self._field_errors.get(form_id, {}).get(field)

    def clear_errors(self, form_id: str) -> None:
        self._field_errors.pop(form_id, None)

    def _mark(self, form_id: str, field: str, message: str) -> None:
        self._field_errors.setdefault(form_id, {})[field] = message

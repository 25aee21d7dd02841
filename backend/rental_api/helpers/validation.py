"""
Request field mapping and validation helpers.

A rule set maps field names to "kind" or "kind|required", kind being one of
number, boolean, date, string or sorter:

    rules = {"user_id": "number|required", "payment": "boolean"}
    data = request_mapping(request_body, rules)

Coercion goes through pydantic TypeAdapters in lax mode, so "12", "true",
"0" and "2026-10-20" arrive as 12, True, False and date(2026, 10, 20).
A required field must be present and coercible; falsy values such as
False or 0 are accepted. Optional fields that are missing or fail coercion
are left out of the result.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from rental_api.core.exceptions import ValidationError

_MISSING = object()

# INTEGER column range
MIN_NUMBER = -(2**31)
MAX_NUMBER = 2**31 - 1

_int_adapter = TypeAdapter(int)
_bool_adapter = TypeAdapter(bool)
_date_adapter = TypeAdapter(date)


@dataclass(frozen=True)
class Rule:
    kind: str
    required: bool = False

    @classmethod
    def parse(cls, rule_spec: str) -> "Rule":
        kind, *flags = rule_spec.split("|")
        if kind not in _COERCERS:
            raise ValueError(f"Unknown rule kind: {kind}")
        return cls(kind=kind, required="required" in flags)


@dataclass(frozen=True)
class ValidatorResult:
    status: bool
    message: str
    value: Optional[date] = None


def _coerce_number(value: Any) -> Any:
    # bool is an int subclass; "true" is not a number
    if isinstance(value, bool):
        return _MISSING
    if isinstance(value, str):
        value = value.strip()
        try:
            as_float = float(value)
        except ValueError:
            return _MISSING
        if not as_float.is_integer():
            return _MISSING
        number = int(as_float)
    else:
        try:
            number = _int_adapter.validate_python(value)
        except PydanticValidationError:
            return _MISSING
    if not MIN_NUMBER <= number <= MAX_NUMBER:
        return _MISSING
    return number


def _coerce_boolean(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
    try:
        return _bool_adapter.validate_python(value)
    except PydanticValidationError:
        return _MISSING


def _coerce_date(value: Any) -> Any:
    parsed = parse_date(value)
    return _MISSING if parsed is None else parsed


def _coerce_string(value: Any) -> Any:
    if not isinstance(value, str) or not value.strip():
        return _MISSING
    return value.strip()


def _coerce_sorter(value: Any) -> Any:
    if not isinstance(value, str) or not value:
        return _MISSING
    return value


_COERCERS: dict[str, Callable[[Any], Any]] = {
    "number": _coerce_number,
    "boolean": _coerce_boolean,
    "date": _coerce_date,
    "string": _coerce_string,
    "sorter": _coerce_sorter,
}


def request_mapping(data: Optional[Mapping[str, Any]], rules: Mapping[str, str]) -> dict[str, Any]:
    """
    Map raw input onto a rule set.

    Returns only recognized, successfully coerced fields, in rule order.
    Raises ValidationError("Your <field> must be <kind>") for the first
    required field that is missing or malformed.
    """
    data = data or {}
    mapped: dict[str, Any] = {}

    for field, rule_spec in rules.items():
        rule = Rule.parse(rule_spec)
        raw = data.get(field, _MISSING)
        value = _MISSING if raw is _MISSING or raw is None else _COERCERS[rule.kind](raw)

        if value is _MISSING:
            if rule.required:
                raise ValidationError(f"Your {field} must be {rule.kind}")
            continue
        mapped[field] = value

    return mapped


def to_positive_int(value: Any) -> Optional[int]:
    number = _coerce_number(value) if value is not None else _MISSING
    if number is _MISSING or number < 1:
        return None
    return number


def validate_id(value: Any) -> bool:
    """True if value is a positive integer-like number."""
    return to_positive_int(value) is not None


def parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return _date_adapter.validate_python(value.strip())
    except PydanticValidationError:
        return None


def validate_date(value: Any) -> ValidatorResult:
    parsed = parse_date(value)
    if parsed is None:
        return ValidatorResult(status=False, message="Date not valid")
    return ValidatorResult(status=True, message="Date valid", value=parsed)


def validate_date_window(start: Any, end: Any) -> dict[str, ValidatorResult]:
    return {"start": validate_date(start), "end": validate_date(end)}

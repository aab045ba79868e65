"""
Parameterized row validation.

One RowSchema per collection describes its fields; the same schema drives CSV
validation, type coercion, and the create/edit forms.
"""
import ipaddress
import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple


MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

FIELD_KINDS = ("str", "int", "float", "bool", "month", "ip", "choice", "date")

_TRUE_VALUES = {"true", "yes", "y", "1"}
_FALSE_VALUES = {"false", "no", "n", "0"}


class FieldError(ValueError):
    """A single field failed coercion or a range/choice check."""

    def __init__(self, field_name: str, message: str, value: Any = None):
        self.field_name = field_name
        self.value = value
        super().__init__(message)


@dataclass
class ValidationResult:
    """Outcome of validating one row."""
    valid: bool
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(True)

    @classmethod
    def fail(cls, error: str) -> "ValidationResult":
        return cls(False, error)


@dataclass
class FieldSpec:
    """
    Description of one record field.

    Args:
        name: Field name as it appears in CSV headers and API payloads
        kind: One of FIELD_KINDS
        required: Whether an empty value is an error
        choices: Allowed values for kind="choice"
        min_value / max_value: Inclusive numeric bounds
        pattern: Regular expression the string value must fully match
        default: Value used when an optional field is empty
        label: Human readable label for forms
    """
    name: str
    kind: str = "str"
    required: bool = True
    choices: Optional[Sequence[str]] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    pattern: Optional[str] = None
    default: Any = None
    label: Optional[str] = None

    def __post_init__(self):
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"Unknown field kind '{self.kind}' for {self.name}")
        if self.kind == "choice" and not self.choices:
            raise ValueError(f"Field {self.name} is a choice field without choices")

    @property
    def display_label(self) -> str:
        if self.label:
            return self.label
        # camelCase / snake_case -> Title Case
        spaced = re.sub(r'(?<=[a-z0-9])(?=[A-Z])', ' ', self.name).replace("_", " ")
        return spaced[:1].upper() + spaced[1:]

    def coerce(self, raw: Any) -> Any:
        """Convert a raw (usually string) value to this field's type."""
        if raw is None or (isinstance(raw, str) and raw.strip() == ""):
            if self.required:
                raise FieldError(self.name, f"Missing required field: {self.name}", raw)
            return self.default

        value = raw.strip() if isinstance(raw, str) else raw
        converter = getattr(self, f"_coerce_{self.kind}")
        result = converter(value)
        self._check_bounds(result)
        return result

    # -- converters ---------------------------------------------------------

    def _coerce_str(self, value: Any) -> str:
        text = str(value)
        if self.pattern and not re.fullmatch(self.pattern, text):
            raise FieldError(self.name, f"Invalid {self.name}: {text}", value)
        return text

    def _coerce_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise FieldError(self.name, f"Invalid {self.name}: {value}", value)
        if isinstance(value, int):
            return value
        try:
            return int(str(value))
        except ValueError:
            pass
        number = self._coerce_float(value)
        if not number.is_integer():
            raise FieldError(self.name, f"Invalid {self.name} (expected integer): {value}", value)
        return int(number)

    def _coerce_float(self, value: Any) -> float:
        try:
            number = float(str(value).replace("%", "")) if isinstance(value, str) else float(value)
        except (TypeError, ValueError):
            raise FieldError(self.name, f"Invalid {self.name} (expected number): {value}", value)
        if math.isnan(number) or math.isinf(number):
            raise FieldError(self.name, f"Invalid {self.name} (expected number): {value}", value)
        return number

    def _coerce_bool(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        lowered = str(value).lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise FieldError(self.name, f"Invalid {self.name} (expected true/false): {value}", value)

    def _coerce_month(self, value: Any) -> str:
        lowered = str(value).lower()
        for month in MONTHS:
            if month.lower() == lowered:
                return month
        raise FieldError(self.name, f"Invalid month: {value}", value)

    def _coerce_ip(self, value: Any) -> str:
        try:
            return str(ipaddress.ip_address(str(value)))
        except ValueError:
            raise FieldError(self.name, f"Invalid IP address format: {value}", value)

    def _coerce_choice(self, value: Any) -> str:
        lowered = str(value).lower()
        for choice in self.choices:
            if str(choice).lower() == lowered:
                return choice
        raise FieldError(
            self.name,
            f"Invalid {self.name}: {value} (expected one of: {', '.join(map(str, self.choices))})",
            value,
        )

    def _coerce_date(self, value: Any) -> str:
        if isinstance(value, datetime):
            return value.isoformat()
        text = str(value).replace("Z", "+00:00")
        try:
            return datetime.fromisoformat(text).isoformat()
        except ValueError:
            raise FieldError(self.name, f"Invalid {self.name} (expected ISO date): {value}", value)

    def _check_bounds(self, value: Any):
        if self.kind not in ("int", "float") or value is None:
            return
        if self.min_value is not None and value < self.min_value:
            raise FieldError(self.name, f"Invalid {self.name} (minimum {self.min_value}): {value}", value)
        if self.max_value is not None and value > self.max_value:
            raise FieldError(self.name, f"Invalid {self.name} (maximum {self.max_value}): {value}", value)


@dataclass
class RowSchema:
    """
    Ordered set of FieldSpecs plus an optional composite uniqueness key.
    """
    fields: List[FieldSpec]
    unique_together: Tuple[str, ...] = ()
    _by_name: Dict[str, FieldSpec] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        self._by_name = {f.name: f for f in self.fields}
        if len(self._by_name) != len(self.fields):
            raise ValueError("Duplicate field names in schema")
        unknown = [k for k in self.unique_together if k not in self._by_name]
        if unknown:
            raise ValueError(f"unique_together references unknown fields: {', '.join(unknown)}")

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    @property
    def required_fields(self) -> List[str]:
        return [f.name for f in self.fields if f.required]

    def field(self, name: str) -> FieldSpec:
        return self._by_name[name]

    def coerce(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """
        Return a typed copy of row.

        Columns the schema does not know are passed through unchanged.
        Empty optional fields without a default are omitted.

        Raises:
            FieldError: on the first field that fails
        """
        result = {k: v for k, v in row.items() if k not in self._by_name}
        for spec in self.fields:
            value = spec.coerce(row.get(spec.name))
            if value is not None:
                result[spec.name] = value
        return result

    def validate(self, row: Dict[str, Any]) -> ValidationResult:
        try:
            self.coerce(row)
        except FieldError as e:
            return ValidationResult.fail(str(e))
        return ValidationResult.ok()

    def key_for(self, row: Dict[str, Any]) -> Optional[tuple]:
        """Composite key used for duplicate detection, or None if not configured."""
        if not self.unique_together:
            return None
        return tuple(str(row.get(name, "")).lower() for name in self.unique_together)

    def empty_record(self) -> Dict[str, Any]:
        """Initial form values."""
        return {f.name: f.default for f in self.fields}

import pytest

from core.validation import FieldError, FieldSpec, RowSchema, ValidationResult


def test_int_field_coerces_numeric_strings():
    spec = FieldSpec("count", "int")
    assert spec.coerce("42") == 42
    assert spec.coerce(" 7 ") == 7
    assert spec.coerce("3.0") == 3


def test_int_field_rejects_fractions():
    with pytest.raises(FieldError, match="expected integer"):
        FieldSpec("count", "int").coerce("3.5")


def test_required_field_missing():
    with pytest.raises(FieldError) as exc:
        FieldSpec("location").coerce("   ")
    assert str(exc.value) == "Missing required field: location"
    assert exc.value.field_name == "location"


def test_optional_field_uses_default():
    assert FieldSpec("status", required=False, default="unresolved").coerce("") == "unresolved"
    assert FieldSpec("notes", required=False).coerce(None) is None


def test_ip_field():
    spec = FieldSpec("value", "ip")
    assert spec.coerce("10.0.0.1") == "10.0.0.1"
    assert spec.coerce("2001:db8::1") == "2001:db8::1"
    with pytest.raises(FieldError, match="Invalid IP address format: 999.1.1.1"):
        spec.coerce("999.1.1.1")


def test_month_field_is_case_insensitive():
    assert FieldSpec("month", "month").coerce("march") == "March"
    with pytest.raises(FieldError, match="Invalid month"):
        FieldSpec("month", "month").coerce("Marchember")


def test_choice_field_returns_canonical_value():
    spec = FieldSpec("severity", "choice", choices=["low", "medium", "high"])
    assert spec.coerce("HIGH") == "high"
    with pytest.raises(FieldError, match="expected one of: low, medium, high"):
        spec.coerce("extreme")


def test_float_field_accepts_percent_and_checks_bounds():
    spec = FieldSpec("score", "float", min_value=0, max_value=100)
    assert spec.coerce("85%") == 85.0
    with pytest.raises(FieldError, match="maximum"):
        spec.coerce("150")
    with pytest.raises(FieldError, match="minimum"):
        spec.coerce("-1")
    with pytest.raises(FieldError, match="expected number"):
        spec.coerce("nan")


def test_bool_field():
    spec = FieldSpec("active", "bool")
    assert spec.coerce("yes") is True
    assert spec.coerce("False") is False
    with pytest.raises(FieldError):
        spec.coerce("maybe")


def test_date_field_normalizes_iso():
    spec = FieldSpec("time", "date")
    assert spec.coerce("2024-05-01") == "2024-05-01T00:00:00"
    assert spec.coerce("2024-05-01T09:30:00Z") == "2024-05-01T09:30:00+00:00"
    with pytest.raises(FieldError, match="expected ISO date"):
        spec.coerce("yesterday")


def test_pattern_must_match_whole_value():
    spec = FieldSpec("code", pattern=r"[A-Z]{3}")
    assert spec.coerce("ABC") == "ABC"
    with pytest.raises(FieldError):
        spec.coerce("ABCD")


def test_display_label():
    assert FieldSpec("affectedSystems").display_label == "Affected Systems"
    assert FieldSpec("bu_name").display_label == "Bu name"
    assert FieldSpec("value", label="IP Address").display_label == "IP Address"


def test_field_spec_rejects_bad_definitions():
    with pytest.raises(ValueError):
        FieldSpec("x", "decimal")
    with pytest.raises(ValueError):
        FieldSpec("x", "choice")


@pytest.fixture
def schema():
    return RowSchema([
        FieldSpec("month", "month"),
        FieldSpec("year", "int", min_value=2000, max_value=2100),
        FieldSpec("score", "float"),
        FieldSpec("notes", required=False),
    ], unique_together=("month", "year"))


def test_schema_required_fields(schema):
    assert schema.field_names == ["month", "year", "score", "notes"]
    assert schema.required_fields == ["month", "year", "score"]


def test_schema_coerce_keeps_unknown_columns_and_drops_empty_optionals(schema):
    row = schema.coerce({"month": "june", "year": "2024", "score": "71.5", "notes": "", "extra": "x"})
    assert row == {"month": "June", "year": 2024, "score": 71.5, "extra": "x"}


def test_schema_validate(schema):
    assert schema.validate({"month": "June", "year": "2024", "score": "1"})
    result = schema.validate({"month": "June", "year": "1999", "score": "1"})
    assert isinstance(result, ValidationResult)
    assert not result
    assert "year" in result.error


def test_schema_key_for_is_case_insensitive(schema):
    assert schema.key_for({"month": "June", "year": 2024}) == ("june", "2024")
    assert RowSchema([FieldSpec("a")]).key_for({"a": "x"}) is None


def test_schema_rejects_duplicate_and_unknown_names():
    with pytest.raises(ValueError):
        RowSchema([FieldSpec("a"), FieldSpec("a")])
    with pytest.raises(ValueError):
        RowSchema([FieldSpec("a")], unique_together=("b",))


def test_empty_record(schema):
    assert schema.empty_record() == {"month": None, "year": None, "score": None, "notes": None}

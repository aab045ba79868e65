import io

import pytest

from core.csv_ingest import (
    CSVIngestError,
    CSVParseError,
    EmptyFileError,
    IngestOptions,
    MissingHeadersError,
    ingest_csv,
    read_text,
)
from core.validation import FieldSpec, RowSchema, ValidationResult


@pytest.fixture
def options():
    schema = RowSchema([
        FieldSpec("value", "ip"),
        FieldSpec("location"),
        FieldSpec("description", required=False),
    ], unique_together=("value",))
    return IngestOptions(schema=schema)


def test_all_valid_rows(options):
    result = ingest_csv("value,location\n10.0.0.1,HQ\n10.0.0.2,DC\n", options)
    assert result.valid_count == 2
    assert result.errors == []
    assert result.rows[0] == {"value": "10.0.0.1", "location": "HQ"}
    assert result.headers == ["value", "location"]
    assert result.summary() == "Successfully parsed 2 valid entries"


def test_invalid_rows_are_excluded_with_line_numbers(options):
    text = "value,location\n10.0.0.1,HQ\nnot-an-ip,HQ\n10.0.0.3,\n10.0.0.4,Branch\n"
    result = ingest_csv(text, options)

    assert [r["value"] for r in result.rows] == ["10.0.0.1", "10.0.0.4"]
    assert [e.line for e in result.errors] == [3, 4]
    assert str(result.errors[0]) == "Line 3: Invalid IP address format: not-an-ip"
    assert result.errors[1].message == "Missing required field: location"
    assert result.total_rows == 4
    assert result.summary() == "Successfully parsed 2 valid entries, 2 rows skipped"


def test_blank_lines_are_skipped_and_do_not_shift_line_numbers(options):
    text = "value,location\n\n10.0.0.1,HQ\n  \nbad,HQ\n"
    result = ingest_csv(text, options)
    assert result.valid_count == 1
    assert result.errors[0].line == 5


def test_wrong_number_of_fields(options):
    result = ingest_csv("value,location\n10.0.0.1\n10.0.0.2,HQ,extra\n", options)
    assert result.valid_count == 0
    assert result.errors[0].message == "incorrect number of fields (expected 2, got 1)"
    assert result.errors[1].message == "incorrect number of fields (expected 2, got 3)"


def test_quoted_fields_keep_commas(options):
    result = ingest_csv('value,location\n10.0.0.1,"Main, HQ"\n', options)
    assert result.rows[0]["location"] == "Main, HQ"


def test_duplicate_keys_are_rejected(options):
    result = ingest_csv("value,location\n10.0.0.1,HQ\n10.0.0.1,DC\n", options)
    assert result.valid_count == 1
    assert result.errors[0].line == 3
    assert "Duplicate entry" in result.errors[0].message


def test_missing_headers(options):
    with pytest.raises(MissingHeadersError) as exc:
        ingest_csv("value,site\n10.0.0.1,HQ\n", options)
    assert exc.value.missing == ["location"]
    assert "location" in str(exc.value)


@pytest.mark.parametrize("text", ["", "\n\n", " , \n"])
def test_empty_file(options, text):
    with pytest.raises(EmptyFileError):
        ingest_csv(text, options)


def test_header_only_file_yields_no_rows(options):
    result = ingest_csv("value,location\n", options)
    assert result.rows == []
    assert result.errors == []


def test_bytes_with_bom_and_file_like(options):
    data = b"\xef\xbb\xbfvalue,location\r\n10.0.0.1,HQ\r\n"
    assert ingest_csv(data, options).headers == ["value", "location"]
    assert ingest_csv(io.BytesIO(data), options).valid_count == 1


def test_windows_1252_bytes_are_decoded():
    data = "name,site\nCafé Résumé,Zürich\n".encode("cp1252")
    result = ingest_csv(data)
    assert result.rows == [{"name": "Café Résumé", "site": "Zürich"}]


def test_undecodable_bytes_are_replaced():
    assert read_text(b"name\nbad\x81byte\n") == "name\nbad\ufffdbyte\n"


def test_tokenizer_errors_become_ingest_errors():
    text = "name\n" + "x" * 200_000 + "\n"
    with pytest.raises(CSVParseError) as exc:
        ingest_csv(text)
    assert isinstance(exc.value, CSVIngestError)
    assert str(exc.value).startswith("Failed to parse CSV file")
    assert exc.value.line >= 1


def test_read_text_rejects_unknown_sources():
    with pytest.raises(TypeError):
        read_text(42)


def test_on_error_receives_each_rejection(options):
    messages = []
    options.on_error = messages.append
    ingest_csv("value,location\nbad,HQ\n10.0.0.1,HQ\n", options)
    assert messages == ["Line 2: Invalid IP address format: bad"]


def test_custom_validator_and_transform(options):
    options.transform_row = lambda row: {**row, "value": row["value"].replace("ip:", "")}
    options.validate_row = lambda row: (
        ValidationResult.fail("blocked location") if row["location"] == "Moon"
        else ValidationResult.ok()
    )
    result = ingest_csv("value,location\nip:10.0.0.1,HQ\nip:10.0.0.2,Moon\n", options)
    assert [r["value"] for r in result.rows] == ["10.0.0.1"]
    assert result.errors[0].message == "blocked location"


def test_without_schema_rows_stay_strings():
    result = ingest_csv("a;b\n1;2\n", IngestOptions(required_fields=["a"], delimiter=";"))
    assert result.rows == [{"a": "1", "b": "2"}]


def test_frames(options):
    result = ingest_csv("location,value\nHQ,10.0.0.1\nHQ,bad\n", options)
    assert list(result.to_frame().columns) == ["location", "value"]
    errors = result.errors_frame()
    assert list(errors.columns) == ["line", "error"]
    assert errors.iloc[0]["line"] == 3

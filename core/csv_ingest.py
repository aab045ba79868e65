"""
CSV ingestion for bulk imports.

Parses a delimited text file into ordered row dictionaries, checks the header
row against the required fields, and runs every data row through an optional
transform, the collection's RowSchema and an optional custom validator.
Rows that fail are dropped and reported; the rest keep their file order.
"""
import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Union

import pandas as pd

from core.validation import FieldError, RowSchema, ValidationResult

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
RowValidator = Callable[[Row], ValidationResult]


class CSVIngestError(Exception):
    """The file as a whole cannot be ingested."""


class EmptyFileError(CSVIngestError):
    def __init__(self):
        super().__init__("CSV file is empty")


class MissingHeadersError(CSVIngestError):
    def __init__(self, missing: Sequence[str]):
        self.missing = list(missing)
        super().__init__(f"CSV is missing required fields: {', '.join(self.missing)}")


class CSVParseError(CSVIngestError):
    def __init__(self, line: int, reason: str):
        self.line = line
        super().__init__(f"Failed to parse CSV file (line {line}): {reason}")


@dataclass
class RowError:
    """A data row that was dropped."""
    line: int
    message: str
    raw: Optional[Row] = None

    def __str__(self) -> str:
        return f"Line {self.line}: {self.message}"


@dataclass
class IngestOptions:
    """
    Per-collection ingest configuration.

    Args:
        required_fields: Headers that must be present (defaults to the schema's)
        schema: RowSchema used to coerce and validate each row
        validate_row: Extra check run after coercion
        transform_row: Applied to the raw row before validation
        on_error: Called with "Line N: message" for every dropped row
        delimiter: Field delimiter
    """
    required_fields: Optional[Sequence[str]] = None
    schema: Optional[RowSchema] = None
    validate_row: Optional[RowValidator] = None
    transform_row: Optional[Callable[[Row], Row]] = None
    on_error: Optional[Callable[[str], None]] = None
    delimiter: str = ","

    def resolved_required_fields(self) -> List[str]:
        if self.required_fields is not None:
            return list(self.required_fields)
        if self.schema is not None:
            return self.schema.required_fields
        return []


@dataclass
class IngestResult:
    """Valid rows in file order plus the errors for the rows that were dropped."""
    rows: List[Row] = field(default_factory=list)
    errors: List[RowError] = field(default_factory=list)
    headers: List[str] = field(default_factory=list)
    total_rows: int = 0

    @property
    def valid_count(self) -> int:
        return len(self.rows)

    @property
    def invalid_count(self) -> int:
        return len(self.errors)

    def summary(self) -> str:
        text = f"Successfully parsed {self.valid_count} valid entries"
        if self.errors:
            text += f", {self.invalid_count} rows skipped"
        return text

    def to_frame(self) -> pd.DataFrame:
        """Valid rows as a DataFrame, header order first."""
        if not self.rows:
            return pd.DataFrame(columns=self.headers)
        df = pd.DataFrame(self.rows)
        ordered = [h for h in self.headers if h in df.columns]
        extra = [c for c in df.columns if c not in ordered]
        return df[ordered + extra]

    def errors_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [{"line": e.line, "error": e.message} for e in self.errors],
            columns=["line", "error"],
        )


def read_text(source: Union[str, bytes, Any]) -> str:
    """
    Read CSV text from a string, bytes, or a file-like object.

    A UTF-8 byte order mark is dropped. Bytes that are not valid UTF-8 are
    read as Windows-1252, the encoding Excel uses for CSV exports.
    """
    if hasattr(source, "read"):
        if hasattr(source, "seek"):
            source.seek(0)
        source = source.read()

    if isinstance(source, (bytes, bytearray)):
        try:
            text = bytes(source).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            logger.warning("CSV is not valid UTF-8 (%s), decoding as cp1252", e.reason)
            text = bytes(source).decode("cp1252", errors="replace")
    elif isinstance(source, str):
        text = source
    else:
        raise TypeError(f"Unsupported CSV source: {type(source).__name__}")

    return text.lstrip("\ufeff")


def _is_blank(record: List[str]) -> bool:
    return not record or all(not cell.strip() for cell in record)


def _records(reader) -> Iterator[List[str]]:
    try:
        yield from reader
    except csv.Error as e:
        raise CSVParseError(reader.line_num, str(e)) from e


def ingest_csv(source: Union[str, bytes, Any], options: IngestOptions = None) -> IngestResult:
    """
    Parse and validate a CSV file.

    Args:
        source: CSV text, bytes, or a file-like object
        options: Ingest configuration

    Returns:
        IngestResult with the valid rows and per-row errors

    Raises:
        EmptyFileError: if the file has no header row
        MissingHeadersError: if required headers are absent
        CSVParseError: if the text cannot be tokenized
    """
    options = options or IngestOptions()
    text = read_text(source)
    reader = csv.reader(io.StringIO(text), delimiter=options.delimiter)
    records = _records(reader)

    headers: Optional[List[str]] = None
    for record in records:
        if not _is_blank(record):
            headers = [h.strip() for h in record]
            break

    if headers is None:
        raise EmptyFileError()

    missing = [f for f in options.resolved_required_fields() if f not in headers]
    if missing:
        raise MissingHeadersError(missing)

    result = IngestResult(headers=headers)
    seen_keys = set()

    def reject(line: int, message: str, raw: Row = None):
        error = RowError(line=line, message=message, raw=raw)
        result.errors.append(error)
        logger.warning("CSV %s", error)
        if options.on_error:
            options.on_error(str(error))

    for record in records:
        if _is_blank(record):
            continue

        line = reader.line_num
        result.total_rows += 1
        values = [v.strip() for v in record]

        if len(values) != len(headers):
            reject(line, f"incorrect number of fields (expected {len(headers)}, got {len(values)})")
            continue

        row: Row = dict(zip(headers, values))

        try:
            if options.transform_row:
                row = options.transform_row(row)
            if options.schema:
                row = options.schema.coerce(row)
        except (FieldError, ValueError, TypeError) as e:
            reject(line, str(e), dict(zip(headers, values)))
            continue

        if options.validate_row:
            validation = options.validate_row(row)
            if not validation.valid:
                reject(line, validation.error or "Invalid row", row)
                continue

        if options.schema:
            key = options.schema.key_for(row)
            if key is not None:
                if key in seen_keys:
                    names = ", ".join(options.schema.unique_together)
                    reject(line, f"Duplicate entry for ({names}): {', '.join(key)}", row)
                    continue
                seen_keys.add(key)

        result.rows.append(row)

    logger.info("Parsed CSV: %d valid, %d rejected", result.valid_count, result.invalid_count)
    return result

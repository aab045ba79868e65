"""
Core modules for the SOC Report Admin Console.
"""
from .validation import FieldSpec, RowSchema, ValidationResult, FieldError, MONTHS
from .csv_ingest import (
    ingest_csv, IngestOptions, IngestResult, RowError,
    CSVIngestError, CSVParseError, EmptyFileError, MissingHeadersError,
)
from .table_state import TableState, SortConfig, FilterConfig, row_id
from .bulk_submit import submit_rows, delete_rows, BulkResult, NothingToSubmitError
from .api_client import APIClient, APIError
from .response_cache import ResponseCache
from .resources import Collection, CollectionDefinition
from .storage import FirebaseStorage, StorageError, StorageConfigError
from .uploader import upload_file, UploadResult, UploadError, validate_file, format_file_size

__all__ = [
    'FieldSpec', 'RowSchema', 'ValidationResult', 'FieldError', 'MONTHS',
    'ingest_csv', 'IngestOptions', 'IngestResult', 'RowError',
    'CSVIngestError', 'CSVParseError', 'EmptyFileError', 'MissingHeadersError',
    'TableState', 'SortConfig', 'FilterConfig', 'row_id',
    'submit_rows', 'delete_rows', 'BulkResult', 'NothingToSubmitError',
    'APIClient', 'APIError',
    'ResponseCache',
    'Collection', 'CollectionDefinition',
    'FirebaseStorage', 'StorageError', 'StorageConfigError',
    'upload_file', 'UploadResult', 'UploadError', 'validate_file', 'format_file_size',
]

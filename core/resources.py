"""
Per-collection REST resources.

A CollectionDefinition describes one report collection (endpoint, schema,
table defaults); a Collection binds it to an APIClient and a ResponseCache
and exposes list/get/create/update/delete.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.api_client import APIClient
from core.response_cache import ResponseCache
from core.table_state import SortConfig, row_id
from core.validation import RowSchema

logger = logging.getLogger(__name__)


@dataclass
class CollectionDefinition:
    """
    Static description of a managed collection.

    Args:
        key: Unique identifier, also used for cache and session keys
        label: Page title
        group: Sidebar group the collection belongs to
        endpoint: API path relative to the base URL
        noun: Plural noun used in notifications ("IP entries")
        schema: Field definitions for forms and CSV import
        default_sort: Initial sort for tables
        page_size: Rows per table page (None uses the configured default)
        attachments: Field name -> storage folder for fields holding an uploaded file URL
    """
    key: str
    label: str
    group: str
    endpoint: str
    noun: str
    schema: RowSchema
    default_sort: Optional[SortConfig] = None
    page_size: Optional[int] = None
    attachments: Dict[str, str] = field(default_factory=dict)

    def page_size_or(self, default: int) -> int:
        return self.page_size or default

    @property
    def csv_template(self) -> str:
        """Header line for a CSV import template."""
        return ",".join(self.schema.field_names) + "\n"


class Collection:
    """REST operations for one collection with cached reads."""

    def __init__(self, client: APIClient, definition: CollectionDefinition,
                 cache: ResponseCache = None):
        self.client = client
        self.definition = definition
        self.cache = cache if cache is not None else ResponseCache()

    @property
    def key(self) -> str:
        return self.definition.key

    def _detail_path(self, record_id: str) -> str:
        return f"{self.definition.endpoint}/{record_id}"

    def list(self, params: Dict[str, Any] = None, refresh: bool = False) -> List[Dict[str, Any]]:
        cache_key = (self.key, "list", tuple(sorted((params or {}).items())))
        if refresh:
            self.cache.invalidate(self.key, "list")

        def load():
            data = self.client.get(self.definition.endpoint, params=params)
            if data is None:
                return []
            if isinstance(data, dict):
                # some endpoints answer with a single aggregate document
                return [data]
            return list(data)

        return self.cache.get_or_load(cache_key, load)

    def get(self, record_id: str) -> Dict[str, Any]:
        return self.cache.get_or_load(
            (self.key, "detail", record_id),
            lambda: self.client.get(self._detail_path(record_id)),
        )

    def create(self, payload: Dict[str, Any]) -> Any:
        created = self.client.post(self.definition.endpoint, json=payload)
        self.cache.invalidate(self.key, "list")
        logger.info("Created %s record %s", self.key, row_id(created) if isinstance(created, dict) else "")
        return created

    def update(self, record_id: str, payload: Dict[str, Any]) -> Any:
        body = {k: v for k, v in payload.items() if k not in ("id", "_id")}
        updated = self.client.patch(self._detail_path(record_id), json=body)
        self.cache.invalidate(self.key, "list")
        self.cache.invalidate(self.key, "detail", record_id)
        logger.info("Updated %s record %s", self.key, record_id)
        return updated

    def delete(self, record_id: str) -> Any:
        result = self.client.delete(self._detail_path(record_id))
        self.cache.invalidate(self.key, "list")
        self.cache.invalidate(self.key, "detail", record_id)
        logger.info("Deleted %s record %s", self.key, record_id)
        return result

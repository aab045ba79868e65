"""
In-memory table state: sorting, filtering, pagination and row selection.

The state object is owned by the page that renders it (kept in
st.session_state per collection) and passed to the rendering helpers.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Set

Row = Dict[str, Any]

SORT_ASC = "asc"
SORT_DESC = "desc"

FILTER_KINDS = ("contains", "equals", "starts_with", "ends_with")


@dataclass(frozen=True)
class SortConfig:
    key: str
    direction: str = SORT_ASC

    def __post_init__(self):
        if self.direction not in (SORT_ASC, SORT_DESC):
            raise ValueError(f"Invalid sort direction: {self.direction}")


@dataclass(frozen=True)
class FilterConfig:
    key: str
    value: str
    kind: str = "contains"

    def __post_init__(self):
        if self.kind not in FILTER_KINDS:
            raise ValueError(f"Invalid filter kind: {self.kind}")

    def matches(self, row: Row) -> bool:
        value = str(row.get(self.key, "")).lower()
        needle = self.value.lower()
        if self.kind == "contains":
            return needle in value
        if self.kind == "equals":
            return value == needle
        if self.kind == "starts_with":
            return value.startswith(needle)
        return value.endswith(needle)


def row_id(row: Row) -> Optional[str]:
    """Record id, preferring 'id' over '_id'."""
    value = row.get("id")
    if value in (None, ""):
        value = row.get("_id")
    return None if value in (None, "") else str(value)


def _sort_key(value: Any):
    # None last, numbers before strings, strings case-insensitive
    if value is None or value == "":
        return (2, "")
    if isinstance(value, bool):
        return (1, str(value).lower())
    if isinstance(value, (int, float)):
        return (0, value)
    return (1, str(value).lower())


@dataclass
class TableState:
    """
    Sortable, filterable, paginated view over a list of rows.

    Pages are 1-based. Changing filters resets to the first page.
    """
    data: List[Row] = field(default_factory=list)
    page_size: int = 10
    current_page: int = 1
    sort: Optional[SortConfig] = None
    filters: List[FilterConfig] = field(default_factory=list)
    selected: Set[str] = field(default_factory=set)
    default_sort: Optional[SortConfig] = None
    default_filters: List[FilterConfig] = field(default_factory=list)
    default_page_size: Optional[int] = None
    # list passed to the last load(); data holds a copy
    source: Optional[List[Row]] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if self.page_size < 1:
            raise ValueError("page_size must be at least 1")
        if self.default_page_size is None:
            self.default_page_size = self.page_size
        if self.sort is None:
            self.sort = self.default_sort
        if not self.filters and self.default_filters:
            self.filters = list(self.default_filters)

    # -- data ---------------------------------------------------------------

    def load(self, rows: List[Row]):
        """Replace the data, go back to page 1 and drop the selection."""
        self.source = rows
        self.data = list(rows)
        self.current_page = 1
        self.clear_selection()

    def is_loaded_from(self, rows: List[Row]) -> bool:
        """True if rows is the very list the current data was loaded from."""
        return rows is self.source

    def reset(self):
        self.source = None
        self.data = []
        self.sort = self.default_sort
        self.filters = list(self.default_filters)
        self.page_size = self.default_page_size
        self.current_page = 1
        self.clear_selection()

    # -- sorting ------------------------------------------------------------

    def handle_sort(self, key: str):
        """Cycle key through ascending, descending and unsorted."""
        if self.sort is None or self.sort.key != key:
            self.sort = SortConfig(key, SORT_ASC)
        elif self.sort.direction == SORT_ASC:
            self.sort = SortConfig(key, SORT_DESC)
        else:
            self.sort = None

    # -- filtering ----------------------------------------------------------

    def add_filter(self, filter_config: FilterConfig):
        self.filters = [f for f in self.filters if f.key != filter_config.key] + [filter_config]
        self.current_page = 1

    def remove_filter(self, key: str):
        self.filters = [f for f in self.filters if f.key != key]
        self.current_page = 1

    def clear_filters(self):
        self.filters = []
        self.current_page = 1

    # -- computed -----------------------------------------------------------

    @property
    def processed_data(self) -> List[Row]:
        result = list(self.data)
        for f in self.filters:
            result = [row for row in result if f.matches(row)]

        if self.sort:
            key = self.sort.key
            result.sort(key=lambda row: _sort_key(row.get(key)),
                        reverse=self.sort.direction == SORT_DESC)
            if self.sort.direction == SORT_DESC:
                # keep empty values at the end in both directions
                blanks = [r for r in result if _sort_key(r.get(key))[0] == 2]
                result = [r for r in result if _sort_key(r.get(key))[0] != 2] + blanks
        return result

    @property
    def total_rows(self) -> int:
        return len(self.processed_data)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_rows / self.page_size)

    @property
    def current_page_data(self) -> List[Row]:
        return self.page(self.current_page)

    def page(self, number: int) -> List[Row]:
        start = (number - 1) * self.page_size
        return self.processed_data[start:start + self.page_size]

    def iter_pages(self) -> Iterator[List[Row]]:
        rows = self.processed_data
        for start in range(0, len(rows), self.page_size):
            yield rows[start:start + self.page_size]

    # -- pagination ---------------------------------------------------------

    def go_to_page(self, number: int):
        self.current_page = min(max(int(number), 1), max(self.total_pages, 1))

    def next_page(self):
        self.go_to_page(self.current_page + 1)

    def previous_page(self):
        self.go_to_page(self.current_page - 1)

    def set_page_size(self, size: int):
        if size < 1:
            raise ValueError("page_size must be at least 1")
        self.page_size = size
        self.current_page = 1

    # -- selection ----------------------------------------------------------

    def toggle_row_selection(self, rid: str):
        if rid in self.selected:
            self.selected.discard(rid)
        else:
            self.selected.add(rid)

    def select_all_rows(self):
        self.selected = {rid for rid in (row_id(r) for r in self.processed_data) if rid is not None}

    def clear_selection(self):
        self.selected = set()

    def selected_rows(self) -> List[Row]:
        return [r for r in self.data if row_id(r) in self.selected]

"""
Reusable record table component over a TableState.

Renders the current page with severity highlighting, and wires search, sort,
pagination and row selection back into the state object.
"""
import json
from typing import Any, Callable, Dict, List, Optional

import pandas as pd
import streamlit as st

from config.theme import SEVERITY_COLUMNS, color_row_by_severity
from core.table_state import FilterConfig, TableState, row_id

INTERNAL_COLUMNS = ["_id", "id", "__v", "createdAt", "updatedAt"]


def _display_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return value


def to_display_frame(rows: List[Dict[str, Any]], columns: List[str] = None) -> pd.DataFrame:
    """
    Build a display DataFrame from row dictionaries.

    Nested values are rendered as JSON and missing values as empty strings.
    """
    if not rows:
        return pd.DataFrame(columns=columns or [])

    df = pd.DataFrame([{k: _display_value(v) for k, v in row.items()} for row in rows])
    if columns:
        ordered = [c for c in columns if c in df.columns]
        df = df[ordered + [c for c in df.columns if c not in ordered]]
    return df


class RecordTable:
    """
    Table component with search, sort, pagination and selection.
    """

    def __init__(self, state: TableState, key: str, columns: List[str] = None):
        """
        Initialize the record table.

        Args:
            state: TableState holding data, sort, filters and selection
            key: Unique widget key prefix
            columns: Preferred column order
        """
        self.state = state
        self.key = key
        self.columns = list(columns or [])
        self.hidden_columns: List[str] = list(INTERNAL_COLUMNS)
        self.column_config: Dict[str, Any] = {}

    def configure_column(self, column: str, config: Any):
        """Add custom Streamlit column configuration."""
        self.column_config[column] = config
        return self

    def link_columns(self, columns: List[str]):
        """Render URL-valued columns as links."""
        for column in columns:
            self.configure_column(column, st.column_config.LinkColumn(column, display_text="Open"))
        return self

    @property
    def visible_columns(self) -> List[str]:
        known = self.columns or sorted({k for row in self.state.data for k in row})
        return [c for c in known if c not in self.hidden_columns]

    def _get_row_styler(self, df: pd.DataFrame) -> Optional[Callable]:
        column = next((c for c in SEVERITY_COLUMNS if c in df.columns), None)
        if column is None:
            return None

        def style_row(row):
            color = color_row_by_severity(row.get(column, ""))
            return [f'background-color: {color}' if color else ''] * len(row)

        return style_row

    def render_controls(self):
        """Search and sort controls."""
        columns = self.visible_columns
        if not columns:
            return

        col1, col2, col3, col4 = st.columns([2, 1, 1, 1])
        with col1:
            term = st.text_input("Search", key=f"{self.key}_search", placeholder="Filter rows...")
        with col2:
            search_column = st.selectbox("In column", columns, key=f"{self.key}_search_col")
        with col3:
            sort_column = st.selectbox("Sort by", columns, key=f"{self.key}_sort_col")
        with col4:
            st.write("")
            if st.button("⇅ Sort", key=f"{self.key}_sort_btn", width="stretch"):
                self.state.handle_sort(sort_column)

        active = next((f for f in self.state.filters if f.key == search_column), None)
        if term:
            if active is None or active.value != term:
                # a single free-text filter at a time
                self.state.clear_filters()
                self.state.add_filter(FilterConfig(search_column, term, "contains"))
        elif self.state.filters:
            self.state.clear_filters()

        if self.state.sort:
            arrow = "↑" if self.state.sort.direction == "asc" else "↓"
            st.caption(f"Sorted by {self.state.sort.key} {arrow}")

    def render(self, selectable: bool = False, height: int = None) -> List[str]:
        """
        Render the current page.

        Args:
            selectable: Enable multi-row selection
            height: Optional fixed height

        Returns:
            Ids of the selected rows across all pages
        """
        page_rows = self.state.current_page_data
        if not page_rows:
            st.info("No records to display.")
            return sorted(self.state.selected)

        df = to_display_frame(page_rows, self.visible_columns)
        df = df.drop(columns=[c for c in self.hidden_columns if c in df.columns])

        display_args = {
            "column_config": self.column_config,
            "hide_index": True,
            "width": "stretch",
        }
        if height:
            display_args["height"] = height

        styler = self._get_row_styler(df)
        data = df.style.apply(styler, axis=1) if styler else df

        if not selectable:
            st.dataframe(data, **display_args)
            return sorted(self.state.selected)

        event = st.dataframe(
            data,
            on_select="rerun",
            selection_mode="multi-row",
            key=f"{self.key}_grid_{self.state.current_page}",
            **display_args,
        )
        page_ids = {row_id(r) for r in page_rows} - {None}
        chosen = {row_id(page_rows[i]) for i in event.selection.rows if i < len(page_rows)} - {None}
        self.state.selected = (self.state.selected - page_ids) | chosen
        return sorted(self.state.selected)

    def render_pagination(self):
        """Previous / next buttons and page indicator."""
        total_pages = self.state.total_pages
        if total_pages <= 1:
            st.caption(f"{self.state.total_rows} rows")
            return

        col1, col2, col3 = st.columns([1, 2, 1])
        with col1:
            if st.button("← Previous", key=f"{self.key}_prev", width="stretch",
                         disabled=self.state.current_page <= 1):
                self.state.previous_page()
                st.rerun()
        with col2:
            st.markdown(
                f'<div style="text-align:center;color:#888;padding-top:6px;">'
                f'Page {self.state.current_page} of {total_pages} · {self.state.total_rows} rows</div>',
                unsafe_allow_html=True
            )
        with col3:
            if st.button("Next →", key=f"{self.key}_next", width="stretch",
                         disabled=self.state.current_page >= total_pages):
                self.state.next_page()
                st.rerun()

"""
CSV bulk import panel.

Upload -> parse and validate -> preview -> sequential submission with a
progress bar. Rejected rows are listed by line number and never submitted.
"""
import logging

import streamlit as st

from components.activity_log import log_activity
from components.data_table import RecordTable
from components.notifications import show_toast
from components.session import get_settings
from components.ui_components import info_banner
from core.bulk_submit import NothingToSubmitError, submit_rows
from core.csv_ingest import CSVIngestError, IngestOptions, IngestResult, ingest_csv
from core.resources import Collection
from core.table_state import TableState

logger = logging.getLogger(__name__)


def _result_key(key: str) -> str:
    return f"{key}_ingest_result"


def _preview_state_key(key: str) -> str:
    return f"{key}_preview_state"


def _reset(key: str):
    for k in (_result_key(key), _preview_state_key(key)):
        st.session_state.pop(k, None)


def _render_errors(result: IngestResult):
    if not result.errors:
        return
    with st.expander(f"⚠️ {result.invalid_count} rows skipped", expanded=result.valid_count == 0):
        st.dataframe(result.errors_frame(), width="stretch", hide_index=True)


def render_csv_import(collection: Collection, key: str):
    """
    Render the import panel for a collection.

    Args:
        collection: Target collection (schema and create endpoint)
        key: Unique widget key prefix
    """
    definition = collection.definition
    schema = definition.schema

    col1, col2 = st.columns([3, 1])
    with col1:
        st.caption(
            "Required columns: " + ", ".join(f"`{f}`" for f in schema.required_fields)
        )
    with col2:
        st.download_button(
            "📄 CSV template",
            definition.csv_template,
            f"{definition.key}_template.csv",
            "text/csv",
            key=f"{key}_template",
            width="stretch",
        )

    uploaded = st.file_uploader("CSV file", type=["csv"], key=f"{key}_file",
                                on_change=_reset, args=(key,))
    if uploaded is None:
        return

    if st.button("🔍 Process CSV", key=f"{key}_process"):
        try:
            result = ingest_csv(uploaded.getvalue(), IngestOptions(schema=schema))
        except CSVIngestError as e:
            _reset(key)
            show_toast(str(e), "error")
            return

        st.session_state[_result_key(key)] = result
        st.session_state[_preview_state_key(key)] = TableState(
            data=result.rows, page_size=definition.page_size_or(get_settings().table_page_size)
        )
        kind = "success" if result.valid_count else "warning"
        show_toast(result.summary(), kind)

    result = st.session_state.get(_result_key(key))
    if result is None:
        return

    _render_errors(result)
    if not result.rows:
        info_banner("No valid rows to import.", "warning")
        return

    st.markdown(f"**Preview** · {result.valid_count} valid of {result.total_rows} rows")
    preview = RecordTable(st.session_state[_preview_state_key(key)], f"{key}_preview",
                          columns=result.headers)
    preview.render()
    preview.render_pagination()

    if st.button(f"📥 Import {result.valid_count} {definition.noun}", key=f"{key}_submit",
                 type="primary"):
        progress = st.progress(0.0, text="Submitting...")

        def on_progress(done: int, total: int):
            progress.progress(done / total, text=f"Submitting {done}/{total}")

        try:
            outcome = submit_rows(result.rows, collection.create, on_progress)
        except NothingToSubmitError as e:
            show_toast(str(e), "warning")
            return

        summary = outcome.summary(definition.noun)
        if outcome.success_count == 0:
            kind = "error"
        elif outcome.error_count:
            kind = "warning"
        else:
            kind = "success"
        show_toast(summary, kind)
        log_activity(f"Imported {definition.noun}", "import", summary, definition.key)

        for failure in outcome.failures:
            st.error(f"Row {failure.index + 1}: {failure.error}")

        if outcome.success_count:
            _reset(key)

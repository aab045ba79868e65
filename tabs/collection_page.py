"""
Generic collection page.

Records table with search/sort/pagination and selection, create and edit
forms built from the collection schema, single and bulk delete, CSV bulk
import and attachment uploads.
"""
import logging
from typing import Any, Dict, List

import streamlit as st

from components.activity_log import log_activity
from components.attachments import render_attachment_upload
from components.csv_import import render_csv_import
from components.data_table import RecordTable
from components.notifications import queue_toast, show_toast
from components.record_form import render_delete_confirmation, render_record_form
from components.session import get_collection, get_table_state
from components.ui_components import empty_state, section_header, stat_row
from core.api_client import APIError
from core.bulk_submit import NothingToSubmitError, delete_rows
from core.resources import Collection, CollectionDefinition
from core.table_state import row_id

logger = logging.getLogger(__name__)


def _table_key(definition: CollectionDefinition) -> str:
    return f"table_{definition.key}"


def _load_rows(collection: Collection, refresh: bool = False) -> List[Dict[str, Any]]:
    try:
        return collection.list(refresh=refresh)
    except APIError as e:
        logger.error("Failed to load %s: %s", collection.key, e)
        show_toast(f"Failed to load {collection.definition.noun}: {e}", "error")
        return []


def _attachment_urls(definition: CollectionDefinition, key: str,
                     record: Dict[str, Any] = None) -> Dict[str, str]:
    """Upload widgets for every attachment field; uploaded URLs persist across reruns."""
    urls: Dict[str, str] = {}
    for field_name, folder in definition.attachments.items():
        url_key = f"{key}_{field_name}_url"
        spec = definition.schema.field(field_name)
        current = st.session_state.get(url_key) or (record or {}).get(field_name)
        new_url = render_attachment_upload(field_name, folder, key, current_url=current,
                                           label=spec.display_label)
        if new_url:
            st.session_state[url_key] = new_url
        if st.session_state.get(url_key):
            urls[field_name] = st.session_state[url_key]
    return urls


def _clear_attachment_urls(definition: CollectionDefinition, key: str):
    for field_name in definition.attachments:
        st.session_state.pop(f"{key}_{field_name}_url", None)


def _render_create(collection: Collection):
    definition = collection.definition
    key = f"{definition.key}_new"

    urls = _attachment_urls(definition, key)
    payload = render_record_form(definition.schema, key, initial=urls,
                                 submit_label="Create", skip_fields=tuple(definition.attachments))
    if payload is None:
        return

    try:
        collection.create(payload)
    except APIError as e:
        show_toast(f"Failed to create entry: {e}", "error")
        return

    _clear_attachment_urls(definition, key)
    log_activity(f"Created {definition.label} entry", "create", collection=definition.key)
    queue_toast("Entry created successfully", "success")
    st.rerun()


def _render_edit(collection: Collection, record: Dict[str, Any]):
    definition = collection.definition
    rid = row_id(record)
    key = f"{definition.key}_edit_{rid}"

    st.markdown(f"#### ✏️ Edit `{rid}`")
    initial = dict(record)
    initial.update(_attachment_urls(definition, key, record))
    payload = render_record_form(definition.schema, key, initial=initial,
                                 submit_label="Update", skip_fields=tuple(definition.attachments))
    if payload is not None:
        try:
            collection.update(rid, payload)
        except APIError as e:
            show_toast(f"Failed to update entry: {e}", "error")
        else:
            _clear_attachment_urls(definition, key)
            log_activity(f"Updated {definition.label} entry", "update", rid, definition.key)
            queue_toast("Entry updated successfully", "success")
            st.rerun()

    if render_delete_confirmation(key, "this entry"):
        try:
            collection.delete(rid)
        except APIError as e:
            show_toast(f"Failed to delete entry: {e}", "error")
            return
        get_table_state(_table_key(definition), definition).clear_selection()
        log_activity(f"Deleted {definition.label} entry", "delete", rid, definition.key)
        queue_toast("Entry deleted successfully", "success")
        st.rerun()


def _render_bulk_delete(collection: Collection, ids: List[str]):
    definition = collection.definition
    key = f"{definition.key}_bulk"

    if not render_delete_confirmation(key, f"{len(ids)} selected {definition.noun}"):
        return

    progress = st.progress(0.0, text="Deleting...")

    def on_progress(done: int, total: int):
        progress.progress(done / total, text=f"Deleting {done}/{total}")

    try:
        result = delete_rows(ids, collection.delete, on_progress)
    except NothingToSubmitError as e:
        show_toast(str(e), "warning")
        return

    summary = result.summary(definition.noun, action="delete")
    log_activity(f"Deleted {definition.noun}", "delete", summary, definition.key)
    get_table_state(_table_key(definition), definition).clear_selection()
    queue_toast(summary, "success" if result.all_succeeded else "warning")
    st.rerun()


def _render_records(collection: Collection):
    definition = collection.definition
    state = get_table_state(_table_key(definition), definition)

    if st.button("🔄 Refresh", key=f"{definition.key}_refresh"):
        state.load(_load_rows(collection, refresh=True))
    else:
        rows = _load_rows(collection)
        # the cache hands back the same list until a write invalidates it
        if not state.is_loaded_from(rows):
            state.load(rows)

    if not state.data:
        empty_state("📭", f"No {definition.noun} yet",
                    "Create an entry or import a CSV file to get started.")
        return

    stat_row([
        {"label": "Records", "value": state.total_rows, "icon": "📋"},
        {"label": "Selected", "value": len(state.selected), "icon": "☑️"},
        {"label": "Page", "value": f"{state.current_page}/{state.total_pages}", "icon": "📄"},
    ])

    table = RecordTable(state, definition.key, columns=definition.schema.field_names)
    if definition.attachments:
        table.link_columns(list(definition.attachments))
    table.render_controls()
    selected = table.render(selectable=True)
    table.render_pagination()

    if len(selected) == 1:
        record = next((r for r in state.data if row_id(r) == selected[0]), None)
        if record is not None:
            _render_edit(collection, record)
    elif len(selected) > 1:
        _render_bulk_delete(collection, selected)


def render(definition: CollectionDefinition):
    """Render the page for one collection."""
    collection = get_collection(definition)
    endpoint = definition.endpoint.strip('/')
    section_header(definition.label, subtitle=f"{definition.group} · /{endpoint}")

    records_tab, new_tab, import_tab = st.tabs(["📋 Records", "➕ New", "📥 Bulk import"])
    with records_tab:
        _render_records(collection)
    with new_tab:
        _render_create(collection)
    with import_tab:
        render_csv_import(collection, f"{definition.key}_import")

"""
Create / edit forms generated from a RowSchema, plus delete confirmation.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import streamlit as st

from core.validation import MONTHS, FieldError, FieldSpec, RowSchema


def _default_for(spec: FieldSpec, value: Any) -> Any:
    if value not in (None, ""):
        return value
    if spec.default is not None:
        return spec.default
    if spec.kind == "date":
        return datetime.now().strftime("%Y-%m-%dT%H:%M")
    if spec.kind == "month":
        return MONTHS[datetime.now().month - 1]
    if spec.name == "year":
        return datetime.now().year
    return None


def _choice_options(spec: FieldSpec, value: Any) -> Tuple[List[str], int]:
    """Select box options for a choice or month field and the index of value."""
    options = list(spec.choices) if spec.kind == "choice" else list(MONTHS)
    if not spec.required:
        options = [""] + options
    if value in (None, ""):
        return options, 0
    try:
        value = spec.coerce(value)
    except FieldError:
        # stored values outside the choices stay selected
        options.append(str(value))
        return options, len(options) - 1
    return options, options.index(value)


def _render_input(spec: FieldSpec, value: Any, key: str) -> Any:
    """One widget per field kind; returns the raw widget value."""
    label = spec.display_label + ("" if spec.required else " (optional)")
    value = _default_for(spec, value)

    if spec.kind in ("choice", "month"):
        options, index = _choice_options(spec, value)
        return st.selectbox(label, options, index=index, key=key)

    if spec.kind == "bool":
        return st.checkbox(label, value=bool(value), key=key)

    if spec.kind == "int":
        return st.number_input(
            label,
            value=int(value) if value not in (None, "") else None,
            min_value=int(spec.min_value) if spec.min_value is not None else None,
            max_value=int(spec.max_value) if spec.max_value is not None else None,
            step=1,
            key=key,
        )

    if spec.kind == "float":
        return st.number_input(
            label,
            value=float(value) if value not in (None, "") else None,
            min_value=float(spec.min_value) if spec.min_value is not None else None,
            max_value=float(spec.max_value) if spec.max_value is not None else None,
            key=key,
        )

    if spec.name in ("description", "commentsNotes", "mitigationSteps"):
        return st.text_area(label, value=str(value or ""), key=key)

    help_text = "ISO format, e.g. 2024-05-01T09:30" if spec.kind == "date" else None
    return st.text_input(label, value=str(value or ""), key=key, help=help_text)


def render_record_form(schema: RowSchema, key: str, initial: Dict[str, Any] = None,
                       submit_label: str = "Save", skip_fields=()) -> Optional[Dict[str, Any]]:
    """
    Render a form for schema and return the coerced payload on submit.

    Args:
        schema: Field definitions
        key: Unique form key
        initial: Existing values (edit) or None (create)
        submit_label: Submit button text
        skip_fields: Fields rendered elsewhere (e.g. attachment uploads)

    Returns:
        Typed payload when submitted and valid, otherwise None
    """
    initial = initial or {}
    raw: Dict[str, Any] = {}

    with st.form(key, clear_on_submit=False):
        specs = [s for s in schema.fields if s.name not in skip_fields]
        cols = st.columns(2)
        for i, spec in enumerate(specs):
            with cols[i % 2]:
                raw[spec.name] = _render_input(spec, initial.get(spec.name), f"{key}_{spec.name}")
        submitted = st.form_submit_button(submit_label, type="primary")

    if not submitted:
        return None

    for name in skip_fields:
        if initial.get(name):
            raw[name] = initial[name]

    try:
        return schema.coerce(raw)
    except FieldError as e:
        st.error(str(e))
        return None


def render_delete_confirmation(key: str, description: str) -> bool:
    """
    Two-step delete: a button arms the confirmation, a second button confirms.

    Returns:
        True once the user confirmed
    """
    armed_key = f"{key}_armed"
    if not st.session_state.get(armed_key):
        if st.button("🗑️ Delete", key=f"{key}_arm"):
            st.session_state[armed_key] = True
            st.rerun()
        return False

    st.warning(f"Delete {description}? This cannot be undone.")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Confirm delete", key=f"{key}_confirm", type="primary", width="stretch"):
            st.session_state[armed_key] = False
            return True
    with col2:
        if st.button("Cancel", key=f"{key}_cancel", width="stretch"):
            st.session_state[armed_key] = False
            st.rerun()
    return False

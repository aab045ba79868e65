"""
File attachment upload to object storage with a progress bar.
"""
import logging
from typing import Optional

import streamlit as st

from components.activity_log import log_activity
from components.notifications import show_toast
from components.session import get_settings, get_storage
from core.security import sanitize_filename
from core.storage import StorageError
from core.uploader import UploadError, format_file_size, upload_file, validate_file

logger = logging.getLogger(__name__)


def render_attachment_upload(field_name: str, folder: str, key: str,
                             current_url: str = None, label: str = None) -> Optional[str]:
    """
    Upload widget for one attachment field.

    Args:
        field_name: Record field that stores the URL
        folder: Storage folder
        key: Unique widget key prefix
        current_url: URL already stored on the record
        label: Widget label

    Returns:
        The new download URL after a successful upload, else None
    """
    settings = get_settings()
    storage = get_storage()

    if current_url:
        st.markdown(f"Current file: [open]({current_url})")

    if not storage.is_configured():
        st.caption("📎 File storage is not configured")
        return None

    uploaded = st.file_uploader(label or field_name, key=f"{key}_{field_name}_file")
    if uploaded is None:
        return None

    data = uploaded.getvalue()
    error = validate_file(uploaded.name, uploaded.type, len(data),
                          max_size_mb=settings.upload_max_size_mb)
    if error:
        st.error(error)
        return None

    st.caption(f"{uploaded.name} · {format_file_size(len(data))}")
    if not st.button("⬆️ Upload", key=f"{key}_{field_name}_upload"):
        return None

    progress = st.progress(0.0, text="Uploading...")

    def on_progress(percent: float):
        progress.progress(min(percent, 100.0) / 100, text=f"Uploading {percent:.0f}%")

    try:
        result = upload_file(
            data,
            uploaded.name,
            folder,
            on_progress=on_progress,
            content_type=uploaded.type,
            storage=storage,
            max_attempts=settings.upload_max_attempts,
            retry_delay=settings.upload_retry_delay,
        )
    except (UploadError, StorageError) as e:
        progress.empty()
        show_toast(str(e), "error")
        return None

    progress.progress(1.0, text="Upload complete")
    show_toast("File uploaded successfully", "success")
    log_activity(f"Uploaded {sanitize_filename(uploaded.name)}", "upload", result.path)
    return result.url

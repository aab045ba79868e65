"""
Toast notifications with consistent icons per status.

Messages that must survive an st.rerun() are queued in session state and
shown by flush_notifications() at the top of the next run.
"""
import logging
import streamlit as st

from config.theme import TOAST_ICONS
from core.security import mask_credentials

logger = logging.getLogger(__name__)

_QUEUE_KEY = "_pending_toasts"
_LOG_LEVELS = {
    "success": logging.INFO,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def show_toast(message: str, kind: str = "info"):
    """Show a toast now."""
    if kind not in TOAST_ICONS:
        kind = "info"
    message = mask_credentials(message)
    logger.log(_LOG_LEVELS[kind], "[toast:%s] %s", kind, message)
    st.toast(message, icon=TOAST_ICONS[kind])


def queue_toast(message: str, kind: str = "info"):
    """Show a toast on the next run (use before st.rerun())."""
    st.session_state.setdefault(_QUEUE_KEY, []).append((message, kind))


def flush_notifications():
    pending = st.session_state.pop(_QUEUE_KEY, [])
    for message, kind in pending:
        show_toast(message, kind)


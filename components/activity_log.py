"""
Activity Logging Component - Tracks admin actions for an audit trail.
"""
import json
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Dict, List, Optional

import pandas as pd
import streamlit as st

from core.security import safe_html_value

MAX_ENTRIES = 500


@dataclass
class ActivityEntry:
    """Represents a single activity log entry."""
    timestamp: str
    action: str
    category: str
    details: str
    collection: Optional[str] = None


def init_activity_log():
    """Initialize activity log in session state."""
    if 'activity_log' not in st.session_state:
        st.session_state.activity_log = []


def log_activity(action: str, category: str, details: str = "", collection: str = None):
    """
    Record an admin action.

    Args:
        action: Short description ("Created IOC entry")
        category: create, update, delete, import, upload, auth, notify
        details: Additional details
        collection: Collection key involved
    """
    init_activity_log()

    entry = ActivityEntry(
        timestamp=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        action=action,
        category=category,
        details=details,
        collection=collection,
    )
    st.session_state.activity_log.append(asdict(entry))

    if len(st.session_state.activity_log) > MAX_ENTRIES:
        st.session_state.activity_log = st.session_state.activity_log[-MAX_ENTRIES:]


def get_activity_log() -> List[Dict]:
    init_activity_log()
    return st.session_state.activity_log


def clear_activity_log():
    st.session_state.activity_log = []


def export_activity_log() -> str:
    """Export activity log as JSON string."""
    init_activity_log()
    return json.dumps({
        "exported_at": datetime.now().isoformat(),
        "session_activities": st.session_state.activity_log,
    }, indent=2)


def render_activity_sidebar():
    """Render a compact activity log in the sidebar."""
    activities = get_activity_log()[-10:]
    if not activities:
        return

    st.sidebar.markdown("---")
    st.sidebar.markdown("### 📋 Recent Activity")

    for activity in reversed(activities):
        icon = {
            "create": "➕",
            "update": "✏️",
            "delete": "🗑️",
            "import": "📥",
            "upload": "📎",
            "auth": "🔑",
        }.get(activity.get("category", ""), "•")
        time_short = activity.get("timestamp", "")[-8:]
        action = safe_html_value(activity.get("action"), max_length=40)
        st.sidebar.markdown(
            f'<div style="font-size:0.75rem;color:#888;padding:3px 0;">'
            f'{icon} <span style="color:#aaa;">{time_short}</span> {action}'
            f'</div>',
            unsafe_allow_html=True
        )

    st.sidebar.download_button(
        "📥 Export Activity Log",
        export_activity_log(),
        f"activity_log_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json",
        "application/json",
        key="download_activity",
        width="stretch",
    )


def render_full_activity_log():
    """Render the full activity log as a table."""
    activities = get_activity_log()

    st.markdown("### 📋 Session Activity Log")
    st.caption(f"{len(activities)} activities recorded in this session")

    if not activities:
        st.info("No activities recorded yet.")
        return

    df = pd.DataFrame(activities)
    cols = [c for c in ["timestamp", "category", "collection", "action", "details"] if c in df.columns]
    st.dataframe(df[cols].sort_values("timestamp", ascending=False), width="stretch", hide_index=True)

    if st.button("🗑️ Clear Activity Log", key="clear_activity"):
        clear_activity_log()
        st.rerun()

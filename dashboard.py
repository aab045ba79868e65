"""
SOC Report Admin Console
Slim orchestrator entry point.

Renders the sidebar (collection group, API status, recent activity) and one
tab per collection in the selected group.
"""
import os
import sys
import traceback

import streamlit as st

# Add the current directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
from core.security import escape_html, logger, setup_logging

from components.activity_log import init_activity_log, render_activity_sidebar, render_full_activity_log
from components.auth import check_auth, render_login_screen, render_logout_button
from components.notifications import flush_notifications
from components.session import get_api_client, get_settings, get_storage
from components.ui_components import status_indicator
from config.registry import collections_by_group
from tabs import collection_page

# Page configuration
st.set_page_config(
    layout="wide",
    page_title="SOC Report Admin",
    page_icon="🛡️"
)

settings = get_settings()

# Module loggers (core.*, components.*, tabs.*) share the console format
for _package in ("core", "components", "tabs"):
    setup_logging(_package, settings.log_level)

init_activity_log()

# Authentication check - must pass before accessing dashboard
if not check_auth():
    render_login_screen()
    st.stop()

flush_notifications()

# Custom CSS for consistent styling and responsiveness
st.markdown('''<style>
/* Global spacing */
.block-container {padding-top: 1rem; padding-bottom: 2rem;}

/* Tab styling */
div[data-testid="stTabs"] button {font-size: 0.9rem; padding: 8px 16px;}
div[data-testid="stTabs"] [data-baseweb="tab-list"] {gap: 4px;}

/* Table improvements */
div[data-testid="stDataFrame"] {border-radius: 8px; overflow: hidden;}

/* Button consistency */
.stButton > button {border-radius: 6px; transition: all 0.2s ease;}
.stDownloadButton > button {border-radius: 6px;}

/* Expander styling */
div[data-testid="stExpander"] {border-radius: 8px; border: 1px solid rgba(255,255,255,0.1);}

/* Mobile responsiveness */
@media (max-width: 768px) {
    .block-container {padding-left: 1rem; padding-right: 1rem;}
    div[data-testid="stTabs"] button {font-size: 0.8rem; padding: 6px 10px;}
    div[data-testid="stHorizontalBlock"] {flex-wrap: wrap;}
}

/* Toast notifications */
div[data-testid="stToast"] {border-radius: 8px;}
</style>''', unsafe_allow_html=True)

# Header Banner
st.markdown('''<div style="background:linear-gradient(135deg,#0a0a15 0%,#1a1a2e 40%,#16213e 70%,#0f3460 100%);border-radius:12px;padding:20px 30px;margin-bottom:20px;display:flex;align-items:center;gap:18px;border:1px solid rgba(102,126,234,0.3);box-shadow:0 4px 20px rgba(0,0,0,0.3);">
<div style="background:linear-gradient(135deg,#667eea 0%,#764ba2 100%);width:60px;height:60px;border-radius:12px;display:flex;align-items:center;justify-content:center;">
<span style="font-size:2rem;">🛡️</span>
</div>
<div>
<div style="font-size:1.5rem;font-weight:bold;color:white;letter-spacing:0.5px;">SOC Report Admin</div>
<div style="color:#888;font-size:0.85rem;margin-top:4px;">Manage the data behind the SOC dashboards</div>
</div>
</div>''', unsafe_allow_html=True)

# ============================================================================
# SIDEBAR
# ============================================================================

groups = collections_by_group()

st.sidebar.markdown("### 🗂️ Collections")
group = st.sidebar.radio("Group", list(groups) + ["Activity Log"], label_visibility="collapsed")

client = get_api_client()
st.sidebar.markdown("---")
st.sidebar.markdown(
    f'<div style="font-size:0.8rem;color:#888;">{status_indicator(client.is_authenticated())} '
    f'API: <code>{escape_html(settings.api_base_url)}</code></div>',
    unsafe_allow_html=True
)
st.sidebar.markdown(
    f'<div style="font-size:0.8rem;color:#888;margin-top:6px;">{status_indicator(get_storage().is_configured())} '
    f'File storage</div>',
    unsafe_allow_html=True
)
render_logout_button()
render_activity_sidebar()


def safe_render_page(definition):
    """Render a collection page with error handling."""
    try:
        collection_page.render(definition)
    except Exception as e:
        logger.exception("Error rendering %s", definition.key)
        error_msg = str(e)[:200]
        st.markdown(f'''
            <div style="background:rgba(248,81,73,0.1);border:1px solid #f85149;border-radius:10px;padding:25px;text-align:center;margin:20px 0;">
                <div style="font-size:2rem;margin-bottom:10px;">⚠️</div>
                <div style="color:#f85149;font-size:1.1rem;font-weight:600;">Error Loading {escape_html(definition.label)}</div>
                <div style="font-family:monospace;font-size:0.75rem;color:#888;margin-top:10px;padding:8px;background:#0d1117;border-radius:4px;">{escape_html(error_msg)}</div>
            </div>
        ''', unsafe_allow_html=True)
        with st.expander("Show error details"):
            st.code(traceback.format_exc())


# ============================================================================
# PAGES
# ============================================================================

if group == "Activity Log":
    render_full_activity_log()
else:
    definitions = groups[group]
    tabs = st.tabs([d.label for d in definitions])
    for tab, definition in zip(tabs, definitions):
        with tab:
            safe_render_page(definition)

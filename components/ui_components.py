"""
Standardized UI Components for the admin console.
Provides consistent styling across all collection pages.
"""
import streamlit as st
from typing import Optional, List, Dict, Any
from config.theme import THEME, get_notification_color
from core.security import escape_html


# =============================================================================
# STATS
# =============================================================================

def stat_row(stats: List[Dict[str, Any]]) -> None:
    """
    Render a row of statistics.

    Args:
        stats: List of dicts with keys: label, value, icon (optional), color (optional)
    """
    cols = st.columns(len(stats))
    for col, stat in zip(cols, stats):
        with col:
            color = stat.get("color", "white")
            icon = stat.get("icon", "")
            st.markdown(f'''<div style="background:rgba(30,30,46,0.5);border-radius:8px;padding:12px;text-align:center;">
<div style="color:#888;font-size:0.75rem;">{icon} {escape_html(stat["label"])}</div>
<div style="color:{color};font-size:1.3rem;font-weight:bold;">{escape_html(stat["value"])}</div>
</div>''', unsafe_allow_html=True)


def status_indicator(online: bool, size: int = 10) -> str:
    """HTML for a connection status dot."""
    color = THEME.SUCCESS if online else THEME.TEXT_MUTED
    return f'<span style="display:inline-block;width:{size}px;height:{size}px;border-radius:50%;background:{color};box-shadow:0 0 8px {color};"></span>'


# =============================================================================
# EMPTY STATES
# =============================================================================

def empty_state(icon: str, title: str, message: str, suggestion: str = "") -> None:
    """
    Render an empty state placeholder.

    Args:
        icon: Emoji icon
        title: Main title
        message: Description message
        suggestion: Optional suggestion text
    """
    suggestion_html = f'<div style="color:#667eea;font-size:0.85rem;margin-top:12px;">{suggestion}</div>' if suggestion else ""

    st.markdown(f'''<div style="background:rgba(30,30,46,0.3);border:1px dashed rgba(102,126,234,0.3);border-radius:12px;padding:40px;text-align:center;margin:20px 0;">
<div style="font-size:3rem;margin-bottom:15px;opacity:0.7;">{icon}</div>
<div style="color:white;font-size:1.1rem;font-weight:600;margin-bottom:8px;">{title}</div>
<div style="color:#888;font-size:0.9rem;">{message}</div>
{suggestion_html}
</div>''', unsafe_allow_html=True)


# =============================================================================
# SECTION HEADERS
# =============================================================================

def section_header(title: str, icon: str = "", subtitle: str = "",
                   badge: Optional[str] = None) -> None:
    """
    Render a styled section header.

    Args:
        title: Section title
        icon: Optional emoji icon
        subtitle: Optional subtitle text
        badge: Optional badge text (e.g., count)
    """
    icon_html = f'<span style="margin-right:10px;">{icon}</span>' if icon else ""
    subtitle_html = f'<div style="color:#888;font-size:0.85rem;margin-top:4px;">{subtitle}</div>' if subtitle else ""
    badge_html = f'<span style="background:#667eea;color:white;padding:2px 10px;border-radius:12px;font-size:0.8rem;margin-left:12px;">{badge}</span>' if badge else ""

    st.markdown(f'''<div style="border-bottom:1px solid {THEME.BORDER_PRIMARY};padding-bottom:10px;margin-bottom:15px;">
<div style="display:flex;align-items:center;">
<span style="color:white;font-size:1.2rem;font-weight:600;">{icon_html}{title}</span>{badge_html}
</div>
{subtitle_html}
</div>''', unsafe_allow_html=True)


def info_banner(message: str, kind: str = "info") -> None:
    """
    Render an info/warning/error banner.

    Args:
        message: Banner message
        kind: 'info', 'warning', 'error', 'success'
    """
    color = get_notification_color(kind)
    st.markdown(f'''<div style="background:rgba(0,0,0,0.15);border-left:4px solid {color};border-radius:0 8px 8px 0;padding:12px 16px;margin:10px 0;">
<span style="color:{color};">{escape_html(message)}</span>
</div>''', unsafe_allow_html=True)

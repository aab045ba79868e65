"""
Centralized theme and styling configuration for the admin console.
"""
from dataclasses import dataclass


@dataclass
class ThemeColors:
    """Centralized color definitions."""
    # Notification colors
    SUCCESS: str = "#28a745"
    ERROR: str = "#dc3545"
    WARNING: str = "#ffc107"
    INFO: str = "#17a2b8"

    # Table row highlighting (dark mode compatible)
    ROW_HIGH_RISK: str = "rgba(220, 53, 69, 0.25)"
    ROW_MEDIUM_RISK: str = "rgba(255, 193, 7, 0.25)"
    ROW_LOW_RISK: str = "rgba(40, 167, 69, 0.15)"
    ROW_NORMAL: str = ""

    # UI colors
    BORDER_PRIMARY: str = "#667eea"
    TEXT_MUTED: str = "#888"


THEME = ThemeColors()

TOAST_ICONS = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
}

# Columns whose values drive row highlighting
SEVERITY_COLUMNS = ("severity", "severityLevel", "level", "status")


def get_notification_color(kind: str) -> str:
    return {
        "success": THEME.SUCCESS,
        "error": THEME.ERROR,
        "warning": THEME.WARNING,
    }.get(kind, THEME.INFO)


def color_row_by_severity(value: str) -> str:
    """
    Row background for a severity or status value.

    Args:
        value: Severity level or incident status text

    Returns:
        CSS background-color value
    """
    lowered = str(value).lower()
    if lowered in ("critical", "high", "unresolved"):
        return THEME.ROW_HIGH_RISK
    elif lowered in ("medium", "investigating"):
        return THEME.ROW_MEDIUM_RISK
    elif lowered in ("low", "resolved"):
        return THEME.ROW_LOW_RISK
    return THEME.ROW_NORMAL

"""
Configuration module for the SOC Report Admin Console.
"""
from .settings import Settings, load_settings
from .theme import (
    THEME,
    ThemeColors,
    TOAST_ICONS,
    get_notification_color,
    color_row_by_severity,
)

__all__ = [
    'Settings',
    'load_settings',
    'THEME',
    'ThemeColors',
    'TOAST_ICONS',
    'get_notification_color',
    'color_row_by_severity',
]

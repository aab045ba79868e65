"""
Reusable UI components for the SOC Report Admin Console.
"""
from .data_table import RecordTable, to_display_frame
from .record_form import render_record_form, render_delete_confirmation
from .csv_import import render_csv_import
from .attachments import render_attachment_upload
from .notifications import show_toast, queue_toast, flush_notifications
from .ui_components import (
    stat_row, status_indicator, empty_state,
    section_header, info_banner,
)
from .auth import check_auth, render_login_screen, render_logout_button, logout
from .activity_log import (
    init_activity_log, log_activity, get_activity_log,
    render_activity_sidebar, render_full_activity_log,
)

__all__ = [
    'RecordTable',
    'to_display_frame',
    'render_record_form',
    'render_delete_confirmation',
    'render_csv_import',
    'render_attachment_upload',
    # Notifications
    'show_toast', 'queue_toast', 'flush_notifications',
    # UI Components
    'stat_row', 'status_indicator', 'empty_state',
    'section_header', 'info_banner',
    # Authentication
    'check_auth', 'render_login_screen', 'render_logout_button', 'logout',
    # Activity log
    'init_activity_log', 'log_activity', 'get_activity_log',
    'render_activity_sidebar', 'render_full_activity_log',
]

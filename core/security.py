"""
Security utilities for the SOC Report Admin Console.

Provides:
- Centralized logging configuration
- Credential masking so tokens and API keys never reach a log line
- HTML escaping for values rendered with unsafe_allow_html
- Filename sanitization for uploaded attachments
"""
import html
import logging
import os
import re
from typing import Any, Union

# ============================================================================
# LOGGING CONFIGURATION
# ============================================================================

def setup_logging(name: str = "soc_admin", level: Union[int, str] = None) -> logging.Logger:
    """
    Set up a logger with consistent formatting.

    Args:
        name: Logger name
        level: Logging level or level name (defaults to LOG_LEVEL env var, then INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger.setLevel(level)
    return logger


# Create default logger
logger = setup_logging()


# ============================================================================
# HTML SANITIZATION (XSS Prevention)
# ============================================================================

def escape_html(text: Any) -> str:
    """
    Escape HTML special characters to prevent XSS attacks.

    Args:
        text: Input text (any type, will be converted to string)

    Returns:
        HTML-escaped string safe for rendering
    """
    if text is None:
        return ""
    return html.escape(str(text), quote=True)


def safe_html_value(value: Any, max_length: int = 200, default: str = "") -> str:
    """Escape and truncate a value for inline HTML."""
    if value is None or value == "":
        return default

    text = escape_html(value)
    if len(text) > max_length:
        return text[:max_length] + "..."
    return text


# ============================================================================
# CREDENTIAL MASKING
# ============================================================================

SENSITIVE_PATTERNS = [
    # Authorization headers and bearer tokens
    (r'(?i)(bearer)\s+([A-Za-z0-9_\-\.=]{8,})', r'\1 ***MASKED***'),
    (r'(?i)(authorization)\s*[=:]\s*["\']?([^\s"\',}]{8,})["\']?', r'\1=***MASKED***'),

    # API keys and tokens passed as params
    (r'(?i)(api[_-]?key|apikey|key)\s*[=:]\s*["\']?([A-Za-z0-9_\-]{20,})["\']?', r'\1=***MASKED***'),
    (r'(?i)(token)\s*[=:]\s*["\']?([A-Za-z0-9_\-\.]{12,})["\']?', r'\1=***MASKED***'),

    # Google / Firebase browser keys
    (r'AIza[0-9A-Za-z_\-]{35}', '***GOOGLE_KEY_MASKED***'),

    # Passwords
    (r'(?i)(password|passwd|pwd)\s*[=:]\s*["\']?([^\s"\']{4,})["\']?', r'\1=***MASKED***'),
]


def mask_credentials(text: Any) -> str:
    """
    Mask sensitive information in text.

    Args:
        text: Input text that may contain credentials

    Returns:
        Text with sensitive information masked
    """
    if text is None:
        return ""

    result = str(text)
    for pattern, replacement in SENSITIVE_PATTERNS:
        result = re.sub(pattern, replacement, result)
    return result


# ============================================================================
# INPUT HELPERS
# ============================================================================

def sanitize_filename(filename: str) -> str:
    """
    Sanitize a filename for safe use.

    Args:
        filename: Input filename

    Returns:
        Sanitized filename (path components removed)
    """
    if not filename:
        return ""

    filename = os.path.basename(filename.replace("\\", "/"))
    filename = re.sub(r'[<>:"/\\|?*\x00-\x1f]', '_', filename)

    max_length = 255
    if len(filename) > max_length:
        name, ext = os.path.splitext(filename)
        filename = name[:max_length - len(ext)] + ext

    return filename


"""
Environment-driven settings for the SOC Report Admin Console.
"""
import os
from dataclasses import dataclass


DEFAULT_API_BASE_URL = "http://localhost:5000/api"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name, "").strip().lower()
    if not value:
        return default
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{name} must be true or false, got {value!r}")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")


@dataclass
class Settings:
    """Runtime configuration, normally built by load_settings()."""
    api_base_url: str = DEFAULT_API_BASE_URL
    api_token: str = ""
    api_timeout: float = 10.0

    # Login gate (email/password against /auth/login)
    auth_enabled: bool = True
    session_timeout_minutes: int = 60

    firebase_api_key: str = ""
    firebase_project_id: str = ""
    firebase_storage_bucket: str = ""

    # Upload retry policy (3 attempts, fixed 1 second delay)
    upload_max_attempts: int = 3
    upload_retry_delay: float = 1.0
    upload_max_size_mb: float = 5.0

    table_page_size: int = 10
    cache_ttl_seconds: int = 300
    log_level: str = "INFO"


def load_settings() -> Settings:
    """
    Build Settings from environment variables.

    Raises:
        ValueError: if a numeric variable cannot be parsed or is out of range
    """
    settings = Settings(
        api_base_url=os.getenv("SOC_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
        api_token=os.getenv("SOC_API_TOKEN", ""),
        api_timeout=_env_float("SOC_API_TIMEOUT", 10.0),
        auth_enabled=_env_bool("SOC_AUTH_ENABLED", True),
        session_timeout_minutes=_env_int("SESSION_TIMEOUT_MINUTES", 60),
        firebase_api_key=os.getenv("FIREBASE_API_KEY", ""),
        firebase_project_id=os.getenv("FIREBASE_PROJECT_ID", ""),
        firebase_storage_bucket=os.getenv("FIREBASE_STORAGE_BUCKET", ""),
        upload_max_attempts=_env_int("UPLOAD_MAX_ATTEMPTS", 3),
        upload_retry_delay=_env_float("UPLOAD_RETRY_DELAY", 1.0),
        upload_max_size_mb=_env_float("UPLOAD_MAX_SIZE_MB", 5.0),
        table_page_size=_env_int("TABLE_PAGE_SIZE", 10),
        cache_ttl_seconds=_env_int("CACHE_TTL_SECONDS", 300),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )

    if settings.upload_max_attempts < 1:
        raise ValueError("UPLOAD_MAX_ATTEMPTS must be at least 1")
    if settings.upload_retry_delay < 0:
        raise ValueError("UPLOAD_RETRY_DELAY cannot be negative")
    if settings.table_page_size < 1:
        raise ValueError("TABLE_PAGE_SIZE must be at least 1")
    if settings.session_timeout_minutes < 1:
        raise ValueError("SESSION_TIMEOUT_MINUTES must be at least 1")

    return settings

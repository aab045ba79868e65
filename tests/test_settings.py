import pytest

from config.settings import DEFAULT_API_BASE_URL, load_settings

ENV_VARS = [
    "SOC_API_BASE_URL", "SOC_API_TOKEN", "SOC_API_TIMEOUT",
    "FIREBASE_API_KEY", "FIREBASE_PROJECT_ID", "FIREBASE_STORAGE_BUCKET",
    "UPLOAD_MAX_ATTEMPTS", "UPLOAD_RETRY_DELAY", "UPLOAD_MAX_SIZE_MB",
    "TABLE_PAGE_SIZE", "CACHE_TTL_SECONDS", "LOG_LEVEL",
    "SOC_AUTH_ENABLED", "SESSION_TIMEOUT_MINUTES",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = load_settings()
    assert settings.api_base_url == DEFAULT_API_BASE_URL
    assert settings.upload_max_attempts == 3
    assert settings.upload_retry_delay == 1.0
    assert settings.upload_max_size_mb == 5.0
    assert settings.table_page_size == 10
    assert settings.cache_ttl_seconds == 300
    assert settings.log_level == "INFO"
    assert settings.auth_enabled is True
    assert settings.session_timeout_minutes == 60


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SOC_API_BASE_URL", "https://reports.example/api/")
    monkeypatch.setenv("SOC_API_TOKEN", "abc")
    monkeypatch.setenv("FIREBASE_STORAGE_BUCKET", "soc.appspot.com")
    monkeypatch.setenv("UPLOAD_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("UPLOAD_RETRY_DELAY", "0.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("SOC_AUTH_ENABLED", "off")
    monkeypatch.setenv("SESSION_TIMEOUT_MINUTES", "15")

    settings = load_settings()

    assert settings.api_base_url == "https://reports.example/api"
    assert settings.api_token == "abc"
    assert settings.firebase_storage_bucket == "soc.appspot.com"
    assert settings.upload_max_attempts == 5
    assert settings.upload_retry_delay == 0.5
    assert settings.log_level == "DEBUG"
    assert settings.auth_enabled is False
    assert settings.session_timeout_minutes == 15


@pytest.mark.parametrize("name,value", [
    ("UPLOAD_MAX_ATTEMPTS", "three"),
    ("UPLOAD_MAX_ATTEMPTS", "0"),
    ("UPLOAD_RETRY_DELAY", "-1"),
    ("TABLE_PAGE_SIZE", "0"),
    ("SOC_API_TIMEOUT", "soon"),
    ("SOC_AUTH_ENABLED", "maybe"),
    ("SESSION_TIMEOUT_MINUTES", "0"),
])
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match=name):
        load_settings()

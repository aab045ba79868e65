from datetime import datetime, timedelta

import pytest
import requests
from streamlit.testing.v1 import AppTest

from components.auth import (
    LOCKOUT_DURATION_SECONDS,
    LOCKOUT_THRESHOLD,
    attempt_login,
    check_rate_limit,
    clear_failed_attempts,
    record_failed_attempt,
    session_expired,
    validate_credentials,
)
from core.api_client import APIClient
from fakes import FakeResponse, FakeSession

USER = {"_id": "u1", "email": "analyst@soc.local", "role": "admin"}


def make_client(*responses, token=None):
    return APIClient("http://api.local/api", token=token, session=FakeSession(*responses))


@pytest.mark.parametrize("email,password,error", [
    ("", "pw", "Email is required"),
    ("analyst", "pw", "Please enter a valid email address"),
    ("analyst@soc", "pw", "Please enter a valid email address"),
    ("analyst@soc.local", "", "Password is required"),
    (" analyst@soc.local ", "pw", None),
])
def test_validate_credentials(email, password, error):
    assert validate_credentials(email, password) == error


def test_lockout_after_threshold():
    state = {}
    for _ in range(LOCKOUT_THRESHOLD - 1):
        record_failed_attempt(state, now=1000)
    assert check_rate_limit(state, now=1000) == (False, 0)

    record_failed_attempt(state, now=1000)
    assert state["failed_attempts"] == 0
    assert check_rate_limit(state, now=1060) == (True, LOCKOUT_DURATION_SECONDS - 60)
    assert check_rate_limit(state, now=1000 + LOCKOUT_DURATION_SECONDS) == (False, 0)

    clear_failed_attempts(state)
    assert state == {"failed_attempts": 0, "lockout_until": 0}


def test_session_expired():
    now = datetime(2024, 5, 1, 12, 0)
    assert session_expired(None, 60, now)
    assert not session_expired(now - timedelta(minutes=59), 60, now)
    assert session_expired(now - timedelta(minutes=61), 60, now)


def test_attempt_login_success_clears_failures():
    client = make_client(FakeResponse(200, {"data": USER, "token": "jwt"}))
    state = {"failed_attempts": 3, "lockout_until": 0}

    ok, message, user = attempt_login(client, " analyst@soc.local ", "hunter22", state)

    assert ok
    assert user == USER
    assert state["failed_attempts"] == 0
    assert client.session.calls[0][2]["json"]["email"] == "analyst@soc.local"
    assert client.is_authenticated()


def test_attempt_login_rejected_counts_a_failure():
    client = make_client(FakeResponse(401, {"success": False, "message": "Invalid credentials"}))
    state = {}

    ok, message, _ = attempt_login(client, "analyst@soc.local", "wrong", state)

    assert not ok
    assert message == "Login failed: [401] Invalid credentials"
    assert state["failed_attempts"] == 1


def test_network_errors_do_not_count_as_failures():
    client = make_client(requests.ConnectionError("connection refused"))
    state = {}

    ok, message, _ = attempt_login(client, "analyst@soc.local", "pw", state)

    assert not ok
    assert "Network error" in message
    assert state.get("failed_attempts", 0) == 0


def test_invalid_form_and_lockout_skip_the_request():
    client = make_client()
    assert attempt_login(client, "bad", "pw", {})[:2] == (False, "Please enter a valid email address")

    ok, message, _ = attempt_login(client, "analyst@soc.local", "pw", {"lockout_until": 9e12})
    assert not ok
    assert message.startswith("Too many failed attempts")
    assert client.session.calls == []


def gated_app():
    import streamlit as st

    from components.activity_log import init_activity_log
    from components.auth import check_auth, render_login_screen
    from config.settings import Settings
    from core.api_client import APIClient
    from fakes import FakeResponse, FakeSession

    if "api_client" not in st.session_state:
        st.session_state.settings = Settings()
        st.session_state.api_client = APIClient("http://api.local/api", session=FakeSession(
            FakeResponse(401, {"success": False, "message": "Invalid credentials"}),
            FakeResponse(200, {"data": {"email": "analyst@soc.local"}, "token": "jwt"}),
        ))

    init_activity_log()
    if not check_auth():
        render_login_screen()
        st.stop()

    st.markdown("Dashboard content")


def test_login_screen_gates_the_dashboard():
    at = AppTest.from_function(gated_app, default_timeout=30).run()
    assert not at.exception
    assert not any("Dashboard content" in m.value for m in at.markdown)

    at.text_input(key="login_email").input("analyst@soc.local")
    at.text_input(key="login_password").input("wrong")
    at.button[0].click().run()

    assert at.error[0].value == "Login failed: [401] Invalid credentials"
    assert at.session_state.login_attempts["failed_attempts"] == 1

    at.text_input(key="login_password").input("hunter22")
    at.button[0].click().run()

    assert not at.exception
    assert any("Dashboard content" in m.value for m in at.markdown)
    assert at.session_state.authenticated
    assert at.session_state.user == {"email": "analyst@soc.local"}
    assert at.session_state.api_client.session.headers["Authorization"] == "Bearer jwt"
    assert at.session_state.activity_log[-1]["category"] == "auth"


def service_token_app():
    import streamlit as st

    from components.auth import check_auth
    from config.settings import Settings
    from core.api_client import APIClient
    from fakes import FakeResponse, FakeSession

    if "api_client" not in st.session_state:
        st.session_state.settings = Settings(api_token="expired")
        st.session_state.api_client = APIClient("http://api.local/api", token="expired",
                                                session=FakeSession(FakeResponse(401, {"message": "jwt expired"})))

    st.session_state.gate_open = check_auth()


def test_rejected_service_token_requires_sign_in():
    at = AppTest.from_function(service_token_app, default_timeout=30).run()

    assert not at.exception
    assert at.session_state.gate_open is False
    assert at.session_state.service_token_valid is False
    assert "Authorization" not in at.session_state.api_client.session.headers
    assert "rejected" in at.warning[0].value

"""
Authentication Component - email/password sign-in against the reporting API.

Security features:
- Bearer token kept on the per-session API client, never in files
- Rate limiting on failed attempts
- Session timeout
"""
import logging
import re
import time
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

import streamlit as st

from components.activity_log import log_activity
from components.session import get_api_client, get_settings
from core.api_client import APIClient, APIError

logger = logging.getLogger(__name__)

# Security constants
LOCKOUT_THRESHOLD = 5  # Failed attempts before lockout
LOCKOUT_DURATION_SECONDS = 300  # 5 minute lockout

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def validate_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ""))


def validate_credentials(email: str, password: str) -> Optional[str]:
    """Form-level check; returns an error message or None."""
    if not email:
        return "Email is required"
    if not validate_email(email.strip()):
        return "Please enter a valid email address"
    if not password:
        return "Password is required"
    return None


def check_rate_limit(state: Dict[str, Any], now: float = None) -> Tuple[bool, int]:
    """
    Check if login attempts are rate limited.

    Returns:
        Tuple of (is_locked, seconds_remaining)
    """
    now = time.time() if now is None else now
    lockout_until = state.get("lockout_until", 0)
    if lockout_until > now:
        return True, int(lockout_until - now)
    return False, 0


def record_failed_attempt(state: Dict[str, Any], now: float = None) -> Dict[str, Any]:
    """Record a failed login attempt and start a lockout once the threshold is reached."""
    now = time.time() if now is None else now
    failed_attempts = state.get("failed_attempts", 0) + 1
    state["failed_attempts"] = failed_attempts

    if failed_attempts >= LOCKOUT_THRESHOLD:
        state["lockout_until"] = now + LOCKOUT_DURATION_SECONDS
        state["failed_attempts"] = 0  # Reset counter after lockout

    return state


def clear_failed_attempts(state: Dict[str, Any]) -> Dict[str, Any]:
    state["failed_attempts"] = 0
    state["lockout_until"] = 0
    return state


def session_expired(last_activity: Optional[datetime], timeout_minutes: int,
                    now: datetime = None) -> bool:
    if last_activity is None:
        return True
    now = now or datetime.now()
    return now - last_activity > timedelta(minutes=timeout_minutes)


def attempt_login(client: APIClient, email: str, password: str,
                  state: Dict[str, Any]) -> Tuple[bool, str, Dict[str, Any]]:
    """
    Validate the form, enforce the lockout and sign in through the API.

    Only answers from the API count as failed attempts; network errors do not.

    Returns:
        Tuple of (success, message, user)
    """
    is_locked, seconds_remaining = check_rate_limit(state)
    if is_locked:
        return False, f"Too many failed attempts. Try again in {seconds_remaining} seconds.", {}

    error = validate_credentials(email, password)
    if error:
        return False, error, {}

    try:
        user = client.login(email.strip(), password)
    except APIError as e:
        if e.status is not None:
            record_failed_attempt(state)
        logger.warning("Login failed: %s", e)
        return False, f"Login failed: {e}", {}

    clear_failed_attempts(state)
    return True, "Signed in", user


def _login_state() -> Dict[str, Any]:
    if "login_attempts" not in st.session_state:
        st.session_state.login_attempts = {"failed_attempts": 0, "lockout_until": 0}
    return st.session_state.login_attempts


def logout():
    """Drop the token and the signed-in user."""
    get_api_client().clear_token()
    st.session_state.authenticated = False
    st.session_state.last_activity = None
    st.session_state.pop("user", None)


def render_login_screen() -> bool:
    """
    Render the login screen.

    Returns:
        True if authenticated, False otherwise
    """
    if st.session_state.get("authenticated", False):
        return True

    st.markdown('''<div style="display:flex;justify-content:center;align-items:center;min-height:40vh;">
<div style="background:linear-gradient(135deg,#0a0a15 0%,#1a1a2e 50%,#16213e 100%);border-radius:16px;padding:40px 50px;border:1px solid rgba(102,126,234,0.3);box-shadow:0 8px 32px rgba(0,0,0,0.4);max-width:400px;width:100%;">
<div style="text-align:center;">
<div style="background:linear-gradient(135deg,#667eea 0%,#764ba2 100%);width:80px;height:80px;border-radius:16px;display:flex;align-items:center;justify-content:center;margin:0 auto 20px;">
<span style="font-size:2.5rem;">🛡️</span>
</div>
<div style="color:white;font-size:1.5rem;font-weight:bold;">SOC Report Admin</div>
<div style="color:#888;font-size:0.9rem;margin-top:8px;">Sign in to your account</div>
</div>
</div>
</div>''', unsafe_allow_html=True)

    state = _login_state()
    col1, col2, col3 = st.columns([1, 2, 1])

    with col2:
        is_locked, seconds_remaining = check_rate_limit(state)
        if is_locked:
            st.error(f"Too many failed attempts. Try again in {seconds_remaining} seconds.")
            return False

        with st.form("login_form"):
            email = st.text_input("Email address", key="login_email")
            password = st.text_input("Password", type="password", key="login_password")
            submitted = st.form_submit_button("Sign in", type="primary", width="stretch")

        if state.get("failed_attempts", 0) > 0:
            remaining = LOCKOUT_THRESHOLD - state["failed_attempts"]
            st.caption(f"{remaining} attempts remaining before lockout")

        if submitted:
            ok, message, user = attempt_login(get_api_client(), email, password, state)
            if not ok:
                st.error(message)
                return False

            st.session_state.authenticated = True
            st.session_state.last_activity = datetime.now()
            st.session_state.user = user
            log_activity("Signed in", "auth", user.get("email") or email.strip())
            st.rerun()

    return False


def render_logout_button():
    """Render the signed-in user and a logout button in the sidebar."""
    if not get_settings().auth_enabled or not get_api_client().is_authenticated():
        return

    user = st.session_state.get("user") or {}
    if user.get("email"):
        st.sidebar.caption(f"👤 {user['email']}")
    if st.sidebar.button("🔒 Logout", width="stretch"):
        log_activity("Signed out", "auth")
        logout()
        st.rerun()


def check_auth() -> bool:
    """
    Check if user is authenticated.
    Call this at the start of the dashboard.

    A token from SOC_API_TOKEN is validated once per session; interactive
    sign-ins expire after the configured session timeout.

    Returns:
        True if authenticated (or auth disabled), False otherwise
    """
    settings = get_settings()
    if not settings.auth_enabled:
        return True

    if "authenticated" not in st.session_state:
        st.session_state.authenticated = False
    if "last_activity" not in st.session_state:
        st.session_state.last_activity = None

    client = get_api_client()

    if st.session_state.authenticated:
        if session_expired(st.session_state.last_activity, settings.session_timeout_minutes):
            logout()
            st.warning("Session timed out. Please sign in again.")
            return False
        st.session_state.last_activity = datetime.now()
        return True

    if client.is_authenticated() and "service_token_valid" not in st.session_state:
        st.session_state.service_token_valid = client.validate_token()
        if not st.session_state.service_token_valid:
            client.clear_token()
            st.warning("The configured API token was rejected. Please sign in.")

    return client.is_authenticated()

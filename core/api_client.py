"""
REST API client for the reporting backend.

Every endpoint answers with an envelope of the form
{"success": bool, "data": ..., "message": str}; the client unwraps it and
raises APIError for transport failures, non-2xx answers and success=false.
"""
import logging
from typing import Any, Dict, Optional

import requests

from core.security import mask_credentials

logger = logging.getLogger(__name__)


class APIError(Exception):
    """A request to the reporting API failed."""

    def __init__(self, message: str, status: Optional[int] = None, payload: Any = None):
        self.status = status
        self.payload = payload
        super().__init__(message)

    def __str__(self) -> str:
        base = super().__str__()
        return f"[{self.status}] {base}" if self.status else base


class APIClient:
    """Thin wrapper around requests.Session for the reporting API."""

    def __init__(self, base_url: str, token: str = None, timeout: float = 10.0,
                 session: requests.Session = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        if token:
            self.set_token(token)

    def set_token(self, token: str):
        self.session.headers["Authorization"] = f"Bearer {token}"

    def clear_token(self):
        self.session.headers.pop("Authorization", None)

    def is_authenticated(self) -> bool:
        return "Authorization" in self.session.headers

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method: str, path: str, params: Dict[str, Any] = None,
                json: Any = None) -> Any:
        """
        Send a request and return the unwrapped "data" member.

        Raises:
            APIError: on network errors, non-2xx status, or success=false
        """
        payload = self._send(method, path, params=params, json=json)
        if isinstance(payload, dict) and "data" in payload:
            return payload["data"]
        return payload

    def _send(self, method: str, path: str, params: Dict[str, Any] = None,
              json: Any = None) -> Any:
        """Send a request and return the decoded body without unwrapping it."""
        url = self.url_for(path)
        if params:
            params = {k: v for k, v in params.items() if v not in (None, "")}

        try:
            response = self.session.request(method, url, params=params, json=json,
                                            timeout=self.timeout)
        except requests.RequestException as e:
            message = mask_credentials(str(e))
            logger.error("API Error: %s %s: %s", method, path, message)
            raise APIError(f"Network error: {message}") from e

        payload = self._decode(response)

        if not response.ok:
            message = self._error_message(payload) or response.reason or "Request failed"
            logger.error("API Error: %s %s -> %d %s", method, path, response.status_code, message)
            raise APIError(message, status=response.status_code, payload=payload)

        if isinstance(payload, dict) and payload.get("success") is False:
            message = self._error_message(payload) or "Request was not successful"
            logger.error("API Error: %s %s: %s", method, path, message)
            raise APIError(message, status=response.status_code, payload=payload)

        return payload

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return {"message": response.text[:500]}

    @staticmethod
    def _error_message(payload: Any) -> Optional[str]:
        if isinstance(payload, dict):
            for key in ("message", "error", "detail"):
                if payload.get(key):
                    return str(payload[key])
        return None

    def get(self, path: str, params: Dict[str, Any] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def patch(self, path: str, json: Any = None) -> Any:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    # -- authentication -----------------------------------------------------

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Exchange credentials for a bearer token used by every later request.

        Args:
            email: Account email
            password: Account password

        Returns:
            The user record from the login response

        Raises:
            APIError: on bad credentials, transport errors, or a response without a token
        """
        payload = self._send("POST", "/auth/login", json={"email": email, "password": password})
        token = payload.get("token") if isinstance(payload, dict) else None
        if not token:
            logger.error("API Error: POST /auth/login: no token in response")
            raise APIError("Authentication failed. Please try again.", payload=payload)

        self.set_token(token)
        logger.info("Signed in to %s", self.base_url)
        user = payload.get("data")
        return user if isinstance(user, dict) else {}

    def validate_token(self) -> bool:
        """
        Check the current token against the API.

        Only a 401 answer counts as invalid. Other failures (API down, network
        errors) leave the session signed in.
        """
        if not self.is_authenticated():
            return False
        try:
            self._send("GET", "/auth/validate")
        except APIError as e:
            if e.status == 401:
                return False
            logger.warning("Token validation failed with unexpected error: %s", e)
        return True

import pytest
import requests

from core.api_client import APIClient, APIError
from fakes import FakeResponse, FakeSession


def make_client(*responses, token="secret-token"):
    session = FakeSession(*responses)
    return APIClient("http://api.local/api/", token=token, session=session), session


def test_headers_and_url():
    client, session = make_client()
    assert session.headers["Authorization"] == "Bearer secret-token"
    assert session.headers["Content-Type"] == "application/json"
    assert client.is_authenticated()
    assert client.url_for("/assets/ips") == "http://api.local/api/assets/ips"


def test_no_token_means_no_auth_header():
    client, session = make_client(token=None)
    assert "Authorization" not in session.headers
    assert not client.is_authenticated()


def test_get_unwraps_envelope_and_drops_empty_params():
    client, session = make_client(FakeResponse(200, {"success": True, "data": [{"id": "1"}]}))

    data = client.get("assets/ips", params={"page": 1, "search": "", "sort": None})

    assert data == [{"id": "1"}]
    method, url, kwargs = session.calls[0]
    assert method == "GET"
    assert url == "http://api.local/api/assets/ips"
    assert kwargs["params"] == {"page": 1}
    assert kwargs["timeout"] == 10.0


def test_post_sends_json():
    client, session = make_client(FakeResponse(201, {"success": True, "data": {"id": "9"}}))
    assert client.post("iocs", json={"source": "feed"}) == {"id": "9"}
    assert session.calls[0][2]["json"] == {"source": "feed"}


def test_payload_without_envelope_is_returned_as_is():
    client, _ = make_client(FakeResponse(200, [1, 2]))
    assert client.get("x") == [1, 2]


def test_no_content():
    client, _ = make_client(FakeResponse(204))
    assert client.delete("iocs/1") is None


def test_http_error_raises_api_error():
    client, _ = make_client(FakeResponse(404, {"success": False, "message": "Not found"}, reason="Not Found"))
    with pytest.raises(APIError) as exc:
        client.get("iocs/404")
    assert exc.value.status == 404
    assert str(exc.value) == "[404] Not found"


def test_success_false_raises_even_with_200():
    client, _ = make_client(FakeResponse(200, {"success": False, "error": "Duplicate entry"}))
    with pytest.raises(APIError, match="Duplicate entry"):
        client.post("iocs", json={})


def test_non_json_error_body():
    client, _ = make_client(FakeResponse(502, text="<html>Bad gateway</html>", reason="Bad Gateway"))
    with pytest.raises(APIError) as exc:
        client.get("x")
    assert exc.value.status == 502
    assert "Bad gateway" in str(exc.value)


def test_network_error():
    client, _ = make_client(requests.ConnectionError("connection refused"))
    with pytest.raises(APIError) as exc:
        client.get("x")
    assert str(exc.value) == "Network error: connection refused"
    assert exc.value.status is None


def test_login_sets_bearer_token():
    user = {"_id": "u1", "email": "analyst@soc.local", "role": "admin"}
    client, session = make_client(FakeResponse(200, {"data": user, "token": "jwt-123"}), token=None)

    assert client.login("analyst@soc.local", "hunter22") == user

    method, url, kwargs = session.calls[0]
    assert method == "POST"
    assert url == "http://api.local/api/auth/login"
    assert kwargs["json"] == {"email": "analyst@soc.local", "password": "hunter22"}
    assert session.headers["Authorization"] == "Bearer jwt-123"
    assert client.is_authenticated()


def test_login_rejected():
    client, session = make_client(
        FakeResponse(401, {"success": False, "message": "Invalid credentials"}, reason="Unauthorized"),
        token=None,
    )
    with pytest.raises(APIError) as exc:
        client.login("analyst@soc.local", "wrong")
    assert exc.value.status == 401
    assert "Invalid credentials" in str(exc.value)
    assert not client.is_authenticated()


def test_login_without_token_fails():
    client, _ = make_client(FakeResponse(200, {"data": {"_id": "u1"}}), token=None)
    with pytest.raises(APIError, match="Authentication failed"):
        client.login("analyst@soc.local", "hunter22")
    assert not client.is_authenticated()


def test_clear_token():
    client, session = make_client()
    client.clear_token()
    assert "Authorization" not in session.headers
    client.clear_token()
    assert not client.is_authenticated()


def test_validate_token():
    client, session = make_client(FakeResponse(200, {"success": True}))
    assert client.validate_token()
    assert session.calls[0][:2] == ("GET", "http://api.local/api/auth/validate")


@pytest.mark.parametrize("response,valid", [
    (FakeResponse(401, {"message": "jwt expired"}, reason="Unauthorized"), False),
    (FakeResponse(500, {"message": "boom"}, reason="Server Error"), True),
    (requests.ConnectionError("connection refused"), True),
])
def test_validate_token_only_fails_on_401(response, valid):
    client, _ = make_client(response)
    assert client.validate_token() is valid


def test_validate_token_without_token_skips_the_request():
    client, session = make_client(token=None)
    assert not client.validate_token()
    assert session.calls == []

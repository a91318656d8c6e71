from __future__ import annotations

import json
from typing import Any, Dict, List

import httpx
import pytest

from client.errors import ApiStatusError
from client.http import (
    ApiResponse,
    CredentialsMode,
    RequestClient,
    RequestConfig,
    resolve_base_url,
)
from session.store import MemorySessionStore


def _recording_client(responses: List[httpx.Response] | None = None, **client_kwargs):
    """httpx.Client that records requests and replays canned responses."""
    calls: Dict[str, Any] = {"requests": []}
    queue = list(responses or [])

    def handler(request: httpx.Request) -> httpx.Response:
        calls["requests"].append(request)
        if queue:
            return queue.pop(0)
        return httpx.Response(200, json={"code": 0, "msg": "success"})

    client = httpx.Client(transport=httpx.MockTransport(handler), **client_kwargs)
    return client, calls


def test_no_token_means_no_authorization_header(memory_store):
    http_client, calls = _recording_client()
    with RequestClient(memory_store, base_url="http://api.test", client=http_client) as rc:
        rc.request("/posts")

    req = calls["requests"][0]
    assert "authorization" not in req.headers


def test_empty_token_is_treated_as_absent():
    store = MemorySessionStore()
    store.set_token("")
    http_client, calls = _recording_client()
    with RequestClient(store, base_url="http://api.test", client=http_client) as rc:
        rc.request("/posts")

    assert "authorization" not in calls["requests"][0].headers


def test_token_is_sent_as_bearer_exactly(memory_store):
    memory_store.set_token("T")
    http_client, calls = _recording_client()
    with RequestClient(memory_store, base_url="http://api.test", client=http_client) as rc:
        rc.request("/posts")

    assert calls["requests"][0].headers["Authorization"] == "Bearer T"


def test_token_is_read_per_request(memory_store):
    http_client, calls = _recording_client()
    with RequestClient(memory_store, base_url="http://api.test", client=http_client) as rc:
        rc.request("/posts")
        memory_store.set_token("late")
        rc.request("/posts")
        memory_store.clear()
        rc.request("/posts")

    first, second, third = calls["requests"]
    assert "authorization" not in first.headers
    assert second.headers["authorization"] == "Bearer late"
    assert "authorization" not in third.headers


def test_default_content_type_and_caller_override(memory_store):
    http_client, calls = _recording_client()
    with RequestClient(memory_store, base_url="http://api.test", client=http_client) as rc:
        rc.request("/posts")
        rc.request("/posts", headers={"content-type": "text/plain", "X-Trace": "1"})

    default_req, override_req = calls["requests"]
    assert default_req.headers["Content-Type"] == "application/json"
    assert override_req.headers.get_list("Content-Type") == ["text/plain"]
    assert override_req.headers["X-Trace"] == "1"


def test_body_is_json_serialized(memory_store):
    http_client, calls = _recording_client()
    with RequestClient(memory_store, base_url="http://api.test", client=http_client) as rc:
        rc.request("/users/login", method="post", body={"email": "a@b.c", "password": "pw"})

    req = calls["requests"][0]
    assert req.method == "POST"
    assert json.loads(req.content) == {"email": "a@b.c", "password": "pw"}


def test_get_without_body_sends_no_content(memory_store):
    http_client, calls = _recording_client()
    with RequestClient(memory_store, base_url="http://api.test", client=http_client) as rc:
        rc.request("/posts/1")

    assert calls["requests"][0].content == b""


def test_server_error_with_json_body_still_resolves(memory_store):
    body = {"code": 500001, "msg": "login failed"}
    http_client, _ = _recording_client([httpx.Response(500, json=body)])
    with RequestClient(memory_store, base_url="http://api.test", client=http_client) as rc:
        out = rc.request("/users/login", method="POST", body={})

    # Status is ignored by request(); switching this to raise must be deliberate
    assert out == body


def test_send_exposes_status_alongside_body(memory_store):
    http_client, _ = _recording_client([httpx.Response(401, json={"code": 401001, "msg": "unauthorized"})])
    with RequestClient(memory_store, base_url="http://api.test", client=http_client) as rc:
        resp = rc.send(RequestConfig(method="GET", path="/posts/author"))

    assert isinstance(resp, ApiResponse)
    assert resp.status_code == 401
    assert not resp.ok
    assert resp.body["code"] == 401001
    with pytest.raises(ApiStatusError) as ei:
        resp.raise_for_status()
    assert ei.value.status_code == 401


def test_raise_for_status_returns_body_on_success():
    assert ApiResponse(status_code=200, body={"a": 1}).raise_for_status() == {"a": 1}


def test_malformed_json_propagates_parse_error(memory_store):
    http_client, _ = _recording_client([httpx.Response(200, text="<html>oops</html>")])
    with RequestClient(memory_store, base_url="http://api.test", client=http_client) as rc:
        with pytest.raises(json.JSONDecodeError):
            rc.request("/posts")


def test_transport_failure_propagates_unchanged(memory_store):
    attempts = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["n"] += 1
        raise httpx.ConnectError("connection refused", request=request)

    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    with RequestClient(memory_store, base_url="http://api.test", client=http_client) as rc:
        with pytest.raises(httpx.ConnectError):
            rc.request("/posts")

    # No retry
    assert attempts["n"] == 1


def test_empty_base_url_targets_application_origin(memory_store):
    http_client, calls = _recording_client()
    with RequestClient(memory_store, base_url="", origin="http://app.test:3000/", client=http_client) as rc:
        rc.request("/posts", params={"page": 2, "pageSize": 5})

    assert str(calls["requests"][0].url) == "http://app.test:3000/posts?page=2&pageSize=5"


def test_resolve_base_url():
    assert resolve_base_url("http://localhost:8080/", "http://app") == "http://localhost:8080"
    assert resolve_base_url("", "http://app/") == "http://app"
    with pytest.raises(ValueError):
        resolve_base_url("", "")


def test_cookie_mode_sends_jar_and_no_bearer(memory_store):
    memory_store.set_token("T")
    http_client, calls = _recording_client(cookies={"ssid": "abc"})
    with RequestClient(
        memory_store,
        base_url="http://api.test",
        credentials_mode=CredentialsMode.COOKIE,
        client=http_client,
    ) as rc:
        rc.request("/users/1")

    req = calls["requests"][0]
    assert "authorization" not in req.headers
    assert req.headers["Cookie"] == "ssid=abc"


def test_token_mode_never_sends_cookies(memory_store):
    memory_store.set_token("T")
    http_client, calls = _recording_client(cookies={"ssid": "abc"})
    with RequestClient(memory_store, base_url="http://api.test", client=http_client) as rc:
        rc.request("/posts")

    req = calls["requests"][0]
    assert "cookie" not in req.headers
    assert req.headers["Authorization"] == "Bearer T"


def test_per_request_credentials_mode_overrides_default(memory_store):
    memory_store.set_token("T")
    http_client, calls = _recording_client()
    with RequestClient(memory_store, base_url="http://api.test", client=http_client) as rc:
        rc.request("/users/1", credentials_mode=CredentialsMode.COOKIE)

    assert "authorization" not in calls["requests"][0].headers


def test_request_does_not_mutate_store():
    store = MemorySessionStore(token="T", user_id="1")
    before = store.get()
    http_client, _ = _recording_client([httpx.Response(200, json={"code": 0, "data": {"accessToken": "other"}})])
    with RequestClient(store, base_url="http://api.test", client=http_client) as rc:
        rc.request("/users/login", method="POST", body={})

    assert store.get() == before


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("token", CredentialsMode.TOKEN_HEADER),
        (" Bearer ", CredentialsMode.TOKEN_HEADER),
        ("cookie", CredentialsMode.COOKIE),
        ("include", CredentialsMode.COOKIE),
        (CredentialsMode.COOKIE, CredentialsMode.COOKIE),
    ],
)
def test_credentials_mode_parse(raw, expected):
    assert CredentialsMode.parse(raw) is expected


def test_credentials_mode_parse_rejects_unknown():
    with pytest.raises(ValueError):
        CredentialsMode.parse("basic")


def test_per_request_credentials_mode_accepts_strings(memory_store):
    memory_store.set_token("T")
    http_client, calls = _recording_client(cookies={"ssid": "abc"})
    with RequestClient(memory_store, base_url="http://api.test", client=http_client) as rc:
        rc.request("/users/1", credentials_mode="cookie")
        rc.request("/posts", credentials_mode="token")

    cookie_req, token_req = calls["requests"]
    assert "authorization" not in cookie_req.headers
    assert cookie_req.headers["Cookie"] == "ssid=abc"
    assert token_req.headers["Authorization"] == "Bearer T"
    assert "cookie" not in token_req.headers


def test_cookie_group_replays_server_cookie_and_token_group_is_unaffected(memory_store):
    memory_store.set_token("T")
    users_seen = []
    posts_seen = []

    def users_handler(request: httpx.Request) -> httpx.Response:
        users_seen.append(request)
        if request.url.path == "/users/login":
            return httpx.Response(
                200,
                headers={"Set-Cookie": "ssid=from-login; Path=/"},
                json={"code": 0, "msg": "success"},
            )
        return httpx.Response(200, json={"code": 0, "data": {"id": 1, "email": "a@b.c"}})

    def posts_handler(request: httpx.Request) -> httpx.Response:
        posts_seen.append(request)
        return httpx.Response(200, json={"code": 0, "data": {"posts": []}})

    users_http = httpx.Client(transport=httpx.MockTransport(users_handler))
    posts_http = httpx.Client(transport=httpx.MockTransport(posts_handler))
    with RequestClient(
        memory_store,
        base_url="http://users.test",
        credentials_mode=CredentialsMode.COOKIE,
        client=users_http,
    ) as users_rc, RequestClient(memory_store, base_url="http://posts.test", client=posts_http) as posts_rc:
        users_rc.request("/users/login", method="POST", body={"email": "a@b.c", "password": "secret1"})
        users_rc.request("/users/1")
        posts_rc.request("/posts/author")

    login_req, profile_req = users_seen
    assert "cookie" not in login_req.headers
    assert profile_req.headers["Cookie"] == "ssid=from-login"
    assert "authorization" not in profile_req.headers

    posts_req = posts_seen[0]
    assert "cookie" not in posts_req.headers
    assert posts_req.headers["Authorization"] == "Bearer T"

"""UI Routes — end-to-end through FastAPI with the backend faked.

Invariants:
    - Login sets both session cookies and redirects to the dashboard
    - Every token route without a `token` cookie → 302 /login, no backend call
    - Bulk CSV import creates rows in order and stops at the first failure
    - A single connect issues one /connect call with one-element lists
    - Expired token (backend 401) → 303 /refresh_token?ref=<original path>
    - Backend unreachable → 503 error page
"""

import json

import pytest

from gui.api import decoders as d
from gui.api.routes.table import ROUTES

TOKEN = "user-access-token"

USERS_CSV = b"alice,alice@example.com,pw-1\nbob,bob@example.com,pw-2\ncarol,carol@example.com,pw-3\n"


def set_cookies(resp) -> dict[str, str]:
    """name → raw Set-Cookie header."""
    cookies = {}
    for header in resp.headers.get_list("set-cookie"):
        cookies[header.split("=", 1)[0]] = header
    return cookies


# -- Session -------------------------------------------------------------------


async def test_login_sets_cookies_and_redirects(client, backend):
    backend.on("POST", "/users/tokens/issue", 201, json={
        "access_token": "acc-1", "refresh_token": "ref-1", "access_type": "Bearer",
    })

    resp = await client.post("/login", data={"username": "alice@example.com", "password": "pw"})

    assert resp.status_code == 302
    assert resp.headers["location"] == "/"
    cookies = set_cookies(resp)
    assert cookies["token"].startswith("token=acc-1")
    assert cookies["refresh_token"].startswith("refresh_token=ref-1")
    assert "HttpOnly" in cookies["token"]
    sent = json.loads(backend.calls("POST", "/users/tokens/issue")[0].content)
    assert sent == {"identity": "alice@example.com", "secret": "pw"}


async def test_login_rejected_redirects_to_login(client, backend):
    backend.on("POST", "/users/tokens/issue", 401, json={"message": "invalid credentials"})

    resp = await client.post("/login", data={"username": "alice@example.com", "password": "bad"})

    assert resp.status_code == 302
    assert resp.headers["location"] == "/login"
    assert "token" not in set_cookies(resp)


@pytest.mark.parametrize("form", [
    {"username": "alice@example.com"},
    {"password": "pw"},
    {"username": "", "password": ""},
])
async def test_login_blank_fields_redirect_to_login(client, backend, form):
    resp = await client.post("/login", data=form)

    assert resp.status_code == 302
    assert resp.headers["location"] == "/login"
    assert "token" not in set_cookies(resp)
    assert backend.requests == []


async def test_login_page_renders(client):
    resp = await client.get("/login")

    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]


_TOKEN_ROUTES = [
    r for r in ROUTES
    if r.decode not in (d.decode_empty, d.decode_login)
]


@pytest.mark.parametrize("route", _TOKEN_ROUTES, ids=[r.name for r in _TOKEN_ROUTES])
async def test_token_routes_redirect_without_cookie(client, backend, route):
    path = route.path.replace("{id}", "x1")

    resp = await client.request(route.method, path)

    assert resp.status_code == 302
    assert resp.headers["location"] == "/login"
    assert backend.requests == []


async def test_expired_token_redirects_to_refresh(authed_client, backend):
    backend.on("GET", "/things", 401, json={"message": "token expired"})

    resp = await authed_client.get("/things")

    assert resp.status_code == 303
    assert resp.headers["location"] == "/refresh_token?ref=%2Fthings"


async def test_refresh_sets_cookies_and_returns_to_ref(refresh_client, backend):
    backend.on("POST", "/users/tokens/refresh", 201, json={
        "access_token": "acc-2", "refresh_token": "ref-2",
    })

    resp = await refresh_client.get("/refresh_token", params={"ref": "/things"})

    assert resp.status_code == 303
    assert resp.headers["location"] == "/things"
    assert set_cookies(resp)["token"].startswith("token=acc-2")
    req = backend.calls("POST", "/users/tokens/refresh")[0]
    assert req.headers["Authorization"] == "Bearer user-refresh-token"


@pytest.mark.parametrize("ref", [
    "//evil.example",
    "/\t/evil.example",
    "/\n/evil.example",
    "/\r/evil.example",
])
async def test_refresh_ignores_external_ref(refresh_client, backend, ref):
    backend.on("POST", "/users/tokens/refresh", 201, json={"access_token": "acc-2"})

    resp = await refresh_client.get("/refresh_token", params={"ref": ref})

    assert resp.status_code == 303
    assert resp.headers["location"] == "/"


async def test_refresh_rejected_goes_to_login(refresh_client, backend):
    backend.on("POST", "/users/tokens/refresh", 401)

    resp = await refresh_client.get("/refresh_token")

    assert resp.status_code == 302
    assert resp.headers["location"] == "/login"


async def test_logout_clears_cookies(authed_client, backend):
    resp = await authed_client.get("/logout")

    assert resp.status_code == 302
    assert resp.headers["location"] == "/login"
    cookies = set_cookies(resp)
    assert cookies["token"].startswith('token=""') or "Max-Age=0" in cookies["token"]
    assert "refresh_token" in cookies
    assert backend.requests == []


# -- Pages ---------------------------------------------------------------------


async def test_users_page_renders(authed_client, backend):
    backend.on("GET", "/users", json={
        "users": [{
            "id": "u1", "name": "alice",
            "credentials": {"identity": "alice@example.com"},
            "status": "enabled",
        }],
        "total": 1, "offset": 0, "limit": 10,
    })

    resp = await authed_client.get("/users")

    assert resp.status_code == 200
    assert "alice@example.com" in resp.text
    assert str(backend.calls("GET", "/users")[0].url).endswith("/users?limit=10")


async def test_dashboard_renders_totals(authed_client, backend):
    backend.on("GET", "/users/profile", json={"id": "u0", "name": "admin"})
    backend.on("GET", "/users", json={"users": [], "total": 4})
    backend.on("GET", "/things", json={"things": [], "total": 7})
    backend.on("GET", "/channels", json={"channels": [], "total": 2})
    backend.on("GET", "/groups", json={"groups": [], "total": 1})

    resp = await authed_client.get("/")

    assert resp.status_code == 200
    assert "admin" in resp.text


async def test_backend_down_is_503(authed_client, backend):
    backend.down = True

    resp = await authed_client.get("/channels")

    assert resp.status_code == 503
    assert "text/html" in resp.headers["content-type"]


async def test_control_plane_forbidden_is_403(authed_client, backend):
    backend.on("GET", "/things/t1", 403)

    resp = await authed_client.get("/things/t1")

    assert resp.status_code == 403


async def test_view_thing_keeps_escaped_id_in_one_segment(authed_client, backend):
    backend.on("GET", "/things/?offset=5", 200, json={"id": "?offset=5"})

    resp = await authed_client.get("/things/%3Foffset%3D5")

    assert resp.status_code == 200
    url = backend.requests[-1].url
    assert url.raw_path == b"/things/%3Foffset%3D5"
    assert url.query == b""


# -- Bulk import ---------------------------------------------------------------


async def test_bulk_users_created_in_order(authed_client, backend):
    backend.on("POST", "/users", 201, json={"id": "u1"})

    resp = await authed_client.post(
        "/users/bulk", files={"usersFile": ("users.csv", USERS_CSV, "text/csv")},
    )

    assert resp.status_code == 303
    assert resp.headers["location"] == "/users"
    sent = [json.loads(r.content) for r in backend.calls("POST", "/users")]
    assert [u["credentials"]["identity"] for u in sent] == [
        "alice@example.com", "bob@example.com", "carol@example.com",
    ]
    assert sent[0] == {
        "name": "alice",
        "credentials": {"identity": "alice@example.com", "secret": "pw-1"},
    }


async def test_bulk_users_stops_at_invalid_row(authed_client, backend):
    backend.on("POST", "/users", 201, json={"id": "u1"})
    csv_body = b"alice,alice@example.com,pw-1\nbob,,pw-2\ncarol,carol@example.com,pw-3\n"

    resp = await authed_client.post(
        "/users/bulk", files={"usersFile": ("users.csv", csv_body, "text/csv")},
    )

    assert resp.status_code == 400
    assert len(backend.calls("POST", "/users")) == 1


async def test_bulk_users_stops_at_backend_rejection(authed_client, backend):
    backend.on("POST", "/users", 201, json={"id": "u1"})
    backend.on("POST", "/users", 400, json={"message": "malformed entity"})

    resp = await authed_client.post(
        "/users/bulk", files={"usersFile": ("users.csv", USERS_CSV, "text/csv")},
    )

    assert resp.status_code == 400
    assert len(backend.calls("POST", "/users")) == 2


async def test_bulk_users_short_row_creates_nothing(authed_client, backend):
    resp = await authed_client.post(
        "/users/bulk",
        files={"usersFile": ("users.csv", b"alice,alice@example.com,pw\nbob\n", "text/csv")},
    )

    assert resp.status_code == 400
    assert backend.requests == []


async def test_bulk_rejects_non_csv_upload(authed_client, backend):
    resp = await authed_client.post(
        "/things/bulk", files={"thingsFile": ("things.txt", b"lamp\n", "text/plain")},
    )

    assert resp.status_code == 400
    assert backend.requests == []


async def test_bulk_things_one_call_per_name(authed_client, backend):
    backend.on("POST", "/things", 201, json={"id": "t1"})

    resp = await authed_client.post(
        "/things/bulk", files={"thingsFile": ("things.csv", b"lamp\nfan\n", "text/csv")},
    )

    assert resp.status_code == 303
    names = [json.loads(r.content)["name"] for r in backend.calls("POST", "/things")]
    assert names == ["lamp", "fan"]


# -- Connections ---------------------------------------------------------------


async def test_connect_thing_to_channel_single_call(authed_client, backend):
    backend.on("POST", "/connect", 201)

    resp = await authed_client.post("/things/t1/connectThing", data={"channelID": "c1"})

    assert resp.status_code == 303
    assert resp.headers["location"] == "/things/t1/channels"
    calls = backend.calls("POST", "/connect")
    assert len(calls) == 1
    assert json.loads(calls[0].content) == {"channel_ids": ["c1"], "thing_ids": ["t1"]}


async def test_connect_from_channel_page(authed_client, backend):
    backend.on("POST", "/connect", 201)

    resp = await authed_client.post("/channels/c1/connectThing", data={"thingID": "t1"})

    assert resp.status_code == 303
    assert resp.headers["location"] == "/channels/c1/things"
    body = json.loads(backend.calls("POST", "/connect")[0].content)
    assert body == {"channel_ids": ["c1"], "thing_ids": ["t1"]}


async def test_connect_missing_channel_is_malformed(authed_client, backend):
    resp = await authed_client.post("/things/t1/connect", data={})

    assert resp.status_code == 400
    assert backend.requests == []


async def test_connect_csv_binds_all_things_to_channel(authed_client, backend):
    backend.on("POST", "/connect", 201)

    resp = await authed_client.post(
        "/connect", data={"chanID": "c1"},
        files={"thingsFile": ("things.csv", b"t1\nt2\n", "text/csv")},
    )

    assert resp.status_code == 303
    body = json.loads(backend.calls("POST", "/connect")[0].content)
    assert body == {"channel_ids": ["c1", "c1"], "thing_ids": ["t1", "t2"]}


# -- Updates -------------------------------------------------------------------


async def test_json_update_thing(authed_client, backend):
    backend.on("PATCH", "/things/t1", json={"id": "t1", "name": "lamp-2"})

    resp = await authed_client.post(
        "/things/t1", json={"name": "lamp-2", "metadata": {"room": "hall"}},
    )

    assert resp.status_code == 303
    assert resp.headers["location"] == "/things/t1"
    body = json.loads(backend.calls("PATCH", "/things/t1")[0].content)
    assert body == {"name": "lamp-2", "metadata": {"room": "hall"}}


async def test_json_update_bad_body(authed_client, backend):
    resp = await authed_client.post(
        "/things/t1", content=b"not json",
        headers={"Content-Type": "application/json"},
    )

    assert resp.status_code == 400
    assert backend.requests == []


async def test_disable_thing(authed_client, backend):
    backend.on("POST", "/things/t1/disable", json={"id": "t1", "status": "disabled"})

    resp = await authed_client.post("/things/disabled", data={"thingID": "t1"})

    assert resp.status_code == 303
    assert resp.headers["location"] == "/things"


# -- Messages ------------------------------------------------------------------


async def test_publish_with_subtopic(authed_client, backend):
    backend.on("POST", "/channels/c1/messages/room/temp", 202)

    resp = await authed_client.post("/messages", data={
        "channelID": "c1", "thingKey": "k-1", "subtopic": "room/temp",
        "message": '[{"n":"temp","v":21}]',
    })

    assert resp.status_code == 303
    assert resp.headers["location"] == "/readmessages?chanID=c1"
    req = backend.calls("POST", "/channels/c1/messages/room/temp")[0]
    assert req.headers["Authorization"] == "Thing k-1"


async def test_publish_denied_key_is_403(authed_client, backend):
    backend.on("POST", "/channels/c1/messages", 403)

    resp = await authed_client.post("/messages", data={
        "channelID": "c1", "thingKey": "bad", "message": "[]",
    })

    assert resp.status_code == 403


async def test_publish_malformed_subtopic(authed_client, backend):
    resp = await authed_client.post("/messages", data={
        "channelID": "c1", "thingKey": "k-1", "subtopic": "room*", "message": "[]",
    })

    assert resp.status_code == 400
    assert backend.requests == []


# -- Service endpoints ---------------------------------------------------------


async def test_version(client):
    resp = await client.get("/version")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "pass"
    assert body["description"] == "ui service"


async def test_version_instance_id_is_stable(client):
    first = (await client.get("/version")).json()
    second = (await client.get("/version")).json()

    assert first["instance_id"]
    assert first["instance_id"] == second["instance_id"]


async def test_metrics_count_route_calls(client, backend):
    await client.get("/login")

    resp = await client.get("/metrics")

    assert resp.status_code == 200
    assert 'ui_api_request_count_total{method="login"}' in resp.text

"""Request Decoders — cookies, forms, JSON bodies, CSV uploads.

Invariants:
    - Missing token cookie → NoCookieError before the body is read
    - Update bodies keep only the listed fields and type-check them
    - Refresh `ref` survives only as a local path
    - Subtopics normalize to dotted form; mixed wildcard segments are rejected
    - A malformed CSV row aborts the whole upload
"""

import io
import json
from urllib.parse import urlencode

import pytest
from starlette.datastructures import UploadFile
from starlette.requests import Request

from gui.api import decoders as d
from gui.api.csv_import import parse_rows, read_csv_rows
from gui.core.errors import (
    MalformedDataError, MalformedSubtopicError, NoCookieError,
    UnsupportedFileError,
)

TOKEN = "user-access-token"


def make_request(
    method="POST", path="/", query="", cookies=None, body=b"",
    content_type=None, path_params=None,
) -> Request:
    headers = []
    if cookies:
        cookie = "; ".join(f"{k}={v}" for k, v in cookies.items())
        headers.append((b"cookie", cookie.encode()))
    if content_type:
        headers.append((b"content-type", content_type.encode()))
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": query.encode(),
        "headers": headers,
        "path_params": path_params or {},
    }

    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


def form_request(fields, **kwargs) -> Request:
    return make_request(
        cookies={"token": TOKEN},
        body=urlencode(fields, doseq=True).encode(),
        content_type="application/x-www-form-urlencoded",
        **kwargs,
    )


# -- Token and refresh ---------------------------------------------------------


def test_read_token_requires_cookie():
    with pytest.raises(NoCookieError):
        d.read_token(make_request())


def test_read_token_rejects_empty_cookie():
    with pytest.raises(NoCookieError):
        d.read_token(make_request(cookies={"token": ""}))


@pytest.mark.parametrize("ref,expected", [
    ("/things", "/things"),
    ("/things?offset=10", "/things?offset=10"),
    ("//evil.example", "/"),
    ("https://evil.example/", "/"),
    ("/\\evil", "/"),
    ("/\t/evil.example", "/"),
    ("/\n/evil.example", "/"),
    ("/\r/evil.example", "/"),
    ("/things\x7f", "/"),
    ("https:///evil.example", "/"),
    (None, "/"),
    ("", "/"),
])
def test_safe_ref(ref, expected):
    assert d.safe_ref(ref) == expected


async def test_decode_refresh_keeps_local_ref():
    req = await d.decode_refresh(make_request(
        method="GET", query="ref=%2Fchannels", cookies={"refresh_token": "r1"},
    ))
    assert req.refresh_token == "r1"
    assert req.ref == "/channels"


async def test_decode_refresh_without_cookie():
    with pytest.raises(NoCookieError) as exc_info:
        await d.decode_refresh(make_request(method="GET", cookies={"token": TOKEN}))
    assert exc_info.value.cookie == "refresh_token"


# -- Paging --------------------------------------------------------------------


async def test_decode_list_defaults_and_clamps():
    req = await d.decode_list(make_request(method="GET", cookies={"token": TOKEN}))
    assert (req.offset, req.limit) == (0, 10)

    req = await d.decode_list(make_request(
        method="GET", query="offset=20&limit=1000", cookies={"token": TOKEN},
    ))
    assert (req.offset, req.limit) == (20, 100)


async def test_decode_list_rejects_non_integer():
    with pytest.raises(MalformedDataError):
        await d.decode_list(make_request(
            method="GET", query="limit=ten", cookies={"token": TOKEN},
        ))


# -- JSON updates --------------------------------------------------------------


async def test_json_update_keeps_listed_fields():
    decode = d.json_update_decoder("name", "metadata")
    req = await decode(make_request(
        cookies={"token": TOKEN}, path_params={"id": "t1"},
        body=json.dumps({"name": "lamp", "metadata": {"room": 1}, "owner": "x"}).encode(),
    ))
    assert req.id == "t1"
    assert req.data == {"name": "lamp", "metadata": {"room": 1}}


@pytest.mark.parametrize("body", [
    b"not json",
    b"[1, 2]",
    b'{"metadata": "flat"}',
    b'{"name": 5}',
])
async def test_json_update_rejects_bad_bodies(body):
    decode = d.json_update_decoder("name", "metadata")
    with pytest.raises(MalformedDataError):
        await decode(make_request(
            cookies={"token": TOKEN}, path_params={"id": "t1"}, body=body,
        ))


async def test_json_update_checks_tags():
    decode = d.json_update_decoder("tags")
    with pytest.raises(MalformedDataError):
        await decode(make_request(
            cookies={"token": TOKEN}, path_params={"id": "t1"},
            body=b'{"tags": ["a", 2]}',
        ))


async def test_token_checked_before_body():
    decode = d.json_update_decoder("name")
    with pytest.raises(NoCookieError):
        await decode(make_request(body=b"not json", path_params={"id": "t1"}))


# -- Forms ---------------------------------------------------------------------


async def test_decode_user_creation_parses_json_fields():
    req = await d.decode_user_creation(form_request({
        "name": "alice", "identity": "a@x.com", "secret": "pw",
        "tags": '["ops"]', "metadata": '{"team": "iot"}',
    }))
    assert req.user.credentials.identity == "a@x.com"
    assert req.user.tags == ["ops"]
    assert req.user.metadata == {"team": "iot"}


async def test_decode_user_creation_rejects_bad_metadata():
    with pytest.raises(MalformedDataError):
        await d.decode_user_creation(form_request({
            "identity": "a@x.com", "secret": "pw", "metadata": "{oops",
        }))


async def test_decode_thing_connect_thing_with_channel_in_form():
    req = await d.decode_thing_connect_thing(form_request(
        {"channelID": "c1"}, path_params={"id": "t1"},
    ))
    assert req.conns.channel_ids == ["c1"]
    assert req.conns.thing_ids == ["t1"]


async def test_decode_thing_connect_thing_with_thing_in_form():
    req = await d.decode_thing_connect_thing(form_request(
        {"thingID": "t1"}, path_params={"id": "c1"},
    ))
    assert req.conns.channel_ids == ["c1"]
    assert req.conns.thing_ids == ["t1"]


async def test_decode_assign_collects_types():
    req = await d.decode_assign(form_request(
        {"memberID": "u1", "Type": ["users", "things"]}, path_params={"id": "g1"},
    ))
    assert req.group_id == "g1"
    assert req.member_types == ["users", "things"]


async def test_decode_policy_update_json_actions():
    req = await d.decode_policy_update(form_request({
        "subject": "u1", "object": "c1", "actions": '["m_read", "m_write"]',
    }))
    assert req.policy.actions == ["m_read", "m_write"]


async def test_decode_publish_normalizes_subtopic():
    req = await d.decode_publish(form_request({
        "channelID": "c1", "thingKey": "k-1", "message": "[]", "subtopic": "a/b//c",
    }))
    assert req.subtopic == "a.b.c"
    assert req.thing_key == "k-1"


@pytest.mark.parametrize("subtopic,expected", [
    ("", ""),
    ("a.b", "a.b"),
    ("/a/b/", "a.b"),
    ("a.*.>", "a.*.>"),
])
def test_normalize_subtopic(subtopic, expected):
    assert d.normalize_subtopic(subtopic) == expected


@pytest.mark.parametrize("subtopic", ["a*", "a.b>", "x.*y"])
def test_normalize_subtopic_rejects_mixed_wildcards(subtopic):
    with pytest.raises(MalformedSubtopicError):
        d.normalize_subtopic(subtopic)


# -- CSV -----------------------------------------------------------------------


def test_parse_rows_skips_blank_lines():
    rows = parse_rows("a,a@x.com,pw\n\n b , b@x.com ,pw2\n", columns=3)
    assert rows == [["a", "a@x.com", "pw"], ["b", "b@x.com", "pw2"]]


def test_parse_rows_short_row_names_line():
    with pytest.raises(MalformedDataError) as exc_info:
        parse_rows("a,a@x.com,pw\nb,b@x.com\n", columns=3)
    assert "row 2" in exc_info.value.message


def test_parse_rows_extra_column_names_line():
    with pytest.raises(MalformedDataError) as exc_info:
        parse_rows("a,a@x.com,pw\nb,b@x.com,pw2,admin\n", columns=3)
    assert "row 2" in exc_info.value.message
    assert "got 4" in exc_info.value.message


async def test_read_csv_rows_strips_bom():
    upload = UploadFile(io.BytesIO("\ufefflamp\nfan\n".encode()), filename="things.csv")
    assert await read_csv_rows(upload, columns=1) == [["lamp"], ["fan"]]


async def test_read_csv_rows_rejects_other_suffix():
    upload = UploadFile(io.BytesIO(b"lamp\n"), filename="things.txt")
    with pytest.raises(UnsupportedFileError):
        await read_csv_rows(upload, columns=1)


async def test_read_csv_rows_requires_upload():
    with pytest.raises(MalformedDataError):
        await read_csv_rows(None, columns=1)

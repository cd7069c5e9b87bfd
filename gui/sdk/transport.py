"""SDK Transport — one httpx call per backend operation, with error mapping.

Invariants:
    - Every request carries Content-Type: application/json
    - Authorization: empty token → no header; token containing "Thing " → sent
      unchanged; anything else → "Bearer <token>"
    - A status outside `expected` raises SDKError(op_kind, status, message)
    - Connection/timeout/TLS failures raise SDKError with status_code=None
    - No retry: a failed call surfaces immediately
    - Ids are percent-encoded as single path segments; "." and ".." never
      reach the URL as dot segments

Design Decisions:
    - Single shared AsyncClient (connection pooling); TLS verification is a
      constructor toggle consumed from settings
    - Backend error message taken from the JSON "message" or "error" field,
      falling back to the raw body text
"""

import json
import logging
from urllib.parse import quote

import httpx

from gui.core.domain_types import BEARER_PREFIX, THING_PREFIX, ContentType
from gui.core.errors import SDKError, SDKErrorKind

logger = logging.getLogger(__name__)


def authorization_header(token: str) -> dict[str, str]:
    """Build the Authorization header for a bearer token or a thing key."""
    if not token:
        return {}
    if THING_PREFIX not in token:
        token = BEARER_PREFIX + token
    return {"Authorization": token}


def path_segment(part: str) -> str:
    """Percent-encode one path segment, including '/', '?' and dot segments."""
    segment = quote(part, safe="")
    if segment in (".", ".."):
        return segment.replace(".", "%2E")
    return segment


def extract_error_message(body: bytes) -> str:
    """Pull the human-readable message out of a backend error body."""
    try:
        content = json.loads(body)
    except ValueError:
        return body.decode(errors="replace").strip()
    if isinstance(content, dict):
        for key in ("message", "error"):
            msg = content.get(key)
            if isinstance(msg, str) and msg:
                return msg
    return body.decode(errors="replace").strip()


class HTTPTransport:
    """Wraps httpx.AsyncClient with auth header rules and status checking."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    @classmethod
    def create(
        cls,
        verify_tls: bool = True,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "HTTPTransport":
        return cls(httpx.AsyncClient(
            verify=verify_tls, timeout=timeout, transport=transport,
        ))

    async def request(
        self,
        method: str,
        url: str,
        token: str,
        op_kind: SDKErrorKind,
        *,
        body: bytes | None = None,
        headers: dict[str, str] | None = None,
        expected: tuple[int, ...] = (200,),
        data_plane: bool = False,
    ) -> tuple[httpx.Headers, bytes]:
        """Issue one request; return (headers, body) on an expected status."""
        req_headers = {"Content-Type": ContentType.JSON.value}
        if headers:
            req_headers.update(headers)
        req_headers.update(authorization_header(token))

        try:
            resp = await self.client.request(
                method, url, content=body, headers=req_headers,
            )
        except httpx.HTTPError as e:
            logger.error(
                f"Backend request failed: {method} {url}: {e}",
                extra={"error_code": "SDK_ERROR"},
            )
            raise SDKError(op_kind, None, str(e), data_plane=data_plane)

        if resp.status_code not in expected:
            message = extract_error_message(resp.content)
            logger.warning(
                f"Backend returned {resp.status_code} for {method} {url}",
                extra={"backend_status": resp.status_code},
            )
            raise SDKError(
                op_kind, resp.status_code, message, data_plane=data_plane,
            )

        logger.debug(f"Backend {method} {url} -> {resp.status_code}")
        return resp.headers, resp.content

    async def aclose(self) -> None:
        await self.client.aclose()


class ResourceClient:
    """Shared plumbing for the per-resource capability clients."""

    def __init__(self, transport: HTTPTransport, base_url: str):
        self._transport = transport
        self._base_url = base_url

    def _url(self, endpoint: str, *segments: str) -> str:
        """Base URL + literal endpoint + escaped id segments."""
        return "/".join(
            (self._base_url, endpoint, *(path_segment(s) for s in segments)),
        )

    async def _call(
        self, method: str, url: str, token: str, op_kind: SDKErrorKind,
        **kwargs,
    ) -> tuple[httpx.Headers, bytes]:
        return await self._transport.request(
            method, url, token, op_kind, **kwargs,
        )


def id_from_location(headers: httpx.Headers, prefix: str) -> str:
    """Entity id from a Location header such as /things/configs/<id>."""
    return headers.get("Location", "").removeprefix(prefix)

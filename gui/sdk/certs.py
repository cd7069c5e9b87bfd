"""Certs Client — thing certificates issued by the certs service."""

import json
from datetime import datetime

from gui.core.errors import SDKErrorKind
from gui.sdk.models import Cert, Page, WireModel
from gui.sdk.transport import ResourceClient

CERTS_ENDPOINT = "certs"
SERIALS_ENDPOINT = "serials"


class _Revocation(WireModel):
    revocation_time: datetime


class CertsClient(ResourceClient):
    """Implements CertClient against the certs service."""

    async def issue_cert(self, thing_id: str, valid: str, token: str) -> Cert:
        payload = json.dumps({"thing_id": thing_id, "ttl": valid}).encode()
        _, body = await self._call(
            "POST", self._url(CERTS_ENDPOINT), token,
            SDKErrorKind.CREATION_FAILED, body=payload, expected=(201,),
        )
        return Cert.model_validate_json(body)

    async def view_cert(self, cert_id: str, token: str) -> Cert:
        _, body = await self._call(
            "GET", self._url(CERTS_ENDPOINT, cert_id), token,
            SDKErrorKind.FETCH_FAILED,
        )
        return Cert.model_validate_json(body)

    async def view_cert_by_thing(self, thing_id: str, token: str) -> Page[Cert]:
        _, body = await self._call(
            "GET", self._url(SERIALS_ENDPOINT, thing_id), token,
            SDKErrorKind.FETCH_FAILED,
        )
        return Page[Cert].from_body(body, "certs")

    async def revoke_cert(self, thing_id: str, token: str) -> datetime:
        _, body = await self._call(
            "DELETE", self._url(CERTS_ENDPOINT, thing_id), token,
            SDKErrorKind.REMOVAL_FAILED,
        )
        return _Revocation.model_validate_json(body).revocation_time

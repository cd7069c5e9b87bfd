"""Bootstrap Client — provisioning configs binding external ids to things."""

import json

from gui.core.domain_types import THING_PREFIX
from gui.core.errors import SDKError, SDKErrorKind
from gui.sdk.models import BootstrapConfig, Page, PageMetadata, with_query_params
from gui.sdk.transport import ResourceClient, id_from_location

CONFIGS_ENDPOINT = "things/configs"
BOOTSTRAP_ENDPOINT = "things/bootstrap"
WHITELIST_ENDPOINT = "things/state"
BOOTSTRAP_CERTS_ENDPOINT = "things/configs/certs"
BOOTSTRAP_CONNECTIONS_ENDPOINT = "things/configs/connections"


class BootstrapsClient(ResourceClient):
    """Implements BootstrapClient against the bootstrap service."""

    async def add_bootstrap(self, cfg: BootstrapConfig, token: str) -> str:
        headers, _ = await self._call(
            "POST", self._url(CONFIGS_ENDPOINT), token,
            SDKErrorKind.CREATION_FAILED, body=cfg.to_body(), expected=(200, 201),
        )
        return id_from_location(headers, f"/{CONFIGS_ENDPOINT}/")

    async def view_bootstrap(self, config_id: str, token: str) -> BootstrapConfig:
        _, body = await self._call(
            "GET", self._url(CONFIGS_ENDPOINT, config_id), token,
            SDKErrorKind.FETCH_FAILED,
        )
        return BootstrapConfig.model_validate_json(body)

    async def update_bootstrap(self, cfg: BootstrapConfig, token: str) -> None:
        if not cfg.thing_id:
            raise SDKError(SDKErrorKind.UPDATE_FAILED, 400, "missing thing id")
        await self._call(
            "PUT", self._url(CONFIGS_ENDPOINT, cfg.thing_id), token,
            SDKErrorKind.UPDATE_FAILED, body=cfg.to_body(),
        )

    async def update_bootstrap_certs(
        self, config_id: str, client_cert: str, client_key: str, ca: str, token: str,
    ) -> BootstrapConfig:
        payload = BootstrapConfig(
            client_cert=client_cert, client_key=client_key, ca_cert=ca,
        ).to_body()
        _, body = await self._call(
            "PATCH", self._url(BOOTSTRAP_CERTS_ENDPOINT, config_id), token,
            SDKErrorKind.UPDATE_FAILED, body=payload,
        )
        return BootstrapConfig.model_validate_json(body)

    async def update_bootstrap_connection(self, config_id: str, channels: list[str], token: str) -> None:
        await self._call(
            "PUT", self._url(BOOTSTRAP_CONNECTIONS_ENDPOINT, config_id), token,
            SDKErrorKind.UPDATE_FAILED,
            body=json.dumps({"channels": channels}).encode(),
        )

    async def remove_bootstrap(self, config_id: str, token: str) -> None:
        await self._call(
            "DELETE", self._url(CONFIGS_ENDPOINT, config_id), token,
            SDKErrorKind.REMOVAL_FAILED, expected=(204,),
        )

    async def bootstrap(self, external_id: str, external_key: str) -> BootstrapConfig:
        _, body = await self._call(
            "GET", self._url(BOOTSTRAP_ENDPOINT, external_id),
            THING_PREFIX + external_key, SDKErrorKind.FETCH_FAILED,
        )
        return BootstrapConfig.model_validate_json(body)

    async def bootstraps(self, pm: PageMetadata, token: str) -> Page[BootstrapConfig]:
        url = with_query_params(self._base_url, CONFIGS_ENDPOINT, pm)
        _, body = await self._call("GET", url, token, SDKErrorKind.LIST_FAILED)
        return Page[BootstrapConfig].from_body(body, "configs")

    async def whitelist(self, cfg: BootstrapConfig, token: str) -> None:
        if not cfg.thing_id:
            raise SDKError(SDKErrorKind.UPDATE_FAILED, 400, "missing thing id")
        await self._call(
            "PUT", self._url(WHITELIST_ENDPOINT, cfg.thing_id), token,
            SDKErrorKind.UPDATE_FAILED,
            body=json.dumps({"state": cfg.state or 0}).encode(),
            expected=(201,),
        )

"""Health Client — /health checks of the backend services."""

from gui.core.errors import SDKError, SDKErrorKind
from gui.sdk.models import HealthInfo
from gui.sdk.transport import HTTPTransport, ResourceClient


class HealthChecker(ResourceClient):
    """Implements HealthClient over a service-name → base URL table."""

    def __init__(self, transport: HTTPTransport, service_urls: dict[str, str]):
        super().__init__(transport, "")
        self._service_urls = service_urls

    async def health(self, service: str) -> HealthInfo:
        base = self._service_urls.get(service)
        if not base:
            raise SDKError(
                SDKErrorKind.FETCH_FAILED, 400, f"unknown service: {service}",
            )
        _, body = await self._call(
            "GET", f"{base}/health", "", SDKErrorKind.FETCH_FAILED,
        )
        return HealthInfo.model_validate_json(body)

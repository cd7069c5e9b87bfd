"""SDK Manager — process-wide PlatformSDK owned by the application lifespan.

Invariants:
    - Exactly one PlatformSDK (one connection pool) per process
    - get_sdk() before init_sdk() raises RuntimeError

Design Decisions:
    - Singleton initialized on startup: FastAPI lifespan manages lifecycle
      (no global import side effects)
    - get_sdk is the FastAPI dependency; tests replace it via dependency_overrides
"""

import logging

import httpx

from gui.config import Settings
from gui.sdk.client import PlatformSDK

logger = logging.getLogger(__name__)

# Singleton (initialized on startup)
sdk: PlatformSDK | None = None


def init_sdk(settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
    global sdk
    sdk = PlatformSDK.from_settings(settings, transport=transport)
    logger.info(
        f"SDK ready: users={settings.users_url} things={settings.things_url}",
    )


async def close_sdk():
    global sdk
    if sdk is not None:
        await sdk.aclose()
        sdk = None


def get_sdk() -> PlatformSDK:
    """FastAPI dependency for the platform SDK."""
    if not sdk:
        raise RuntimeError("SDK not initialized")
    return sdk

"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every variable is read with the MF_ prefix (MF_GUI_PORT, MF_USERS_URL, ...)
    - get_settings() is cached (lru_cache) — single instance per process
    - Service URLs never end with a slash (endpoints are joined with "/")
    - ui_instance_id is never empty: a uuid4 is generated when unset

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults match a local docker-compose deployment of the platform
"""

import uuid
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """GUI service settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MF_", env_file=".env", case_sensitive=False,
    )

    # HTTP server
    gui_host: str = "0.0.0.0"
    gui_port: int = 9090
    gui_secure_cookies: bool = False
    ui_instance_id: str = ""
    ui_host_url: str = "http://localhost:9090"

    # Backend services
    users_url: str = "http://localhost:9002"
    things_url: str = "http://localhost:9000"
    http_adapter_url: str = "http://localhost:8008"
    reader_url: str = "http://localhost:9007"
    bootstrap_url: str = "http://localhost:9013"
    certs_url: str = "http://localhost:9019"

    # SDK
    msg_content_type: str = "application/senml+json"
    verification_tls: bool = False
    sdk_timeout: float = 30.0

    # Observability
    gui_log_level: str = "INFO"
    gui_log_format: str = "json"

    @field_validator(
        "users_url", "things_url", "http_adapter_url", "reader_url",
        "bootstrap_url", "certs_url", "ui_host_url",
    )
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @model_validator(mode="after")
    def default_instance_id(self) -> "Settings":
        if not self.ui_instance_id:
            self.ui_instance_id = str(uuid.uuid4())
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()

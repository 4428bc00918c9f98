"""Server configuration: reads settings from environment variables.

All settings have sensible defaults for local development.  In production
the values are typically overridden via env vars or a ``.env`` file.
"""

import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ServerSettings:
    """Immutable server configuration read from environment at startup."""

    # Network
    host: str = "0.0.0.0"
    port: int = 8080

    # CORS: comma-separated origins, or "*" for wide-open dev mode
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    # Catalog YAML (None → ScreenCatalog default, v1/screens.yaml)
    catalog_path: str | None = None

    # Stage the client is sent to after onboarding completes
    next_stage: str = "subscription"

    # Logging
    log_level: str = "INFO"

    # Upper bound on live flow instances held in memory
    max_active_flows: int = 10_000

    # Idle minutes before an unfinished flow is dropped; 0 disables expiry
    flow_ttl_minutes: int = 60

    # When set, every request carrying X-User-ID must also carry a matching
    # X-Proxy-Secret, proving the identity header came from the gateway.
    trusted_proxy_secret: str | None = None


def load_settings() -> ServerSettings:
    """Build settings from ``SERVER_*`` / ``INTAKE_*`` environment variables."""
    raw_origins = os.getenv("SERVER_CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]

    return ServerSettings(
        host=os.getenv("SERVER_HOST", "0.0.0.0"),
        port=int(os.getenv("SERVER_PORT", "8080")),
        cors_origins=origins,
        catalog_path=os.getenv("INTAKE_CATALOG_PATH") or None,
        next_stage=os.getenv("INTAKE_NEXT_STAGE", "subscription"),
        log_level=os.getenv("SERVER_LOG_LEVEL", "INFO").upper(),
        max_active_flows=int(os.getenv("SERVER_MAX_ACTIVE_FLOWS", "10000")),
        flow_ttl_minutes=int(os.getenv("SERVER_FLOW_TTL_MINUTES", "60")),
        trusted_proxy_secret=os.getenv("TRUSTED_PROXY_SECRET") or None,
    )

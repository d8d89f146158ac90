"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
Per-network secrets (pinning keys, DNS credentials) are not settings: they are
resolved per deployment from the network's config reference.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        description="Async SQLAlchemy connection string for the deployments database",
    )

    # Staging
    dist_dir: str = Field(
        default="./dist",
        description="Directory holding the pre-built shop distributable assets",
    )

    # IPFS gateways
    ipfs_public_gateway: str = Field(
        default="https://gateway.ipfs.io",
        description="Generic public IPFS gateway primed after every pinned publish",
    )
    ipfs_branded_gateway: str = Field(
        default="https://ipfs-prod.ogn.app",
        description="Branded IPFS mirror primed after every pinned publish",
    )
    pinata_gateway: str = Field(
        default="https://gateway.pinata.cloud",
        description="Pinata public gateway, recorded as the deployment gateway for pinned publishes",
    )
    pinata_api_url: str = Field(
        default="https://api.pinata.cloud",
        description="Pinata pinning API base URL",
    )

    @field_validator(
        "ipfs_public_gateway",
        "ipfs_branded_gateway",
        "pinata_gateway",
        "pinata_api_url",
        "cloudflare_api_url",
        "clouddns_api_url",
    )
    @classmethod
    def validate_http_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            msg = f"URL must use http or https: {v!r}"
            raise ValueError(msg)
        return v.rstrip("/")

    # IPFS backends
    ipfs_cluster_default_user: str = Field(
        default="dshop",
        description="Username for IPFS cluster basic auth when the network config does not set one",
    )
    local_node_marker: str = Field(
        default="localhost",
        description="Substring of an IPFS API URL that identifies a local development node",
    )
    ipfs_request_timeout: float = Field(
        default=120.0,
        description="Timeout in seconds for IPFS upload requests",
        gt=0,
    )

    # Gateway priming
    prime_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for each gateway priming request",
        gt=0,
    )
    prime_files: bool = Field(
        default=True,
        description="Also prime every staged file individually, not just the root",
    )

    # DNS
    dns_gateway_host: str = Field(
        default="ipfs-prod.ogn.app",
        description="Gateway hostname that shop subdomains are CNAMEd to",
    )
    dns_request_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for DNS provider API requests",
        gt=0,
    )
    cloudflare_api_url: str = Field(
        default="https://api.cloudflare.com/client/v4",
        description="Cloudflare v4 API base URL",
    )
    clouddns_api_url: str = Field(
        default="https://dns.googleapis.com/dns/v1",
        description="Google Cloud DNS v1 API base URL",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()  # type: ignore[call-arg]

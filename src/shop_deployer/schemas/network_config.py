"""Pydantic v2 schemas for per-network deploy configuration and shop metadata.

A network's config reference resolves to a :class:`ResolvedNetworkConfig`
once, up front, so the pipeline never reads keys out of an untyped dict.
Field aliases accept the camelCase keys stored by the shop backend.
"""

import json
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_OPTIONAL_STRING_FIELDS = (
    "domain",
    "pinata_key",
    "pinata_secret",
    "ipfs_cluster_user",
    "ipfs_cluster_password",
    "cloudflare_email",
    "cloudflare_api_key",
    "ipfs_gateway",
)


class ResolvedNetworkConfig(BaseModel):
    """Decrypted network configuration.

    Zero or more pinning providers may be configured at once; at most one
    DNS provider is honored (Cloudflare first, then Cloud DNS).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    domain: str | None = Field(default=None, description="DNS zone shop subdomains live under")
    pinata_key: str | None = Field(default=None, alias="pinataKey")
    pinata_secret: str | None = Field(default=None, alias="pinataSecret")
    ipfs_cluster_user: str | None = Field(default=None, alias="ipfsClusterUser")
    ipfs_cluster_password: str | None = Field(default=None, alias="ipfsClusterPassword")
    cloudflare_email: str | None = Field(default=None, alias="cloudflareEmail")
    cloudflare_api_key: str | None = Field(default=None, alias="cloudflareApiKey")
    gcp_credentials: dict[str, Any] | None = Field(default=None, alias="gcpCredentials")
    ipfs_gateway: str | None = Field(default=None, alias="ipfsGateway", description="Extra gateway to prime")

    @field_validator(*_OPTIONAL_STRING_FIELDS, mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("gcp_credentials", mode="before")
    @classmethod
    def parse_gcp_credentials(cls, v: Any) -> Any:
        if isinstance(v, str):
            if not v.strip():
                return None
            return json.loads(v)
        return v

    @field_validator("ipfs_gateway")
    @classmethod
    def validate_gateway_url(cls, v: str | None) -> str | None:
        if not v:
            return v
        parts = urlsplit(v)
        try:
            parts.port
        except ValueError as exc:
            msg = f"ipfsGateway has an invalid port: {v!r}"
            raise ValueError(msg) from exc
        if parts.scheme not in ("http", "https") or not parts.hostname:
            msg = f"ipfsGateway must be an http or https URL: {v!r}"
            raise ValueError(msg)
        return v.rstrip("/")

    @model_validator(mode="after")
    def check_dns_provider(self) -> "ResolvedNetworkConfig":
        if self.dns_provider_name is not None and not self.domain:
            msg = f"DNS provider {self.dns_provider_name!r} is configured but no domain (zone) is set"
            raise ValueError(msg)
        if self.cloudflare_api_key and not self.cloudflare_email:
            msg = "cloudflareApiKey requires cloudflareEmail"
            raise ValueError(msg)
        return self

    @property
    def has_pinata(self) -> bool:
        return bool(self.pinata_key and self.pinata_secret)

    @property
    def dns_provider_name(self) -> str | None:
        """Name of the DNS provider that will be used, first configured wins."""
        if self.cloudflare_api_key:
            return "cloudflare"
        if self.gcp_credentials:
            return "clouddns"
        return None


class PublicShopConfig(BaseModel):
    """Public shop metadata read from the staged ``config.json``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    full_title: str | None = Field(default=None, alias="fullTitle")
    meta_description: str | None = Field(default=None, alias="metaDescription")
    favicon: str | None = None

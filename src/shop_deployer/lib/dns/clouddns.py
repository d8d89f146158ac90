"""Google Cloud DNS provider.

Uses the Cloud DNS v1 REST API. The credentials mapping is the network's
GCP service account key (``type``, ``project_id``, ``private_key``,
``client_email``, ...). An OAuth2 access token with the
``ndev.clouddns.readwrite`` scope is minted from it with google-auth for
each update. A mapping may instead carry a ready ``access_token`` next to
``project_id``, which is used as is.

All record changes for a shop are submitted as one atomic change: existing
rrsets with the same name and type are deleted and the new ones added.
"""

import asyncio
from collections.abc import Mapping
from typing import Any

import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account
from loguru import logger

from shop_deployer.lib.dns.base import BaseDnsProvider, DnsProviderError, DnsRecord, DnsRecordRequest, desired_records

DEFAULT_API_URL = "https://dns.googleapis.com/dns/v1"
DEFAULT_TIMEOUT = 30.0
DEFAULT_TTL = 300
CLOUDDNS_SCOPES = ["https://www.googleapis.com/auth/ndev.clouddns.readwrite"]


def _fqdn(name: str) -> str:
    return name if name.endswith(".") else f"{name}."


def _rrdata(record: DnsRecord) -> str:
    if record.record_type == "TXT":
        return f'"{record.content}"'
    if record.record_type == "CNAME":
        return _fqdn(record.content)
    return record.content


def mint_access_token(service_account_info: Mapping[str, Any]) -> str:
    """Exchange a service account key for a Cloud DNS access token.

    Blocking: performs the OAuth2 token request.

    Raises:
        ValueError: If the key is malformed.
        GoogleAuthError: If the token exchange fails.
    """
    credentials = service_account.Credentials.from_service_account_info(
        dict(service_account_info),
        scopes=CLOUDDNS_SCOPES,
    )
    credentials.refresh(GoogleAuthRequest())
    return credentials.token


class CloudDnsProvider(BaseDnsProvider):
    """Google Cloud DNS provider."""

    def __init__(
        self,
        credentials: Mapping[str, Any],
        timeout: float = DEFAULT_TIMEOUT,
        api_url: str = DEFAULT_API_URL,
    ) -> None:
        project_id = credentials.get("project_id")
        if not project_id:
            raise DnsProviderError("clouddns", "Credentials must include project_id")
        access_token = credentials.get("access_token")
        if not access_token and not (credentials.get("private_key") and credentials.get("client_email")):
            raise DnsProviderError(
                "clouddns",
                "Credentials must be a service account key (private_key, client_email) or include an access_token",
            )
        self._project_id = str(project_id)
        self._access_token = str(access_token) if access_token else None
        self._service_account_info = None if access_token else dict(credentials)
        self._timeout = timeout
        self._api_url = api_url.rstrip("/")

    @property
    def provider_name(self) -> str:
        return "clouddns"

    @property
    def _project_url(self) -> str:
        return f"{self._api_url}/projects/{self._project_id}"

    async def _get_access_token(self) -> str:
        if self._access_token is not None:
            return self._access_token
        assert self._service_account_info is not None
        try:
            token = await asyncio.to_thread(mint_access_token, self._service_account_info)
        except (GoogleAuthError, ValueError) as e:
            logger.warning("Cloud DNS token exchange failed: {}", e)
            raise DnsProviderError("clouddns", f"Could not obtain an access token: {e}") from e
        if not token:
            raise DnsProviderError("clouddns", "Token exchange returned no access token")
        return token

    async def set_records(self, request: DnsRecordRequest) -> None:
        """Point ``{subdomain}.{zone}`` at the gateway and set its DNSLink.

        Raises:
            DnsProviderError: On transport or service errors, or if no managed
                zone serves the zone's DNS name.
        """
        access_token = await self._get_access_token()
        try:
            async with httpx.AsyncClient(
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self._timeout,
            ) as client:
                managed_zone = await self._get_managed_zone(client, request.zone)
                zone_url = f"{self._project_url}/managedZones/{managed_zone}"

                additions: list[dict[str, Any]] = []
                deletions: list[dict[str, Any]] = []
                for record in desired_records(request):
                    deletions.extend(await self._existing_rrsets(client, zone_url, record))
                    additions.append(
                        {
                            "name": _fqdn(record.name),
                            "type": record.record_type,
                            "ttl": DEFAULT_TTL,
                            "rrdatas": [_rrdata(record)],
                        }
                    )

                response = await client.post(
                    f"{zone_url}/changes",
                    json={"additions": additions, "deletions": deletions},
                )
                response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.warning("Cloud DNS request timed out")
            raise DnsProviderError("clouddns", "Request timed out") from e
        except httpx.HTTPStatusError as e:
            logger.warning("Cloud DNS HTTP error {}", e.response.status_code)
            raise DnsProviderError(
                "clouddns",
                f"Provider returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.warning("Cloud DNS connection error")
            raise DnsProviderError("clouddns", "Connection to DNS provider failed") from e
        except ValueError as e:
            raise DnsProviderError("clouddns", f"Malformed provider response: {e}") from e

        logger.info("Cloud DNS records set for {} -> {}", request.hostname, request.dnslink_value)

    async def _get_managed_zone(self, client: httpx.AsyncClient, zone: str) -> str:
        response = await client.get(f"{self._project_url}/managedZones", params={"dnsName": _fqdn(zone)})
        response.raise_for_status()
        zones = response.json().get("managedZones") or []
        if not zones:
            raise DnsProviderError("clouddns", f"No managed zone for {zone!r}")
        return zones[0]["name"]

    async def _existing_rrsets(
        self,
        client: httpx.AsyncClient,
        zone_url: str,
        record: DnsRecord,
    ) -> list[dict[str, Any]]:
        response = await client.get(
            f"{zone_url}/rrsets",
            params={"name": _fqdn(record.name), "type": record.record_type},
        )
        response.raise_for_status()
        return [
            {key: rrset[key] for key in ("name", "type", "ttl", "rrdatas") if key in rrset}
            for rrset in response.json().get("rrsets") or []
        ]

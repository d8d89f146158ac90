"""Cloudflare DNS provider.

Uses the Cloudflare v4 REST API with global API key authentication
(``X-Auth-Email`` / ``X-Auth-Key``). Records are upserted: looked up by
type and name, then updated in place or created.
"""

from typing import Any

import httpx
from loguru import logger

from shop_deployer.lib.dns.base import BaseDnsProvider, DnsProviderError, DnsRecord, DnsRecordRequest, desired_records

DEFAULT_API_URL = "https://api.cloudflare.com/client/v4"
DEFAULT_TIMEOUT = 30.0

# ttl=1 means "automatic" in Cloudflare
_AUTO_TTL = 1


class CloudflareDnsProvider(BaseDnsProvider):
    """Cloudflare DNS provider."""

    def __init__(
        self,
        email: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        api_url: str = DEFAULT_API_URL,
    ) -> None:
        self._email = email
        self._api_key = api_key
        self._timeout = timeout
        self._api_url = api_url.rstrip("/")

    @property
    def provider_name(self) -> str:
        return "cloudflare"

    def _headers(self) -> dict[str, str]:
        return {"X-Auth-Email": self._email, "X-Auth-Key": self._api_key}

    async def set_records(self, request: DnsRecordRequest) -> None:
        """Point ``{subdomain}.{zone}`` at the gateway and set its DNSLink.

        Raises:
            DnsProviderError: On transport or service errors, or if the zone
                does not exist in the account.
        """
        try:
            async with httpx.AsyncClient(
                base_url=self._api_url,
                headers=self._headers(),
                timeout=self._timeout,
            ) as client:
                zone_id = await self._get_zone_id(client, request.zone)
                for record in desired_records(request):
                    await self._upsert_record(client, zone_id, record)
        except httpx.TimeoutException as e:
            logger.warning("Cloudflare request timed out")
            raise DnsProviderError("cloudflare", "Request timed out") from e
        except httpx.HTTPStatusError as e:
            logger.warning("Cloudflare HTTP error {}", e.response.status_code)
            raise DnsProviderError(
                "cloudflare",
                f"Provider returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.warning("Cloudflare connection error")
            raise DnsProviderError("cloudflare", "Connection to DNS provider failed") from e
        except ValueError as e:
            raise DnsProviderError("cloudflare", f"Malformed provider response: {e}") from e

        logger.info("Cloudflare records set for {} -> {}", request.hostname, request.dnslink_value)

    async def _call(self, client: httpx.AsyncClient, method: str, url: str, **kwargs: Any) -> Any:
        response = await client.request(method, url, **kwargs)
        response.raise_for_status()
        body = response.json()
        if not isinstance(body, dict):
            raise DnsProviderError("cloudflare", f"{method} {url} returned a non-object body")
        if not body.get("success", False):
            errors = body.get("errors") or []
            detail = "; ".join(str(err.get("message", err)) for err in errors) or "unknown error"
            raise DnsProviderError("cloudflare", f"{method} {url} failed: {detail}")
        return body.get("result")

    async def _get_zone_id(self, client: httpx.AsyncClient, zone: str) -> str:
        result = await self._call(client, "GET", "/zones", params={"name": zone})
        if not result:
            raise DnsProviderError("cloudflare", f"Zone {zone!r} not found")
        return result[0]["id"]

    async def _upsert_record(self, client: httpx.AsyncClient, zone_id: str, record: DnsRecord) -> None:
        existing = await self._call(
            client,
            "GET",
            f"/zones/{zone_id}/dns_records",
            params={"type": record.record_type, "name": record.name},
        )
        payload = {
            "type": record.record_type,
            "name": record.name,
            "content": record.content,
            "ttl": _AUTO_TTL,
        }
        if existing:
            record_id = existing[0]["id"]
            await self._call(client, "PUT", f"/zones/{zone_id}/dns_records/{record_id}", json=payload)
            logger.debug("Updated {} record {}", record.record_type, record.name)
        else:
            await self._call(client, "POST", f"/zones/{zone_id}/dns_records", json=payload)
            logger.debug("Created {} record {}", record.record_type, record.name)

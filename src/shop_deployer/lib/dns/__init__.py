"""DNS library — point shop subdomains at IPFS content via DNSLink.

Public API:
    - BaseDnsProvider: Abstract provider interface
    - DnsRecordRequest: What to point where
    - DnsProviderError: Provider transport/service failure
    - CloudflareDnsProvider / CloudDnsProvider: Providers
    - select_dns_provider: Build the single provider a network config selects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shop_deployer.lib.dns.base import BaseDnsProvider, DnsProviderError, DnsRecord, DnsRecordRequest, desired_records
from shop_deployer.lib.dns.clouddns import CloudDnsProvider
from shop_deployer.lib.dns.cloudflare import CloudflareDnsProvider

if TYPE_CHECKING:
    from shop_deployer.core.config import Settings
    from shop_deployer.schemas.network_config import ResolvedNetworkConfig


def select_dns_provider(config: ResolvedNetworkConfig, settings: Settings) -> BaseDnsProvider | None:
    """Build the DNS provider for a network config.

    At most one provider is honored: Cloudflare when its API key is set,
    otherwise Cloud DNS when GCP credentials are set.

    Args:
        config: Resolved network config.
        settings: Application settings (API URLs, timeout).

    Returns:
        The provider, or None when no DNS provider is configured.
    """
    if config.cloudflare_api_key:
        return CloudflareDnsProvider(
            email=config.cloudflare_email or "",
            api_key=config.cloudflare_api_key,
            timeout=settings.dns_request_timeout,
            api_url=settings.cloudflare_api_url,
        )
    if config.gcp_credentials:
        return CloudDnsProvider(
            config.gcp_credentials,
            timeout=settings.dns_request_timeout,
            api_url=settings.clouddns_api_url,
        )
    return None


__all__ = [
    "BaseDnsProvider",
    "CloudDnsProvider",
    "CloudflareDnsProvider",
    "DnsProviderError",
    "DnsRecord",
    "DnsRecordRequest",
    "desired_records",
    "select_dns_provider",
]

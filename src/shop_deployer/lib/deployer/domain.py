"""Domain update stage — point ``https://{subdomain}.{zone}`` at published content."""

from loguru import logger

from shop_deployer.core.config import Settings
from shop_deployer.lib.dns import DnsRecordRequest, select_dns_provider
from shop_deployer.schemas.network_config import ResolvedNetworkConfig


def shop_domain(subdomain: str, zone: str) -> str:
    """Human-facing URL of a shop."""
    return f"https://{subdomain}.{zone}"


async def update_domain(
    config: ResolvedNetworkConfig,
    subdomain: str,
    content_hash: str | None,
    settings: Settings,
) -> str | None:
    """Set the shop's DNS records at the configured provider.

    Args:
        config: Resolved network config; selects the provider and zone.
        subdomain: Shop subdomain.
        content_hash: Published content identifier.
        settings: Application settings (gateway host, API URLs).

    Returns:
        The shop domain URL, or None when no DNS provider is configured or
        there is no content to point at.

    Raises:
        DnsProviderError: If the provider call fails.
    """
    provider = select_dns_provider(config, settings)
    if provider is None:
        logger.debug("No DNS provider configured, domain left unset")
        return None
    if not content_hash:
        logger.warning(
            "DNS provider {} configured but nothing was published, skipping domain update",
            provider.provider_name,
        )
        return None

    assert config.domain is not None
    request = DnsRecordRequest(
        gateway_host=settings.dns_gateway_host,
        zone=config.domain,
        subdomain=subdomain,
        content_hash=content_hash,
    )
    await provider.set_records(request)
    return shop_domain(subdomain, config.domain)

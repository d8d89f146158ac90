"""Tests for DNS provider selection and record shapes."""

from shop_deployer.core.config import Settings
from shop_deployer.lib.dns import (
    CloudDnsProvider,
    CloudflareDnsProvider,
    DnsRecord,
    DnsRecordRequest,
    desired_records,
    select_dns_provider,
)
from shop_deployer.schemas.network_config import ResolvedNetworkConfig

CLOUDFLARE = {"cloudflareEmail": "ops@example.com", "cloudflareApiKey": "cf-key"}
GCP = {"gcpCredentials": {"project_id": "shops-prod", "access_token": "tok"}}


class TestSelectDnsProvider:
    """Tests for select_dns_provider."""

    def test_none_configured(self, settings: Settings) -> None:
        assert select_dns_provider(ResolvedNetworkConfig(), settings) is None

    def test_cloudflare(self, settings: Settings) -> None:
        config = ResolvedNetworkConfig.model_validate({"domain": "example.com", **CLOUDFLARE})
        assert isinstance(select_dns_provider(config, settings), CloudflareDnsProvider)

    def test_clouddns(self, settings: Settings) -> None:
        config = ResolvedNetworkConfig.model_validate({"domain": "example.com", **GCP})
        assert isinstance(select_dns_provider(config, settings), CloudDnsProvider)

    def test_cloudflare_wins_when_both_configured(self, settings: Settings) -> None:
        config = ResolvedNetworkConfig.model_validate({"domain": "example.com", **CLOUDFLARE, **GCP})
        provider = select_dns_provider(config, settings)
        assert isinstance(provider, CloudflareDnsProvider)
        assert provider.provider_name == "cloudflare"


class TestDesiredRecords:
    """Tests for DNSLink record shapes."""

    def test_cname_then_txt(self) -> None:
        request = DnsRecordRequest("ipfs-prod.ogn.app", "example.com", "myshop", "QmHash")
        assert desired_records(request) == [
            DnsRecord("CNAME", "myshop.example.com", "ipfs-prod.ogn.app"),
            DnsRecord("TXT", "_dnslink.myshop.example.com", "dnslink=/ipfs/QmHash"),
        ]

"""Tests for network config and public shop config schemas."""

import pytest
from pydantic import ValidationError

from shop_deployer.schemas.network_config import PublicShopConfig, ResolvedNetworkConfig


class TestResolvedNetworkConfig:
    """Tests for ResolvedNetworkConfig."""

    def test_camel_case_aliases(self) -> None:
        config = ResolvedNetworkConfig.model_validate(
            {
                "domain": "example.com",
                "pinataKey": "k",
                "pinataSecret": "s",
                "ipfsClusterUser": "ops",
                "ipfsClusterPassword": "pw",
                "ipfsGateway": "https://ipfs.example.com/",
            }
        )
        assert config.pinata_key == "k"
        assert config.ipfs_cluster_user == "ops"
        assert config.ipfs_gateway == "https://ipfs.example.com"

    def test_snake_case_names(self) -> None:
        config = ResolvedNetworkConfig(pinata_key="k", pinata_secret="s")
        assert config.has_pinata is True

    def test_blank_strings_are_unset(self) -> None:
        config = ResolvedNetworkConfig.model_validate({"pinataKey": "", "pinataSecret": "  "})
        assert config.pinata_key is None
        assert config.has_pinata is False

    def test_pinata_requires_both_keys(self) -> None:
        assert ResolvedNetworkConfig(pinata_key="k").has_pinata is False

    def test_gcp_credentials_json_string(self) -> None:
        config = ResolvedNetworkConfig.model_validate(
            {"domain": "example.com", "gcpCredentials": '{"project_id": "p", "access_token": "t"}'}
        )
        assert config.gcp_credentials == {"project_id": "p", "access_token": "t"}
        assert config.dns_provider_name == "clouddns"

    def test_gcp_credentials_bad_json(self) -> None:
        with pytest.raises(ValidationError):
            ResolvedNetworkConfig.model_validate({"domain": "example.com", "gcpCredentials": "{oops"})

    def test_cloudflare_first(self) -> None:
        config = ResolvedNetworkConfig.model_validate(
            {
                "domain": "example.com",
                "cloudflareEmail": "a@b.c",
                "cloudflareApiKey": "k",
                "gcpCredentials": {"project_id": "p", "access_token": "t"},
            }
        )
        assert config.dns_provider_name == "cloudflare"

    def test_dns_provider_requires_domain(self) -> None:
        with pytest.raises(ValidationError, match="no domain"):
            ResolvedNetworkConfig.model_validate({"cloudflareEmail": "a@b.c", "cloudflareApiKey": "k"})

    def test_cloudflare_key_requires_email(self) -> None:
        with pytest.raises(ValidationError, match="requires cloudflareEmail"):
            ResolvedNetworkConfig.model_validate({"domain": "example.com", "cloudflareApiKey": "k"})

    def test_unknown_keys_ignored(self) -> None:
        config = ResolvedNetworkConfig.model_validate({"web3Pk": "0xabc", "domain": "example.com"})
        assert config.domain == "example.com"

    def test_frozen(self) -> None:
        config = ResolvedNetworkConfig(domain="example.com")
        with pytest.raises(ValidationError):
            config.domain = "other.com"  # type: ignore[misc]


class TestPublicShopConfig:
    """Tests for PublicShopConfig."""

    def test_aliases(self) -> None:
        config = PublicShopConfig.model_validate({"fullTitle": "T", "metaDescription": "D", "favicon": "f.ico"})
        assert (config.full_title, config.meta_description, config.favicon) == ("T", "D", "f.ico")

    def test_all_optional(self) -> None:
        config = PublicShopConfig()
        assert config.full_title is None
        assert config.favicon is None


class TestIpfsGatewayValidation:
    """Tests for the extra gateway URL check."""

    @pytest.mark.parametrize(
        "gateway",
        ["https://gw.example.com:abc", "ftp://gw.example.com", "gw.example.com", "https://"],
    )
    def test_rejects_unusable_gateway(self, gateway: str) -> None:
        with pytest.raises(ValidationError, match="ipfsGateway"):
            ResolvedNetworkConfig.model_validate({"ipfsGateway": gateway})

    def test_accepts_gateway_with_port(self) -> None:
        config = ResolvedNetworkConfig.model_validate({"ipfsGateway": "http://10.0.0.5:8080/"})
        assert config.ipfs_gateway == "http://10.0.0.5:8080"

"""Tests for publish strategy selection and execution."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from shop_deployer.core.config import Settings
from shop_deployer.lib.deployer.errors import PublishFailedError
from shop_deployer.lib.deployer.strategy import (
    AggregatedStrategy,
    LocalNodeStrategy,
    SkippedStrategy,
    select_publish_strategy,
)
from shop_deployer.lib.deployer.types import NetworkDescriptor
from shop_deployer.lib.ipfs.base import PinnerError
from shop_deployer.lib.ipfs.multiaddr import UnsupportedProtocolError
from shop_deployer.lib.ipfs.types import ClusterCredentials, PinataCredentials, PrimeOutcome
from shop_deployer.schemas.network_config import ResolvedNetworkConfig

PINATA_CONFIG = {"pinataKey": "key", "pinataSecret": "secret"}
CLUSTER_CONFIG = {"ipfsClusterPassword": "pw"}


def _config(**data: object) -> ResolvedNetworkConfig:
    return ResolvedNetworkConfig.model_validate(data)


class TestSelectPublishStrategy:
    """Tests for select_publish_strategy."""

    def test_pinata_only(self, settings: Settings) -> None:
        strategy = select_publish_strategy(NetworkDescriptor(1), _config(**PINATA_CONFIG), settings)

        assert isinstance(strategy, AggregatedStrategy)
        assert strategy.backends == ("pinata",)
        assert strategy.credentials["pinata"] == PinataCredentials("key", "secret")
        assert strategy.gateway == "https://gateway.pinata.cloud"
        assert strategy.prime_targets == (
            "https://gateway.ipfs.io",
            "https://ipfs-prod.ogn.app",
            "https://gateway.pinata.cloud",
        )

    def test_cluster_and_pinata_in_priority_order(self, settings: Settings) -> None:
        network = NetworkDescriptor(1, ipfs_api_url="https://cluster.example.com:9094")
        config = _config(**PINATA_CONFIG, **CLUSTER_CONFIG, ipfsGateway="https://ipfs.myshop.com/")

        strategy = select_publish_strategy(network, config, settings)

        assert isinstance(strategy, AggregatedStrategy)
        assert strategy.backends == ("ipfs-cluster", "pinata")
        cluster = strategy.credentials["ipfs-cluster"]
        assert cluster == ClusterCredentials(
            host="/dns4/cluster.example.com:9094/tcp/9094/https/",
            username="dshop",
            password="pw",
        )
        assert strategy.prime_targets[-1] == "https://ipfs.myshop.com"

    def test_cluster_user_from_config(self, settings: Settings) -> None:
        network = NetworkDescriptor(1, ipfs_api_url="https://cluster.example.com")
        strategy = select_publish_strategy(network, _config(ipfsClusterUser="ops", **CLUSTER_CONFIG), settings)

        assert isinstance(strategy, AggregatedStrategy)
        assert strategy.backends == ("ipfs-cluster",)
        assert strategy.credentials["ipfs-cluster"].username == "ops"  # type: ignore[union-attr]
        # pinata gateway is only primed when pinata is configured
        assert strategy.prime_targets == ("https://gateway.ipfs.io", "https://ipfs-prod.ogn.app")
        assert strategy.gateway == "https://gateway.pinata.cloud"

    def test_cluster_password_without_api_url_is_ignored(self, settings: Settings) -> None:
        strategy = select_publish_strategy(NetworkDescriptor(1), _config(**CLUSTER_CONFIG), settings)
        assert isinstance(strategy, SkippedStrategy)

    def test_local_node(self, settings: Settings) -> None:
        network = NetworkDescriptor(999, ipfs_api_url="http://localhost:5001")
        strategy = select_publish_strategy(network, _config(), settings)
        assert strategy == LocalNodeStrategy(api_url="http://localhost:5001")

    def test_remote_backend_wins_over_local_node(self, settings: Settings) -> None:
        network = NetworkDescriptor(999, ipfs_api_url="http://localhost:5001")
        strategy = select_publish_strategy(network, _config(**PINATA_CONFIG), settings)
        assert isinstance(strategy, AggregatedStrategy)

    def test_nothing_configured(self, settings: Settings) -> None:
        network = NetworkDescriptor(1, ipfs_api_url="https://ipfs.example.com")
        assert isinstance(select_publish_strategy(network, _config(), settings), SkippedStrategy)

    def test_unsupported_cluster_scheme(self, settings: Settings) -> None:
        network = NetworkDescriptor(1, ipfs_api_url="ftp://cluster.example.com")
        with pytest.raises(UnsupportedProtocolError):
            select_publish_strategy(network, _config(**CLUSTER_CONFIG), settings)


class TestAggregatedStrategy:
    """Tests for AggregatedStrategy.publish."""

    @pytest.mark.asyncio
    async def test_publish_then_prime(self, tmp_path: Path, settings: Settings) -> None:
        strategy = AggregatedStrategy(
            backends=("pinata",),
            credentials={"pinata": PinataCredentials("k", "s")},
            gateway="https://gateway.pinata.cloud",
            prime_targets=("https://gateway.ipfs.io", "https://ipfs-prod.ogn.app"),
        )
        outcomes = [PrimeOutcome(url="u", ok=True)]
        with (
            patch(
                "shop_deployer.lib.deployer.strategy.deploy_to_pinners",
                new_callable=AsyncMock,
                return_value="QmHash",
            ) as deploy,
            patch(
                "shop_deployer.lib.deployer.strategy.prime_gateways",
                new_callable=AsyncMock,
                return_value=outcomes,
            ) as prime,
        ):
            result = await strategy.publish(tmp_path, site_label="myshop", settings=settings)

        assert result.content_hash == "QmHash"
        assert result.gateway == "https://gateway.pinata.cloud"
        assert result.primed == outcomes
        assert deploy.call_args.args[1] == ["pinata"]
        prime.assert_awaited_once_with(
            ["https://gateway.ipfs.io/ipfs/QmHash", "https://ipfs-prod.ogn.app/ipfs/QmHash"],
            tmp_path,
            timeout=settings.prime_timeout,
        )

    @pytest.mark.asyncio
    async def test_root_only_priming(self, tmp_path: Path, settings: Settings) -> None:
        settings = settings.model_copy(update={"prime_files": False})
        strategy = AggregatedStrategy(("pinata",), {"pinata": PinataCredentials("k", "s")}, "https://gw")
        with (
            patch("shop_deployer.lib.deployer.strategy.deploy_to_pinners", new_callable=AsyncMock, return_value="Qm"),
            patch(
                "shop_deployer.lib.deployer.strategy.prime_gateways", new_callable=AsyncMock, return_value=[]
            ) as prime,
        ):
            await strategy.publish(tmp_path, site_label="myshop", settings=settings)

        assert prime.call_args.args[1] is None

    @pytest.mark.asyncio
    async def test_no_hash_is_fatal(self, tmp_path: Path, settings: Settings) -> None:
        strategy = AggregatedStrategy(("pinata",), {"pinata": PinataCredentials("k", "s")}, "https://gw")
        with (
            patch("shop_deployer.lib.deployer.strategy.deploy_to_pinners", new_callable=AsyncMock, return_value=None),
            patch("shop_deployer.lib.deployer.strategy.prime_gateways", new_callable=AsyncMock) as prime,
            pytest.raises(PublishFailedError, match="No content hash"),
        ):
            await strategy.publish(tmp_path, site_label="myshop", settings=settings)
        prime.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_pinner_error_propagates(self, tmp_path: Path, settings: Settings) -> None:
        strategy = AggregatedStrategy(("pinata",), {"pinata": PinataCredentials("k", "s")}, "https://gw")
        with (
            patch(
                "shop_deployer.lib.deployer.strategy.deploy_to_pinners",
                new_callable=AsyncMock,
                side_effect=PinnerError("pinata", "down"),
            ),
            pytest.raises(PinnerError),
        ):
            await strategy.publish(tmp_path, site_label="myshop", settings=settings)


class TestLocalNodeStrategy:
    """Tests for LocalNodeStrategy.publish."""

    @pytest.mark.asyncio
    async def test_publish(self, tmp_path: Path, settings: Settings) -> None:
        node = MagicMock()
        node.add_directory = AsyncMock(return_value="QmLocal")
        with patch("shop_deployer.lib.deployer.strategy.LocalIpfsNode", return_value=node) as node_cls:
            result = await LocalNodeStrategy("http://localhost:5001").publish(
                tmp_path, site_label="myshop", settings=settings
            )

        node_cls.assert_called_once_with("http://localhost:5001", timeout=settings.ipfs_request_timeout)
        assert result.content_hash == "QmLocal"
        assert result.gateway == "http://localhost:5001"
        assert result.primed == []


class TestSkippedStrategy:
    """Tests for SkippedStrategy.publish."""

    @pytest.mark.asyncio
    async def test_publishes_nothing(self, tmp_path: Path, settings: Settings) -> None:
        result = await SkippedStrategy().publish(tmp_path, site_label="myshop", settings=settings)
        assert result.content_hash is None
        assert result.gateway is None
        assert result.published is False

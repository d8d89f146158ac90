"""Publish strategies — how a staged directory reaches IPFS.

Exactly one strategy is selected per run from the resolved network config:

- ``AggregatedStrategy``: one or more remote pinning backends (IPFS cluster,
  Pinata), followed by gateway priming.
- ``LocalNodeStrategy``: a local development node, no priming.
- ``SkippedStrategy``: nothing configured and not a dev environment; the
  shop is not published and this is not an error.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

from loguru import logger

from shop_deployer.core.config import Settings
from shop_deployer.lib.deployer.errors import PublishFailedError
from shop_deployer.lib.deployer.types import NetworkDescriptor, PublishResult
from shop_deployer.lib.ipfs.aggregate import deploy_to_pinners
from shop_deployer.lib.ipfs.local_node import LocalIpfsNode
from shop_deployer.lib.ipfs.multiaddr import url_to_multiaddr
from shop_deployer.lib.ipfs.primer import gateway_content_url, prime_gateways
from shop_deployer.lib.ipfs.types import ClusterCredentials, PinataCredentials, PinnerCredentials
from shop_deployer.schemas.network_config import ResolvedNetworkConfig


@dataclass(frozen=True)
class AggregatedStrategy:
    """Upload to every configured pinning backend, then prime gateways."""

    kind: ClassVar[str] = "aggregated"

    backends: tuple[str, ...]
    credentials: dict[str, PinnerCredentials]
    gateway: str
    prime_targets: tuple[str, ...] = ()

    async def publish(self, public_dir: Path, *, site_label: str, settings: Settings) -> PublishResult:
        content_hash = await deploy_to_pinners(
            public_dir,
            list(self.backends),
            site_label,
            self.credentials,
            timeout=settings.ipfs_request_timeout,
            pinata_api_url=settings.pinata_api_url,
        )
        if not content_hash:
            msg = f"No content hash returned by {', '.join(self.backends)}"
            raise PublishFailedError(msg)
        logger.info("Deployed shop to {}. Hash={}", ", ".join(self.backends), content_hash)

        urls = [gateway_content_url(gw, content_hash) for gw in self.prime_targets]
        outcomes = await prime_gateways(
            urls,
            public_dir if settings.prime_files else None,
            timeout=settings.prime_timeout,
        )
        return PublishResult(content_hash=content_hash, gateway=self.gateway, primed=outcomes)


@dataclass(frozen=True)
class LocalNodeStrategy:
    """Add the directory to a local IPFS node."""

    kind: ClassVar[str] = "local_node"

    api_url: str

    async def publish(self, public_dir: Path, *, site_label: str, settings: Settings) -> PublishResult:
        node = LocalIpfsNode(self.api_url, timeout=settings.ipfs_request_timeout)
        content_hash = await node.add_directory(public_dir)
        if not content_hash:
            msg = f"Local node {self.api_url} returned no content hash"
            raise PublishFailedError(msg)
        logger.info("Deployed shop {} on local IPFS. Hash={}", site_label, content_hash)
        return PublishResult(content_hash=content_hash, gateway=self.api_url)


@dataclass(frozen=True)
class SkippedStrategy:
    """Publish nothing."""

    kind: ClassVar[str] = "skipped"

    reason: str = "Pinner service not configured and not a dev environment"

    async def publish(self, public_dir: Path, *, site_label: str, settings: Settings) -> PublishResult:
        logger.info("Shop {} not deployed to IPFS: {}.", site_label, self.reason)
        return PublishResult()


PublishStrategy = AggregatedStrategy | LocalNodeStrategy | SkippedStrategy


def select_publish_strategy(
    network: NetworkDescriptor,
    config: ResolvedNetworkConfig,
    settings: Settings,
) -> PublishStrategy:
    """Pick the publish strategy for a network.

    Remote pinning wins when Pinata keys are configured or the network has
    an IPFS API URL plus a cluster password. Otherwise an API URL containing
    the local node marker selects the local node. Otherwise publishing is
    skipped.

    Raises:
        UnsupportedProtocolError: If the cluster API URL is not http(s).
        AddressTranslationError: If the cluster API URL has no usable host.
    """
    backends: list[str] = []
    credentials: dict[str, PinnerCredentials] = {}

    if network.ipfs_api_url and config.ipfs_cluster_password:
        maddr = url_to_multiaddr(network.ipfs_api_url)
        logger.info("Connecting to cluster {}", maddr)
        credentials["ipfs-cluster"] = ClusterCredentials(
            host=maddr,
            username=config.ipfs_cluster_user or settings.ipfs_cluster_default_user,
            password=config.ipfs_cluster_password,
        )
        backends.append("ipfs-cluster")

    if config.has_pinata:
        assert config.pinata_key is not None
        assert config.pinata_secret is not None
        credentials["pinata"] = PinataCredentials(api_key=config.pinata_key, secret_api_key=config.pinata_secret)
        backends.append("pinata")

    if backends:
        gateways = [settings.ipfs_public_gateway, settings.ipfs_branded_gateway]
        if config.has_pinata:
            gateways.append(settings.pinata_gateway)
        if config.ipfs_gateway:
            gateways.append(config.ipfs_gateway)
        return AggregatedStrategy(
            backends=tuple(backends),
            credentials=credentials,
            gateway=settings.pinata_gateway,
            prime_targets=tuple(gateways),
        )

    if network.ipfs_api_url and settings.local_node_marker in network.ipfs_api_url:
        return LocalNodeStrategy(api_url=network.ipfs_api_url)

    return SkippedStrategy()

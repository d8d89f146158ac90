"""Deployer data types.

Dataclasses describing one pipeline run's input, the publish stage's result
and the pipeline's overall outcome.
"""

import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from shop_deployer.lib.ipfs.types import PrimeOutcome


@dataclass(frozen=True)
class ShopRef:
    """The shop a deployment belongs to."""

    id: uuid.UUID
    name: str | None = None


@dataclass(frozen=True)
class NetworkDescriptor:
    """Which chain/environment a shop targets and where its IPFS API lives.

    ``config_ref`` is an opaque handle to the network's secrets; only the
    config resolver interprets it.
    """

    network_id: int
    ipfs_api_url: str | None = None
    config_ref: Any = None


@dataclass(frozen=True)
class DeploymentRequest:
    """Immutable input to one publish pipeline run.

    Concurrent requests must use disjoint ``output_dir`` values; the
    pipeline deletes and rebuilds ``{output_dir}/public``.
    """

    output_dir: Path
    data_dir_name: str
    network: NetworkDescriptor
    subdomain: str
    shop: ShopRef

    @property
    def public_dir(self) -> Path:
        return Path(self.output_dir) / "public"

    @property
    def source_data_dir(self) -> Path:
        return Path(self.output_dir) / "data"


@dataclass
class PublishResult:
    """Result of the publish stage.

    ``content_hash`` is None only when publishing was skipped because no
    backend is configured and the target is not a local node.
    """

    content_hash: str | None = None
    gateway: str | None = None
    primed: list[PrimeOutcome] = field(default_factory=list)

    @property
    def published(self) -> bool:
        return self.content_hash is not None


@dataclass(frozen=True)
class DeployOutcome:
    """Overall result of a successful pipeline run."""

    deployment_id: uuid.UUID
    content_hash: str | None
    domain: str | None
    gateway: str | None

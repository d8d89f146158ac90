"""Deployer library — the stages of the shop publish pipeline.

Provides config resolution, staging directory assembly, publish strategy
selection and the domain update step. The service layer sequences them and
records the result.
"""

from shop_deployer.lib.deployer.config_resolver import resolve_network_config
from shop_deployer.lib.deployer.domain import shop_domain, update_domain
from shop_deployer.lib.deployer.errors import (
    ConfigResolutionError,
    DeployError,
    DnsUpdateError,
    PublishFailedError,
    RecordError,
    StagingError,
)
from shop_deployer.lib.deployer.staging import (
    TEMPLATE_TOKENS,
    assemble_public_dir,
    build_substitutions,
    network_label,
    read_public_shop_config,
    render_index_html,
)
from shop_deployer.lib.deployer.strategy import (
    AggregatedStrategy,
    LocalNodeStrategy,
    PublishStrategy,
    SkippedStrategy,
    select_publish_strategy,
)
from shop_deployer.lib.deployer.types import (
    DeploymentRequest,
    DeployOutcome,
    NetworkDescriptor,
    PublishResult,
    ShopRef,
)

__all__ = [
    "TEMPLATE_TOKENS",
    "AggregatedStrategy",
    "ConfigResolutionError",
    "DeployError",
    "DeployOutcome",
    "DeploymentRequest",
    "DnsUpdateError",
    "LocalNodeStrategy",
    "NetworkDescriptor",
    "PublishFailedError",
    "PublishResult",
    "PublishStrategy",
    "RecordError",
    "ShopRef",
    "SkippedStrategy",
    "StagingError",
    "assemble_public_dir",
    "build_substitutions",
    "network_label",
    "read_public_shop_config",
    "render_index_html",
    "resolve_network_config",
    "select_publish_strategy",
    "shop_domain",
    "update_domain",
]

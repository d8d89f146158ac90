"""IPFS library — publishing directories to IPFS and warming gateways.

Public API:
    - url_to_multiaddr / multiaddr_to_url: HTTP URL <-> peer multiaddr
    - BasePinner: Abstract pinning backend interface
    - IpfsClusterPinner / PinataPinner: Pinning backends
    - deploy_to_pinners: Aggregated upload to one or more backends
    - LocalIpfsNode: Local development node client
    - prime / prime_gateways: Best-effort gateway cache priming
"""

from shop_deployer.lib.ipfs.aggregate import build_pinner, deploy_to_pinners, get_available_pinners
from shop_deployer.lib.ipfs.base import BasePinner, PinnerError, iter_directory_files
from shop_deployer.lib.ipfs.cluster import IpfsClusterPinner
from shop_deployer.lib.ipfs.local_node import LocalIpfsNode
from shop_deployer.lib.ipfs.multiaddr import (
    AddressTranslationError,
    UnsupportedProtocolError,
    multiaddr_to_url,
    url_to_multiaddr,
)
from shop_deployer.lib.ipfs.pinata import PinataPinner
from shop_deployer.lib.ipfs.primer import gateway_content_url, prime, prime_gateways
from shop_deployer.lib.ipfs.types import AddedEntry, ClusterCredentials, PinataCredentials, PrimeOutcome

__all__ = [
    "AddedEntry",
    "AddressTranslationError",
    "BasePinner",
    "ClusterCredentials",
    "IpfsClusterPinner",
    "LocalIpfsNode",
    "PinataCredentials",
    "PinataPinner",
    "PinnerError",
    "PrimeOutcome",
    "UnsupportedProtocolError",
    "build_pinner",
    "deploy_to_pinners",
    "gateway_content_url",
    "get_available_pinners",
    "iter_directory_files",
    "multiaddr_to_url",
    "prime",
    "prime_gateways",
    "url_to_multiaddr",
]

"""IPFS data types shared by pinners, the local node client and the primer."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ClusterCredentials:
    """Credentials for an IPFS cluster REST API.

    ``host`` is the API address as a multiaddr (see
    :func:`shop_deployer.lib.ipfs.multiaddr.url_to_multiaddr`).
    """

    host: str
    username: str
    password: str

    def __repr__(self) -> str:
        return f"ClusterCredentials(host={self.host!r}, username={self.username!r}, password='***')"


@dataclass(frozen=True)
class PinataCredentials:
    """Pinata API key pair."""

    api_key: str
    secret_api_key: str

    def __repr__(self) -> str:
        return f"PinataCredentials(api_key={self.api_key!r}, secret_api_key='***')"


PinnerCredentials = ClusterCredentials | PinataCredentials


@dataclass(frozen=True)
class AddedEntry:
    """One item reported by an IPFS add stream."""

    name: str
    cid: str
    size: int | None = None


@dataclass
class PrimeOutcome:
    """Result of priming one gateway URL."""

    url: str
    ok: bool
    files_primed: int = 0
    error: str | None = None

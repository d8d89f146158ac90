"""Aggregated deploy across one or more pinning backends.

Callers hand over a backend list and a credential per backend and get back
a single content identifier, or a single error if any backend fails.
Backends run concurrently; the content is identical so their CIDs should
agree, and the first backend's CID is canonical.
"""

import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from loguru import logger

from shop_deployer.lib.ipfs.base import BasePinner, PinnerError
from shop_deployer.lib.ipfs.cluster import IpfsClusterPinner
from shop_deployer.lib.ipfs.pinata import PinataPinner
from shop_deployer.lib.ipfs.types import ClusterCredentials, PinataCredentials, PinnerCredentials

# Backend registry: name -> (pinner class, expected credential type)
_PINNERS: dict[str, tuple[type[BasePinner], type]] = {
    "ipfs-cluster": (IpfsClusterPinner, ClusterCredentials),
    "pinata": (PinataPinner, PinataCredentials),
}


def get_available_pinners() -> list[str]:
    """Return the names of all registered pinning backends, sorted."""
    return sorted(_PINNERS.keys())


def build_pinner(backend: str, credentials: PinnerCredentials, **kwargs: Any) -> BasePinner:
    """Instantiate a pinning backend by name.

    Args:
        backend: Registered backend name (``ipfs-cluster`` or ``pinata``).
        credentials: Credentials matching the backend.
        **kwargs: Forwarded to the backend constructor (e.g. ``timeout``).

    Raises:
        ValueError: If the backend is unknown or the credentials do not match it.
    """
    entry = _PINNERS.get(backend)
    if entry is None:
        msg = f"Unknown pinning backend: {backend!r}. Available: {get_available_pinners()}"
        raise ValueError(msg)
    cls, credential_type = entry
    if not isinstance(credentials, credential_type):
        msg = f"Backend {backend!r} expects {credential_type.__name__}, got {type(credentials).__name__}"
        raise ValueError(msg)
    return cls(credentials, **kwargs)


async def deploy_to_pinners(
    directory: Path,
    backends: list[str],
    site_label: str,
    credentials: Mapping[str, PinnerCredentials],
    *,
    timeout: float = 120.0,
    pinata_api_url: str | None = None,
) -> str | None:
    """Upload a directory to every configured pinning backend.

    Args:
        directory: Root of the tree to publish.
        backends: Backend names, in priority order.
        site_label: Label for the pins.
        credentials: Credentials keyed by backend name.
        timeout: Per-request timeout for each backend.
        pinata_api_url: Optional Pinata API base URL override.

    Returns:
        The first backend's CID, or None when ``backends`` is empty.

    Raises:
        PinnerError: If any backend fails.
        ValueError: If a backend is unknown or has no matching credentials.
    """
    if not backends:
        return None

    pinners: list[BasePinner] = []
    for backend in backends:
        if backend not in credentials:
            msg = f"No credentials configured for backend {backend!r}"
            raise ValueError(msg)
        kwargs: dict[str, Any] = {"timeout": timeout}
        if backend == "pinata" and pinata_api_url:
            kwargs["api_url"] = pinata_api_url
        pinners.append(build_pinner(backend, credentials[backend], **kwargs))

    logger.info("Deploying {} to {}", directory, ", ".join(backends))
    results = await asyncio.gather(
        *(pinner.pin_directory(directory, site_label) for pinner in pinners),
        return_exceptions=True,
    )

    cids: list[str] = []
    for pinner, result in zip(pinners, results, strict=True):
        if isinstance(result, BaseException):
            if isinstance(result, PinnerError) or not isinstance(result, Exception):
                raise result
            raise PinnerError(pinner.name, f"Unexpected error: {result}") from result
        cids.append(result)

    canonical = cids[0]
    mismatched = {p.name: c for p, c in zip(pinners, cids, strict=True) if c != canonical}
    if mismatched:
        logger.warning("Pinning backends disagree on CID: canonical={} others={}", canonical, mismatched)
    return canonical

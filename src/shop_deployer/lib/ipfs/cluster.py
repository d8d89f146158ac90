"""IPFS cluster pinning backend.

Adds a directory through the cluster REST API ``/add`` endpoint, which
imports the content on a cluster peer and pins it across the cluster.
The API address arrives as a multiaddr and is converted back to HTTP.
"""

import json
from pathlib import Path

import httpx
from loguru import logger

from shop_deployer.lib.ipfs.base import BasePinner, PinnerError
from shop_deployer.lib.ipfs.multiaddr import multiaddr_to_url
from shop_deployer.lib.ipfs.multipart import build_directory_parts, parse_added_line
from shop_deployer.lib.ipfs.types import AddedEntry, ClusterCredentials

DEFAULT_TIMEOUT = 120.0


class IpfsClusterPinner(BasePinner):
    """Pins content on an IPFS cluster."""

    def __init__(self, credentials: ClusterCredentials, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._credentials = credentials
        self._base_url = multiaddr_to_url(credentials.host)
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "ipfs-cluster"

    @property
    def base_url(self) -> str:
        return self._base_url

    async def pin_directory(self, directory: Path, site_label: str) -> str:
        """Add and pin a directory on the cluster.

        Args:
            directory: Root of the tree to upload.
            site_label: Pin name.

        Returns:
            CID of the directory root (the last entry the cluster reports).

        Raises:
            PinnerError: On transport or service errors.
        """
        files = await build_directory_parts(directory)
        params = {"name": site_label, "local": "false"}
        auth = httpx.BasicAuth(self._credentials.username, self._credentials.password)

        try:
            async with httpx.AsyncClient(timeout=self._timeout, auth=auth) as client:
                response = await client.post(f"{self._base_url}/add", params=params, files=files)
                response.raise_for_status()
            entries = self._parse_response(response.text)
        except httpx.TimeoutException as e:
            logger.warning("IPFS cluster add timed out ({})", self._base_url)
            raise PinnerError(self.name, "Add request timed out") from e
        except httpx.HTTPStatusError as e:
            logger.warning("IPFS cluster HTTP error {}", e.response.status_code)
            raise PinnerError(
                self.name,
                f"Cluster returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.warning("IPFS cluster connection error: {}", e)
            raise PinnerError(self.name, "Connection to cluster failed") from e
        except (json.JSONDecodeError, ValueError) as e:
            raise PinnerError(self.name, f"Malformed add response: {e}") from e

        if not entries:
            raise PinnerError(self.name, "Cluster reported no added entries")

        root = entries[-1]
        logger.info("Pinned {} on IPFS cluster as {} ({} entries)", site_label, root.cid, len(entries))
        return root.cid

    def _parse_response(self, body: str) -> list[AddedEntry]:
        """Parse an add response body, either NDJSON or a JSON array."""
        stripped = body.strip()
        if stripped.startswith("["):
            lines = [json.dumps(item) for item in json.loads(stripped)]
        else:
            lines = stripped.splitlines()
        entries = []
        for line in lines:
            entry = parse_added_line(line)
            if entry is not None:
                entries.append(entry)
        return entries

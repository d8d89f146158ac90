"""Client for a local (development) IPFS node's HTTP API."""

from collections.abc import AsyncIterator
from pathlib import Path

import httpx
from loguru import logger

from shop_deployer.lib.ipfs.base import PinnerError
from shop_deployer.lib.ipfs.multipart import build_directory_parts, iter_added_entries
from shop_deployer.lib.ipfs.types import AddedEntry

DEFAULT_TIMEOUT = 120.0


class LocalIpfsNode:
    """Talks to a Kubo-compatible ``/api/v0`` endpoint.

    Args:
        api_url: Base URL of the node's API, e.g. ``http://localhost:5001``.
        timeout: Request timeout in seconds.
    """

    def __init__(self, api_url: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout

    @property
    def api_url(self) -> str:
        return self._api_url

    async def add_recursive(self, directory: Path) -> AsyncIterator[AddedEntry]:
        """Add a directory tree and stream the entries the node reports.

        The node reports files first and directories after their contents,
        so the last entry is the root directory.

        Raises:
            PinnerError: On transport or service errors.
        """
        files = await build_directory_parts(directory)
        params = {"pin": "true", "progress": "false", "cid-version": "0"}

        try:
            async with (
                httpx.AsyncClient(timeout=self._timeout) as client,
                client.stream("POST", f"{self._api_url}/api/v0/add", params=params, files=files) as response,
            ):
                response.raise_for_status()
                async for entry in iter_added_entries(response):
                    yield entry
        except httpx.HTTPStatusError as e:
            logger.warning("Local IPFS node HTTP error {}", e.response.status_code)
            raise PinnerError(
                "local-node",
                f"Node returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.warning("Local IPFS node connection error: {}", e)
            raise PinnerError("local-node", f"Request to {self._api_url} failed") from e
        except ValueError as e:
            raise PinnerError("local-node", f"Malformed add response: {e}") from e

    async def add_directory(self, directory: Path) -> str:
        """Add a directory tree and return the root CID.

        Raises:
            PinnerError: If the add fails or the node reports nothing.
        """
        last: AddedEntry | None = None
        count = 0
        async for entry in self.add_recursive(directory):
            last = entry
            count += 1
        if last is None:
            raise PinnerError("local-node", "Node reported no added entries")
        logger.debug("Local node added {} entries, root {}", count, last.cid)
        return last.cid

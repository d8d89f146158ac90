"""Pinata pinning backend.

Uploads a directory with ``/pinning/pinFileToIPFS``. Every file part is
named ``{site_label}/{relative_path}`` so Pinata wraps them in a single
directory whose CID is returned as ``IpfsHash``.
"""

import asyncio
import json
from pathlib import Path

import httpx
from loguru import logger

from shop_deployer.lib.ipfs.base import BasePinner, PinnerError, read_directory_files
from shop_deployer.lib.ipfs.types import PinataCredentials

DEFAULT_API_URL = "https://api.pinata.cloud"
DEFAULT_TIMEOUT = 120.0


class PinataPinner(BasePinner):
    """Pins content on Pinata."""

    def __init__(
        self,
        credentials: PinataCredentials,
        timeout: float = DEFAULT_TIMEOUT,
        api_url: str = DEFAULT_API_URL,
    ) -> None:
        self._credentials = credentials
        self._timeout = timeout
        self._api_url = api_url.rstrip("/")

    @property
    def name(self) -> str:
        return "pinata"

    def _headers(self) -> dict[str, str]:
        return {
            "pinata_api_key": self._credentials.api_key,
            "pinata_secret_api_key": self._credentials.secret_api_key,
        }

    async def pin_directory(self, directory: Path, site_label: str) -> str:
        """Upload and pin a directory on Pinata.

        Args:
            directory: Root of the tree to upload.
            site_label: Pin name and wrapping directory name.

        Returns:
            CID of the wrapping directory.

        Raises:
            PinnerError: On transport or service errors, or a missing hash.
        """
        contents = await asyncio.to_thread(read_directory_files, directory)
        files = [("file", (f"{site_label}/{rel}", content, "application/octet-stream")) for rel, content in contents]
        data = {
            "pinataMetadata": json.dumps({"name": site_label}),
            "pinataOptions": json.dumps({"cidVersion": 0}),
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    f"{self._api_url}/pinning/pinFileToIPFS",
                    headers=self._headers(),
                    data=data,
                    files=files,
                )
                response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException as e:
            logger.warning("Pinata upload timed out")
            raise PinnerError(self.name, "Upload request timed out") from e
        except httpx.HTTPStatusError as e:
            logger.warning("Pinata HTTP error {}", e.response.status_code)
            raise PinnerError(
                self.name,
                f"Pinata returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.warning("Pinata connection error: {}", e)
            raise PinnerError(self.name, "Connection to Pinata failed") from e
        except ValueError as e:
            raise PinnerError(self.name, f"Malformed Pinata response: {e}") from e

        cid = body.get("IpfsHash") if isinstance(body, dict) else None
        if not cid:
            raise PinnerError(self.name, "Pinata response has no IpfsHash")

        logger.info("Pinned {} on Pinata as {} ({} files)", site_label, cid, len(files))
        return str(cid)

"""Multipart payloads for IPFS-style directory adds.

The Kubo ``/api/v0/add`` endpoint and the IPFS cluster ``/add`` endpoint
both accept a directory as a flat multipart body: one part per directory
(``application/x-directory``, empty body) and one per file, each named by
its URL-encoded path below a common root.
"""

import asyncio
import json
from collections.abc import AsyncIterator
from pathlib import Path
from urllib.parse import quote

import httpx

from shop_deployer.lib.ipfs.base import iter_subdirectories, read_directory_files
from shop_deployer.lib.ipfs.types import AddedEntry

DIRECTORY_CONTENT_TYPE = "application/x-directory"
FILE_CONTENT_TYPE = "application/octet-stream"

MultipartFiles = list[tuple[str, tuple[str, bytes, str]]]


def _build_directory_parts(directory: Path) -> MultipartFiles:
    root = directory.name
    parts: MultipartFiles = [("file", (quote(root, safe=""), b"", DIRECTORY_CONTENT_TYPE))]
    for rel in iter_subdirectories(directory):
        parts.append(("file", (quote(f"{root}/{rel}", safe=""), b"", DIRECTORY_CONTENT_TYPE)))
    for rel, content in read_directory_files(directory):
        parts.append(("file", (quote(f"{root}/{rel}", safe=""), content, FILE_CONTENT_TYPE)))
    return parts


async def build_directory_parts(directory: Path) -> MultipartFiles:
    """Read a directory tree into multipart parts rooted at the directory's name."""
    return await asyncio.to_thread(_build_directory_parts, directory)


def parse_added_line(line: str) -> AddedEntry | None:
    """Parse one NDJSON line of an add response.

    Handles both the Kubo shape (``Name``/``Hash``/``Size``) and the cluster
    shape (``name``/``cid``/``size``, where ``cid`` may be ``{"/": "..."}``).

    Returns:
        The parsed entry, or None for blank and progress-only lines.
    """
    line = line.strip()
    if not line:
        return None
    data = json.loads(line)
    cid = data.get("Hash") or data.get("cid")
    if isinstance(cid, dict):
        cid = cid.get("/")
    if not cid:
        return None
    size = data.get("Size", data.get("size"))
    return AddedEntry(
        name=data.get("Name") or data.get("name") or "",
        cid=str(cid),
        size=int(size) if size not in (None, "") else None,
    )


async def iter_added_entries(response: httpx.Response) -> AsyncIterator[AddedEntry]:
    """Yield entries from a streamed NDJSON add response."""
    async for line in response.aiter_lines():
        entry = parse_added_line(line)
        if entry is not None:
            yield entry

"""Gateway cache priming.

Fetching freshly published content through a gateway makes the gateway
retrieve and cache it, so the first real visitor does not pay the cold
lookup. Priming is best effort: failures are logged and reported in the
returned outcome, never raised.
"""

from pathlib import Path

import httpx
from loguru import logger

from shop_deployer.lib.ipfs.base import iter_directory_files
from shop_deployer.lib.ipfs.types import PrimeOutcome

DEFAULT_TIMEOUT = 30.0


def gateway_content_url(gateway: str, content_hash: str) -> str:
    """Build ``{gateway}/ipfs/{hash}``."""
    return f"{gateway.rstrip('/')}/ipfs/{content_hash}"


async def _fetch(client: httpx.AsyncClient, url: str) -> None:
    response = await client.get(url)
    response.raise_for_status()


async def prime(
    url: str,
    reference_dir: Path | None = None,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> PrimeOutcome:
    """Prime a gateway URL and, optionally, every file below it.

    Args:
        url: Gateway URL of the published root, e.g. ``https://gw/ipfs/Qm...``.
        reference_dir: Local copy of the published tree; when given, each of
            its files is fetched at ``{url}/{relative_path}``.
        timeout: Per-request timeout in seconds.

    Returns:
        PrimeOutcome describing what was fetched. ``ok`` is False if any
        request failed; the first error is kept.
    """
    outcome = PrimeOutcome(url=url, ok=True)
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        try:
            await _fetch(client, url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Priming {} failed: {}", url, e)
            outcome.ok = False
            outcome.error = str(e) or type(e).__name__
            return outcome

        if reference_dir is None:
            logger.info("Primed {}", url)
            return outcome

        for rel, _path in iter_directory_files(reference_dir):
            file_url = f"{url.rstrip('/')}/{rel}"
            try:
                await _fetch(client, file_url)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                logger.debug("Priming {} failed: {}", file_url, e)
                if outcome.ok:
                    outcome.ok = False
                    outcome.error = f"{rel}: {e}"
                continue
            outcome.files_primed += 1

    logger.info("Primed {} ({} files)", url, outcome.files_primed)
    return outcome


async def prime_gateways(
    urls: list[str],
    reference_dir: Path | None = None,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[PrimeOutcome]:
    """Prime several gateway URLs one at a time.

    Each URL is independent: a failure on one never prevents the next.
    """
    outcomes: list[PrimeOutcome] = []
    for url in urls:
        outcomes.append(await prime(url, reference_dir, timeout=timeout))
    failed = [o.url for o in outcomes if not o.ok]
    if failed:
        logger.warning("{} of {} gateways failed priming: {}", len(failed), len(outcomes), failed)
    return outcomes

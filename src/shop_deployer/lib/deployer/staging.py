"""Assemble the publishable ``public`` directory for one deployment.

The directory is rebuilt from scratch every run: the pre-built dist assets
are copied in, the shop's data directory is copied under its data dir name,
and placeholder tokens in ``index.html`` are replaced with per-deployment
metadata.

Substitution replaces only the first occurrence of each token, in the
order of ``TEMPLATE_TOKENS``. Templates that repeat a token keep the later
occurrences verbatim.
"""

import asyncio
import json
import shutil
from collections.abc import Mapping
from pathlib import Path

import aiofiles
from loguru import logger
from pydantic import ValidationError

from shop_deployer.lib.deployer.errors import StagingError
from shop_deployer.lib.deployer.types import DeploymentRequest
from shop_deployer.schemas.network_config import PublicShopConfig

TEMPLATE_TOKENS: tuple[str, ...] = ("TITLE", "META_DESC", "DATA_DIR", "NETWORK", "FAVICON")
INDEX_HTML = "index.html"
SHOP_CONFIG_FILE = "config.json"
DEFAULT_FAVICON = "favicon.ico"

_NETWORK_LABELS: dict[int, str] = {
    1: "mainnet",
    4: "rinkeby",
}


def network_label(network_id: int) -> str:
    """Map a network id to the label the shop front end expects.

    Args:
        network_id: Chain id of the shop's network.

    Returns:
        ``mainnet`` for 1, ``rinkeby`` for 4, ``localhost`` for anything else.
    """
    return _NETWORK_LABELS.get(network_id, "localhost")


def build_substitutions(config: PublicShopConfig, data_dir_name: str, network_id: int) -> dict[str, str]:
    """Compute the replacement value for every template token."""
    return {
        "TITLE": config.full_title or "",
        "META_DESC": config.meta_description or "",
        "DATA_DIR": data_dir_name,
        "NETWORK": network_label(network_id),
        "FAVICON": config.favicon or DEFAULT_FAVICON,
    }


def render_index_html(html: str, substitutions: Mapping[str, str]) -> str:
    """Replace the first occurrence of each template token.

    Args:
        html: Template document.
        substitutions: Replacement value per token; tokens missing from the
            mapping are left untouched.

    Returns:
        The rendered document.
    """
    for token in TEMPLATE_TOKENS:
        if token in substitutions:
            html = html.replace(token, substitutions[token], 1)
    return html


async def read_public_shop_config(path: Path) -> PublicShopConfig:
    """Best-effort read of the shop's public ``config.json``.

    A missing, unreadable or malformed file yields an empty config.
    """
    try:
        async with aiofiles.open(path, encoding="utf-8") as f:
            raw = json.loads(await f.read())
        if not isinstance(raw, dict):
            logger.debug("Shop config {} is not a JSON object, ignoring", path)
            return PublicShopConfig()
        return PublicShopConfig.model_validate(raw)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
        logger.debug("Shop config {} unusable ({}), using defaults", path, exc)
        return PublicShopConfig()


def _reset_and_copy(public_dir: Path, dist_dir: Path, data_src: Path, data_dest: Path) -> None:
    if public_dir.exists():
        shutil.rmtree(public_dir)
    shutil.copytree(dist_dir, public_dir)
    shutil.copytree(data_src, data_dest)


async def assemble_public_dir(request: DeploymentRequest, *, dist_dir: Path) -> Path:
    """Build ``{output_dir}/public`` for the given deployment request.

    Args:
        request: The deployment request.
        dist_dir: Directory of pre-built distributable assets.

    Returns:
        Path to the assembled public directory.

    Raises:
        StagingError: If removing or copying directories, or rewriting the
            entry document, fails.
    """
    public_dir = request.public_dir
    data_dest = public_dir / request.data_dir_name

    try:
        await asyncio.to_thread(_reset_and_copy, public_dir, Path(dist_dir), request.source_data_dir, data_dest)
    except OSError as exc:
        msg = f"Failed to assemble {public_dir}: {exc}"
        raise StagingError(msg) from exc

    shop_config = await read_public_shop_config(data_dest / SHOP_CONFIG_FILE)
    substitutions = build_substitutions(shop_config, request.data_dir_name, request.network.network_id)

    index_path = public_dir / INDEX_HTML
    try:
        async with aiofiles.open(index_path, encoding="utf-8") as f:
            html = await f.read()
        async with aiofiles.open(index_path, "w", encoding="utf-8") as f:
            await f.write(render_index_html(html, substitutions))
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Failed to rewrite {index_path}: {exc}"
        raise StagingError(msg) from exc

    logger.info(
        "Staged {} (data_dir={}, network={})",
        public_dir,
        request.data_dir_name,
        substitutions["NETWORK"],
    )
    return public_dir

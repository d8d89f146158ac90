"""Resolve a network's opaque config reference into a validated config."""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from shop_deployer.lib.deployer.errors import ConfigResolutionError
from shop_deployer.schemas.network_config import ResolvedNetworkConfig


def resolve_network_config(config_ref: Any) -> ResolvedNetworkConfig:
    """Resolve a network's config reference into a validated config.

    Accepts an already resolved config, a mapping, a JSON object string, or
    a path to a JSON file.

    Args:
        config_ref: Opaque config handle from the network descriptor.

    Returns:
        The validated ResolvedNetworkConfig. ``None`` resolves to an empty
        config (nothing configured).

    Raises:
        ConfigResolutionError: If the reference cannot be read, parsed or validated.
    """
    if isinstance(config_ref, ResolvedNetworkConfig):
        return config_ref
    if config_ref is None:
        return ResolvedNetworkConfig()

    try:
        if isinstance(config_ref, Path):
            raw: Any = json.loads(config_ref.read_text(encoding="utf-8"))
        elif isinstance(config_ref, str):
            raw = json.loads(config_ref)
        else:
            raw = config_ref
    except (OSError, json.JSONDecodeError) as exc:
        msg = f"Unreadable network config: {exc}"
        raise ConfigResolutionError(msg) from exc

    if not isinstance(raw, Mapping):
        msg = f"Network config must be a JSON object, got {type(raw).__name__}"
        raise ConfigResolutionError(msg)

    try:
        return ResolvedNetworkConfig.model_validate(dict(raw))
    except ValidationError as exc:
        msg = f"Invalid network config: {exc.error_count()} validation error(s)"
        raise ConfigResolutionError(msg) from exc

"""Deploy service — orchestrates the shop publish pipeline and records the result.

Stages run strictly in order and stop at the first fatal failure:

    resolve config -> assemble staging dir -> publish (+ prime) -> update DNS -> record

Each fatal failure surfaces as the stage's ``DeployError`` subclass with the
original exception chained. A DNS failure aborts before recording, so a run
whose content was published but whose domain update failed leaves no record.
"""

import contextlib
import uuid
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shop_deployer.core.config import Settings
from shop_deployer.lib.deployer import (
    ConfigResolutionError,
    DeployError,
    DeploymentRequest,
    DeployOutcome,
    DnsUpdateError,
    PublishFailedError,
    RecordError,
    StagingError,
    assemble_public_dir,
    resolve_network_config,
    select_publish_strategy,
    update_domain,
)
from shop_deployer.models.shop import Shop
from shop_deployer.models.shop_deployment import ShopDeployment
from shop_deployer.schemas.network_config import ResolvedNetworkConfig

ConfigResolver = Callable[[Any], ResolvedNetworkConfig]


@contextlib.contextmanager
def _stage(error_cls: type[DeployError]) -> Iterator[None]:
    """Re-raise any non-DeployError failure as ``error_cls``."""
    try:
        yield
    except DeployError:
        raise
    except Exception as exc:
        raise error_cls(str(exc) or type(exc).__name__) from exc


async def record_deployment(
    session: AsyncSession,
    *,
    shop_id: uuid.UUID,
    domain: str | None,
    gateway: str | None,
    content_hash: str | None,
) -> ShopDeployment:
    """Persist one deployment record.

    Args:
        session: Database session.
        shop_id: Owning shop.
        domain: Shop domain URL, if DNS was updated.
        gateway: Gateway the content is served from, if published.
        content_hash: Published content identifier, if published.

    Returns:
        The created ShopDeployment.

    Raises:
        RecordError: If the insert fails.
    """
    deployment = ShopDeployment(
        shop_id=shop_id,
        domain=domain,
        ipfs_gateway=gateway,
        ipfs_hash=content_hash,
    )
    session.add(deployment)
    try:
        await session.commit()
        await session.refresh(deployment)
    except SQLAlchemyError as exc:
        await session.rollback()
        msg = f"Failed to record deployment for shop {shop_id}: {exc}"
        raise RecordError(msg) from exc

    logger.bind(
        json_output=True,
        deployment_id=str(deployment.id),
        shop_id=str(shop_id),
        domain=domain,
        ipfs_gateway=gateway,
        ipfs_hash=content_hash,
    ).info(
        "Recorded shop deployment in the DB. id={} domain={} ipfs={} hash={}",
        deployment.id,
        domain,
        gateway,
        content_hash,
    )
    return deployment


async def deploy_shop(
    session: AsyncSession,
    request: DeploymentRequest,
    *,
    settings: Settings,
    resolve_config: ConfigResolver = resolve_network_config,
) -> DeployOutcome:
    """Run the full publish pipeline for one shop.

    Args:
        session: Database session used to record the deployment.
        request: Deployment request.
        settings: Application settings.
        resolve_config: Collaborator turning the network's config reference
            into a ResolvedNetworkConfig.

    Returns:
        DeployOutcome with the record id, content hash, domain and gateway.

    Raises:
        DeployError: Subclass naming the failing stage.
    """
    logger.info("Deploying shop {} (subdomain={})", request.shop.id, request.subdomain)

    with _stage(ConfigResolutionError):
        config = resolve_config(request.network.config_ref)

    with _stage(StagingError):
        public_dir = await assemble_public_dir(request, dist_dir=Path(settings.dist_dir))

    with _stage(PublishFailedError):
        strategy = select_publish_strategy(request.network, config, settings)
        logger.debug("Publish strategy: {}", strategy.kind)
        result = await strategy.publish(public_dir, site_label=request.data_dir_name, settings=settings)

    with _stage(DnsUpdateError):
        domain = await update_domain(config, request.subdomain, result.content_hash, settings)

    with _stage(RecordError):
        deployment = await record_deployment(
            session,
            shop_id=request.shop.id,
            domain=domain,
            gateway=result.gateway,
            content_hash=result.content_hash,
        )

    return DeployOutcome(
        deployment_id=deployment.id,
        content_hash=result.content_hash,
        domain=domain,
        gateway=result.gateway,
    )


async def list_shop_deployments(
    session: AsyncSession,
    shop_id: uuid.UUID,
    *,
    limit: int = 20,
) -> list[ShopDeployment]:
    """Return a shop's deployments, newest first.

    Args:
        session: Database session.
        shop_id: Shop to list deployments for.
        limit: Maximum number of records.

    Returns:
        List of ShopDeployment records.
    """
    result = await session.execute(
        select(ShopDeployment)
        .where(ShopDeployment.shop_id == shop_id)
        .order_by(ShopDeployment.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def get_latest_deployment(session: AsyncSession, shop_id: uuid.UUID) -> ShopDeployment | None:
    """Return a shop's most recent deployment, or None."""
    deployments = await list_shop_deployments(session, shop_id, limit=1)
    return deployments[0] if deployments else None


async def get_shop(session: AsyncSession, shop_id: uuid.UUID) -> Shop | None:
    """Look up a shop by id."""
    return await session.get(Shop, shop_id)


async def create_shop(
    session: AsyncSession,
    *,
    name: str,
    data_dir: str,
    network_id: int = 1,
    shop_id: uuid.UUID | None = None,
) -> Shop:
    """Create a shop record.

    Args:
        session: Database session.
        name: Display name.
        data_dir: Data directory name used in published builds.
        network_id: Network the shop targets.
        shop_id: Optional explicit id.

    Returns:
        The created Shop.
    """
    shop = Shop(id=shop_id or uuid.uuid4(), name=name, data_dir=data_dir, network_id=network_id)
    session.add(shop)
    await session.commit()
    await session.refresh(shop)
    logger.info("Created shop {} ({})", shop.id, name)
    return shop

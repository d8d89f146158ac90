"""Deploy CLI commands for publishing shop builds."""

import asyncio
import uuid
from pathlib import Path

import typer
from loguru import logger

deploy_app = typer.Typer(name="deploy", help="Publish shop builds to IPFS and update DNS.")


def _parse_shop_id(value: str) -> uuid.UUID:
    """Parse a shop id argument, exiting on malformed input."""
    try:
        return uuid.UUID(value)
    except ValueError as exc:
        typer.echo(f"Error: Invalid shop id '{value}'")
        raise typer.Exit(code=1) from exc


@deploy_app.command("shop")
def shop_command(
    shop_id: str = typer.Option(..., "--shop-id", help="Shop UUID the deployment belongs to"),
    output_dir: Path = typer.Option(..., "--output-dir", help="Shop build output directory"),
    subdomain: str = typer.Option(..., "--subdomain", help="Shop subdomain under the network's DNS zone"),
    data_dir: str | None = typer.Option(None, "--data-dir", help="Data directory name (defaults to the shop's)"),
    network_id: int = typer.Option(1, "--network-id", help="Network id (1 mainnet, 4 rinkeby, other local)"),
    ipfs_api: str | None = typer.Option(None, "--ipfs-api", help="IPFS API / cluster URL for the network"),
    config_file: Path | None = typer.Option(None, "--config-file", help="JSON file with the network's config"),
) -> None:
    """Assemble, publish and record one shop deployment."""
    asyncio.run(
        _shop_command(
            shop_id=_parse_shop_id(shop_id),
            output_dir=output_dir,
            subdomain=subdomain,
            data_dir=data_dir,
            network_id=network_id,
            ipfs_api=ipfs_api,
            config_file=config_file,
        )
    )


async def _shop_command(
    *,
    shop_id: uuid.UUID,
    output_dir: Path,
    subdomain: str,
    data_dir: str | None,
    network_id: int,
    ipfs_api: str | None,
    config_file: Path | None,
) -> None:
    """Async implementation of the deploy shop command."""
    from shop_deployer.core.config import get_settings
    from shop_deployer.core.database import dispose_engine, get_session_factory, init_engine
    from shop_deployer.lib.deployer import DeployError, DeploymentRequest, NetworkDescriptor, ShopRef
    from shop_deployer.services.deploy_service import deploy_shop, get_shop

    settings = get_settings()
    init_engine(settings.database_url)

    try:
        factory = get_session_factory()
        async with factory() as session:
            shop = await get_shop(session, shop_id)
            if shop is None:
                typer.echo(f"Error: Shop {shop_id} not found")
                raise typer.Exit(code=1)

            request = DeploymentRequest(
                output_dir=output_dir,
                data_dir_name=data_dir or shop.data_dir,
                network=NetworkDescriptor(network_id=network_id, ipfs_api_url=ipfs_api, config_ref=config_file),
                subdomain=subdomain,
                shop=ShopRef(id=shop.id, name=shop.name),
            )
            outcome = await deploy_shop(session, request, settings=settings)

        typer.echo(f"Deployment {outcome.deployment_id} recorded")
        typer.echo(f"  Hash:    {outcome.content_hash or '(not published)'}")
        typer.echo(f"  Gateway: {outcome.gateway or '-'}")
        typer.echo(f"  Domain:  {outcome.domain or '-'}")

    except DeployError as exc:
        logger.error("Deploy failed at stage {}: {}", exc.stage, exc.message)
        typer.echo(f"Error: Deploy failed at stage '{exc.stage}': {exc.message}")
        raise typer.Exit(code=1) from exc
    finally:
        await dispose_engine()


@deploy_app.command("history")
def history_command(
    shop_id: str = typer.Argument(..., help="Shop UUID"),
    limit: int = typer.Option(20, "--limit", help="Maximum number of deployments to show"),
) -> None:
    """List a shop's recorded deployments, newest first."""
    asyncio.run(_history_command(shop_id=_parse_shop_id(shop_id), limit=limit))


async def _history_command(*, shop_id: uuid.UUID, limit: int) -> None:
    """Async implementation of the history command."""
    from shop_deployer.core.config import get_settings
    from shop_deployer.core.database import dispose_engine, get_session_factory, init_engine
    from shop_deployer.services.deploy_service import list_shop_deployments

    settings = get_settings()
    init_engine(settings.database_url)

    try:
        factory = get_session_factory()
        async with factory() as session:
            deployments = await list_shop_deployments(session, shop_id, limit=limit)
    finally:
        await dispose_engine()

    if not deployments:
        typer.echo(f"No deployments recorded for shop {shop_id}.")
        return

    typer.echo(f"Deployments for shop {shop_id}")
    typer.echo("─" * 60)
    for deployment in deployments:
        created = deployment.created_at.strftime("%Y-%m-%d %H:%M:%S") if deployment.created_at else "-"
        typer.echo(f"  {created}  {deployment.ipfs_hash or '-':48s}  {deployment.domain or '-'}")


@deploy_app.command("register")
def register_command(
    name: str = typer.Argument(..., help="Shop display name"),
    data_dir: str = typer.Option(..., "--data-dir", help="Data directory name used in the shop build"),
    network_id: int = typer.Option(1, "--network-id", help="Network id the shop targets"),
) -> None:
    """Register a shop so deployments can be recorded against it."""
    asyncio.run(_register_command(name=name, data_dir=data_dir, network_id=network_id))


async def _register_command(*, name: str, data_dir: str, network_id: int) -> None:
    """Async implementation of the register command."""
    from shop_deployer.core.config import get_settings
    from shop_deployer.core.database import dispose_engine, get_session_factory, init_engine
    from shop_deployer.services.deploy_service import create_shop

    settings = get_settings()
    init_engine(settings.database_url)

    try:
        factory = get_session_factory()
        async with factory() as session:
            shop = await create_shop(session, name=name, data_dir=data_dir, network_id=network_id)
    finally:
        await dispose_engine()

    typer.echo(f"Registered shop {shop.id} ({name})")

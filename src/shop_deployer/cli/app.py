"""Typer CLI root application."""

import typer

from shop_deployer.core.config import get_settings
from shop_deployer.core.logging import setup_logging

app = typer.Typer(name="shop-deployer", help="Publish shop builds to IPFS and DNS")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


def _register_subcommands() -> None:
    """Register all CLI subcommand groups."""
    from shop_deployer.cli.db_cmd import db_app
    from shop_deployer.cli.deploy_cmd import deploy_app

    app.add_typer(db_app, name="db", help="Database migration commands")
    app.add_typer(deploy_app, name="deploy", help="Shop deployment commands")


_register_subcommands()

"""ORM model registry — import all models so Alembic autogenerate discovers them."""

from shop_deployer.models.shop import Shop
from shop_deployer.models.shop_deployment import ShopDeployment

__all__ = [
    "Shop",
    "ShopDeployment",
]

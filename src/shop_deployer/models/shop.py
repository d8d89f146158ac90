"""Shop model — a storefront whose static build gets deployed."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shop_deployer.models.base import Base, UUIDMixin

if TYPE_CHECKING:
    from shop_deployer.models.shop_deployment import ShopDeployment


class Shop(Base, UUIDMixin):
    """A shop owning zero or more deployments.

    Attributes:
        name: Display name.
        data_dir: Name of the shop's data directory inside a published build.
        network_id: Chain/environment the shop is configured for.
        created_at: Creation timestamp.
    """

    __tablename__ = "shops"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    data_dir: Mapped[str] = mapped_column(String(200), nullable=False)
    network_id: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    deployments: Mapped[list["ShopDeployment"]] = relationship(
        back_populates="shop",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ShopDeployment.created_at.desc()",
    )

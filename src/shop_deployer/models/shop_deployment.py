"""ShopDeployment model — the durable record of one publish pipeline run.

Rows are written once and never updated. Any of domain, gateway and hash
may be NULL when the corresponding pipeline stage was skipped by
configuration.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shop_deployer.models.base import Base, UUIDMixin

if TYPE_CHECKING:
    from shop_deployer.models.shop import Shop


class ShopDeployment(Base, UUIDMixin):
    """A single deployment of a shop to IPFS.

    Attributes:
        shop_id: FK to the owning shop.
        domain: Human-facing URL, e.g. ``https://myshop.example.com``.
        ipfs_gateway: Gateway the content was published behind.
        ipfs_hash: Content identifier of the published root directory.
        created_at: When the deployment was recorded.
    """

    __tablename__ = "shop_deployments"

    shop_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("shops.id", ondelete="CASCADE"),
        nullable=False,
    )
    domain: Mapped[str | None] = mapped_column(String(500), nullable=True)
    ipfs_gateway: Mapped[str | None] = mapped_column(String(500), nullable=True)
    ipfs_hash: Mapped[str | None] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    shop: Mapped["Shop"] = relationship(back_populates="deployments")

    __table_args__ = (
        Index("ix_shop_deployments_shop_id", "shop_id"),
        Index("ix_shop_deployments_ipfs_hash", "ipfs_hash"),
    )

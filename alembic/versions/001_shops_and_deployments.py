"""Create shops and shop_deployments tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

import sqlalchemy as sa
from alembic import op

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create shops and shop_deployments tables."""
    op.create_table(
        "shops",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("data_dir", sa.String(200), nullable=False),
        sa.Column("network_id", sa.Integer(), nullable=False, server_default="1"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "shop_deployments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("shop_id", sa.Uuid(), nullable=False),
        sa.Column("domain", sa.String(500), nullable=True),
        sa.Column("ipfs_gateway", sa.String(500), nullable=True),
        sa.Column("ipfs_hash", sa.String(128), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["shop_id"], ["shops.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_shop_deployments_shop_id", "shop_deployments", ["shop_id"])
    op.create_index("ix_shop_deployments_ipfs_hash", "shop_deployments", ["ipfs_hash"])


def downgrade() -> None:
    """Drop shop_deployments and shops tables."""
    op.drop_index("ix_shop_deployments_ipfs_hash", table_name="shop_deployments")
    op.drop_index("ix_shop_deployments_shop_id", table_name="shop_deployments")
    op.drop_table("shop_deployments")
    op.drop_table("shops")

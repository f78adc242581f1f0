"""create restaurants, tables, orders and order requests

Revision ID: 202610190900
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "202610190900"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "restaurants",
        sa.Column("id", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.Column("last_order", sa.Time(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "restaurant_tables",
        sa.Column("id", sa.String(length=50), nullable=False),
        sa.Column("restaurant_id", sa.String(length=50), nullable=False),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("table_type", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.ForeignKeyConstraint(["restaurant_id"], ["restaurants.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("restaurant_id", "number", name="uq_restaurant_tables_number"),
    )
    op.create_index(
        "ix_restaurant_tables_restaurant_id",
        "restaurant_tables",
        ["restaurant_id"],
        unique=False,
    )

    op.create_table(
        "orders",
        sa.Column("id", sa.String(length=50), nullable=False),
        sa.Column("table_id", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("customer_name", sa.String(length=255), server_default="", nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["table_id"], ["restaurant_tables.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_orders_table_created_at_desc",
        "orders",
        ["table_id", sa.text("created_at DESC")],
        unique=False,
    )
    op.create_index("ix_orders_status", "orders", ["status"], unique=False)

    op.create_table(
        "order_requests",
        sa.Column("id", sa.String(length=50), nullable=False),
        sa.Column("order_id", sa.String(length=50), nullable=False),
        sa.Column("request_number", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("rejected_reason", sa.String(length=1000), nullable=True),
        sa.Column("rejected_flag", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_order_requests_order_id", "order_requests", ["order_id"], unique=False)

    op.create_table(
        "order_request_items",
        sa.Column("id", sa.String(length=50), nullable=False),
        sa.Column("order_request_id", sa.String(length=50), nullable=False),
        sa.Column("menu_item_id", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["order_request_id"], ["order_requests.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_order_request_items_order_request_id",
        "order_request_items",
        ["order_request_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_order_request_items_order_request_id", table_name="order_request_items")
    op.drop_table("order_request_items")
    op.drop_index("ix_order_requests_order_id", table_name="order_requests")
    op.drop_table("order_requests")
    op.drop_index("ix_orders_status", table_name="orders")
    op.drop_index("ix_orders_table_created_at_desc", table_name="orders")
    op.drop_table("orders")
    op.drop_index("ix_restaurant_tables_restaurant_id", table_name="restaurant_tables")
    op.drop_table("restaurant_tables")
    op.drop_table("restaurants")

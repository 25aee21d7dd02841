"""Initial schema: users, categories, vehicles, histories.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("fullname", sa.String(100), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(80), nullable=False, unique=True),
        *_timestamps(),
    )
    op.create_index("ix_categories_id", "categories", ["id"])

    op.create_table(
        "vehicles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=False),
        sa.Column("image", sa.String(255), nullable=True),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("qty", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("prepayment", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
        sa.CheckConstraint("price > 0", name="check_vehicle_price_positive"),
        sa.CheckConstraint("qty >= 0", name="check_vehicle_qty_non_negative"),
    )
    op.create_index("ix_vehicles_id", "vehicles", ["id"])
    op.create_index("ix_vehicles_name", "vehicles", ["name"])
    op.create_index("ix_vehicles_category_id", "vehicles", ["category_id"])

    op.create_table(
        "histories",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("vehicle_id", sa.Integer(), sa.ForeignKey("vehicles.id"), nullable=False),
        sa.Column("payment_code", sa.String(80), nullable=False),
        sa.Column("payment", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("returned", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("prepayment", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("qty", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("start_rent", sa.Date(), nullable=False),
        sa.Column("end_rent", sa.Date(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("payment_code", name="uq_histories_payment_code"),
        sa.CheckConstraint("qty > 0", name="check_history_qty_positive"),
        sa.CheckConstraint("prepayment >= 0", name="check_history_prepayment_non_negative"),
        sa.CheckConstraint("end_rent > start_rent", name="check_history_rent_window"),
    )
    op.create_index("ix_histories_id", "histories", ["id"])
    op.create_index("ix_histories_user_id", "histories", ["user_id"])
    op.create_index("ix_histories_vehicle_id", "histories", ["vehicle_id"])
    # Stock lookups: SUM(qty) WHERE vehicle_id = :id AND returned = false
    op.create_index("ix_histories_vehicle_returned", "histories", ["vehicle_id", "returned"])


def downgrade() -> None:
    op.drop_table("histories")
    op.drop_table("vehicles")
    op.drop_table("categories")
    op.drop_table("users")

"""Durable key-value store table

Revision ID: 20261019_kv_store
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_kv_store"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "kv_store",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("namespace", sa.String(length=64), nullable=False),
        sa.Column("key", sa.String(length=128), nullable=False),
        sa.Column("value", sa.JSON(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("namespace", "key", name="uq_kv_store_namespace_key"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("kv_store", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_kv_store_namespace"), ["namespace"], unique=False)


def downgrade():
    with op.batch_alter_table("kv_store", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_kv_store_namespace"))

    op.drop_table("kv_store")

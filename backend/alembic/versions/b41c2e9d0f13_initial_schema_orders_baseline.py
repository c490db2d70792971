"""initial_schema_orders_baseline

Revision ID: b41c2e9d0f13
Revises:
Create Date: 2024-03-01 09:00:00.000000

BASELINE MIGRATION for SALES ORDERS v1.0

Existing databases (orders table present) are stamped without changes.
New databases get the full schema from salesorders.persistence.schema.
"""
from typing import Sequence, Union

from alembic import op
from sqlalchemy import text

from salesorders.persistence.schema import SCHEMA_STATEMENTS, TABLE_NAMES


# revision identifiers, used by Alembic.
revision: str = 'b41c2e9d0f13'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    conn = op.get_bind()
    result = conn.execute(text(
        "SELECT EXISTS (SELECT 1 FROM information_schema.tables WHERE table_name = :name)"
    ), {"name": table_name})
    return result.scalar()


def upgrade() -> None:
    """
    Create initial schema if database is empty.
    Skip if tables already exist (baseline for existing DBs).
    """
    if table_exists('orders'):
        print("  Schema already exists - baseline migration (no changes)")
        return

    print("  Creating initial schema v1.0...")
    conn = op.get_bind()

    for statement in SCHEMA_STATEMENTS:
        conn.execute(text(statement))

    print("  Initial schema v1.0 created successfully")


def downgrade() -> None:
    """
    Drop all tables in reverse dependency order.
    WARNING: This will destroy all data!
    """
    conn = op.get_bind()

    for table in TABLE_NAMES:
        conn.execute(text(f"DROP TABLE IF EXISTS {table} CASCADE"))

    print("  All tables dropped")

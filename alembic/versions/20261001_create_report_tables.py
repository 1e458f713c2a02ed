"""Create reports, customers and reviews tables.

Revision ID: 001_create_report_tables
Revises:
Create Date: 2026-10-01

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_create_report_tables"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the report store and the customer/review reference tables."""
    op.create_table(
        "reports",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("client_name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(500), nullable=False),
        sa.Column("city", sa.String(255), nullable=False),
        sa.Column("state", sa.String(64), nullable=False),
        sa.Column("zip", sa.String(16), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("lat", sa.Float, nullable=True),
        sa.Column("lng", sa.Float, nullable=True),
        sa.Column("viewed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now()
        ),
    )

    op.create_table(
        "customers",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("lat", sa.Float, nullable=False),
        sa.Column("lng", sa.Float, nullable=False),
        sa.Column("install_date", sa.Date, nullable=True),
        sa.Column("city", sa.String(255), nullable=True),
    )
    op.create_index("ix_customers_lat_lng", "customers", ["lat", "lng"])

    op.create_table(
        "reviews",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("author", sa.String(255), nullable=False),
        sa.Column("quote", sa.Text, nullable=False),
        sa.Column("zip", sa.String(16), nullable=False),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column(
            "created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now()
        ),
    )
    op.create_index("ix_reviews_zip", "reviews", ["zip"])
    op.create_index("ix_reviews_rating", "reviews", ["rating"])


def downgrade() -> None:
    """Drop all report tables."""
    op.drop_index("ix_reviews_rating", table_name="reviews")
    op.drop_index("ix_reviews_zip", table_name="reviews")
    op.drop_table("reviews")
    op.drop_index("ix_customers_lat_lng", table_name="customers")
    op.drop_table("customers")
    op.drop_table("reports")

"""create articles and product_articles

Revision ID: 3f2a9c1d7b4e
Revises:
Create Date: 2026-10-16
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f2a9c1d7b4e"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "articles",
        sa.Column("art_id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        sa.CheckConstraint("stock >= 0", name="ck_article_stock_nonneg"),
    )
    op.create_table(
        "product_articles",
        sa.Column("product_name", sa.String(255), primary_key=True),
        sa.Column("art_id", sa.String(64), primary_key=True),
        sa.Column("amount_of", sa.Integer(), nullable=False),
        sa.CheckConstraint("amount_of > 0", name="ck_product_article_amount_pos"),
    )
    op.create_index("ix_product_articles_art_id", "product_articles", ["art_id"])


def downgrade() -> None:
    op.drop_index("ix_product_articles_art_id", table_name="product_articles")
    op.drop_table("product_articles")
    op.drop_table("articles")

from __future__ import annotations

from sqlalchemy import (
    String,
    Integer,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column

from warehouse.app.db.base import Base


# ---------- INVENTORY ----------
class Article(Base):
    __tablename__ = "articles"
    art_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    __table_args__ = (CheckConstraint("stock >= 0", name="ck_article_stock_nonneg"),)


# ---------- CATALOG ----------
class ProductArticle(Base):
    """
    Une ligne par (produit, article).
    Pas de FK vers articles : un produit peut être chargé avant son stock
    (article absent == stock 0).
    """

    __tablename__ = "product_articles"
    product_name: Mapped[str] = mapped_column(String(255), primary_key=True)
    art_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    amount_of: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("amount_of > 0", name="ck_product_article_amount_pos"),
        Index("ix_product_articles_art_id", "art_id"),
    )

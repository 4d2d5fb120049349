"""
Catalogue fixe des requêtes émises par le moteur d'inventaire.

Chaque fonction construit un statement SQLAlchemy paramétré ; aucune
n'exécute quoi que ce soit (la transaction appartient au service).
"""

from __future__ import annotations

from sqlalchemy import func, insert, or_, select, update
from sqlalchemy.dialects import postgresql, sqlite

from warehouse.app.db.models.models_v1 import Article, ProductArticle


def _composition(product_name: str):
    return select(ProductArticle.art_id).where(ProductArticle.product_name == product_name)


# ---------- LECTURES ----------
def list_stock():
    return select(Article.art_id, Article.name, Article.stock).order_by(Article.art_id)


def list_product_availability():
    """
    Une ligne par produit : (nom, nb de produits constructibles).
    Article absent == stock 0.
    """
    available = func.min(func.coalesce(Article.stock, 0) // ProductArticle.amount_of)
    return (
        select(ProductArticle.product_name, available.label("available"))
        .select_from(ProductArticle)
        .outerjoin(Article, Article.art_id == ProductArticle.art_id)
        .group_by(ProductArticle.product_name)
        .order_by(ProductArticle.product_name)
    )


def product_exists(product_name: str):
    return (
        select(func.count())
        .select_from(ProductArticle)
        .where(ProductArticle.product_name == product_name)
    )


def lock_product_articles(product_name: str):
    # ordre déterministe -> pas de deadlock entre deux ventes concurrentes
    return (
        select(Article.art_id)
        .where(Article.art_id.in_(_composition(product_name)))
        .order_by(Article.art_id)
        .with_for_update()
    )


def product_in_stock(product_name: str):
    """
    Nombre d'articles de la composition en rupture.
    0 == vendable, tout autre valeur bloque la vente.
    """
    return (
        select(func.count())
        .select_from(ProductArticle)
        .outerjoin(Article, Article.art_id == ProductArticle.art_id)
        .where(ProductArticle.product_name == product_name)
        .where(or_(Article.art_id.is_(None), Article.stock < ProductArticle.amount_of))
    )


# ---------- ÉCRITURES ----------
def decrement_stock_for_product(product_name: str):
    required = (
        select(ProductArticle.amount_of)
        .where(ProductArticle.product_name == product_name)
        .where(ProductArticle.art_id == Article.art_id)
        .scalar_subquery()
    )
    return (
        update(Article)
        .where(Article.art_id.in_(_composition(product_name)))
        .values(stock=Article.stock - required)
        .execution_options(synchronize_session=False)
    )


def insert_composition(product_name: str, art_id: str, amount_of: int):
    return insert(ProductArticle).values(product_name=product_name, art_id=art_id, amount_of=amount_of)


def insert_stock(art_id: str, name: str, quantity: int, dialect_name: str = "postgresql"):
    """
    Upsert : un art_id déjà connu voit son stock augmenté de `quantity`.
    Dialectes sans ON CONFLICT -> INSERT simple (doublon == erreur).
    """
    values = {"art_id": art_id, "name": name, "stock": quantity}

    if dialect_name == "postgresql":
        stmt = postgresql.insert(Article).values(**values)
    elif dialect_name == "sqlite":
        stmt = sqlite.insert(Article).values(**values)
    else:
        return insert(Article).values(**values)

    return stmt.on_conflict_do_update(
        index_elements=[Article.art_id],
        set_={"name": stmt.excluded.name, "stock": Article.stock + stmt.excluded.stock},
    )

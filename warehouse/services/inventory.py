from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

import structlog
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from warehouse.app.db.models.core_types import SaleState
from warehouse.app.schemas.inventory import Inventory, Products, ProductStock, Stock
from warehouse.services import queries
from warehouse.services.exceptions import (
    ConnectivityError,
    DeadlineExceededError,
    InventoryError,
    OutOfStockError,
    ProductNotFoundError,
    QueryError,
    WriteError,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OperationContext:
    """
    Contexte d'un appel : request id + deadline (time.monotonic()).
    deadline=None -> pas de limite.
    """

    request_id: str | None = None
    deadline: float | None = None

    @classmethod
    def with_timeout(cls, seconds: float | None, request_id: str | None = None) -> "OperationContext":
        deadline = None if seconds is None else time.monotonic() + seconds
        return cls(request_id=request_id, deadline=deadline)

    def remaining(self) -> float | None:
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self) -> None:
        if self.expired():
            raise DeadlineExceededError()


def parse_quantity(value: Any) -> int:
    """Parsing volontairement laxiste : tout ce qui n'est pas un entier vaut 0."""
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


class InventoryService:
    """
    Moteur transactionnel produits / articles / stock.

    Propriétés :
    - une transaction neuve par appel, aucun état entre deux appels
    - stock jamais négatif (FOR UPDATE + CHECK stock >= 0)
    - vente et uploads tout-ou-rien
    - aucune relance automatique : l'erreur typée remonte telle quelle
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    # ---------- Plomberie transactionnelle ----------
    @contextmanager
    def _transaction(self, ctx: OperationContext) -> Iterator[Session]:
        db = self._session_factory()
        try:
            self._begin(db, ctx)
            yield db
        except BaseException:
            try:
                db.rollback()
            except SQLAlchemyError:
                logger.warning("rollback failed", exc_info=True)
            raise
        finally:
            db.close()

    def _begin(self, db: Session, ctx: OperationContext) -> None:
        ctx.check()
        try:
            conn = db.connection()
            remaining = ctx.remaining()
            # Postgres : le serveur coupe lui-même une requête qui dépasse la deadline
            if remaining is not None and conn.dialect.name == "postgresql":
                timeout_ms = max(1, int(remaining * 1000))
                db.execute(select(func.set_config("statement_timeout", str(timeout_ms), True)))
        except SQLAlchemyError as exc:
            raise QueryError("transaction begin failed") from exc

    def _read(self, db: Session, ctx: OperationContext, stmt, what: str) -> list:
        ctx.check()
        try:
            return list(db.execute(stmt).all())
        except SQLAlchemyError as exc:
            if ctx.expired():
                raise DeadlineExceededError() from exc
            raise QueryError(f"{what} query failed") from exc

    def _scalar(self, db: Session, ctx: OperationContext, stmt, what: str) -> int:
        rows = self._read(db, ctx, stmt, what)
        if not rows:
            return 0
        return int(rows[0][0] or 0)

    def _write(self, db: Session, ctx: OperationContext, stmt, what: str) -> None:
        ctx.check()
        try:
            db.execute(stmt)
        except SQLAlchemyError as exc:
            if ctx.expired():
                raise DeadlineExceededError() from exc
            raise WriteError(f"{what} failed") from exc

    def _commit(self, db: Session, ctx: OperationContext) -> None:
        ctx.check()
        try:
            db.commit()
        except SQLAlchemyError as exc:
            raise WriteError("transaction commit failed") from exc

    # ---------- Opérations ----------
    def ping(self) -> None:
        try:
            with self._session_factory() as db:
                db.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.error("ping failed", error=str(exc))
            raise ConnectivityError("store is unreachable") from exc

    def get_inventory(self, ctx: OperationContext) -> list[Stock]:
        log = logger.bind(rid=ctx.request_id)
        log.debug("get_inventory entry")
        try:
            with self._transaction(ctx) as db:
                rows = self._read(db, ctx, queries.list_stock(), "list stock")
        except InventoryError as exc:
            log.error("get_inventory failed", error=exc.message, code=exc.code)
            raise

        stocks = [Stock(art_id=art_id, name=name, stock=stock) for art_id, name, stock in rows]
        log.debug("get_inventory done", count=len(stocks))
        return stocks

    def get_product_stock(self, ctx: OperationContext) -> list[ProductStock]:
        log = logger.bind(rid=ctx.request_id)
        log.debug("get_product_stock entry")
        try:
            with self._transaction(ctx) as db:
                rows = self._read(db, ctx, queries.list_product_availability(), "product availability")
        except InventoryError as exc:
            log.error("get_product_stock failed", error=exc.message, code=exc.code)
            raise

        stocks = []
        for name, available in rows:
            # produit non constructible -> masqué
            if parse_quantity(available) != 0:
                stocks.append(ProductStock(name=name, available_product_no=str(available)))

        log.debug("get_product_stock done", count=len(stocks))
        return stocks

    def upload_products(self, ctx: OperationContext, products: Products) -> int:
        """Retourne le nombre de PRODUITS insérés (pas de lignes de composition)."""
        log = logger.bind(rid=ctx.request_id)
        log.debug("upload_products entry", products=len(products.products))
        try:
            with self._transaction(ctx) as db:
                for product in products.products:
                    # produit immuable : un nom déjà connu (même plus haut dans le batch) est refusé
                    if self._scalar(db, ctx, queries.product_exists(product.name), "product exists") != 0:
                        raise WriteError(f"product {product.name!r} already exists")
                    for contain in product.contain_articles:
                        self._write(
                            db,
                            ctx,
                            queries.insert_composition(product.name, contain.art_id, contain.amount_of),
                            f"insert product {product.name!r}",
                        )
                self._commit(db, ctx)
        except InventoryError as exc:
            log.error("upload_products rolled back", error=exc.message, code=exc.code)
            raise

        inserted = len(products.products)
        log.debug("upload_products done", inserted=inserted)
        return inserted

    def upload_inventory(self, ctx: OperationContext, inventory: Inventory) -> int:
        log = logger.bind(rid=ctx.request_id)
        log.debug("upload_inventory entry", records=len(inventory.inventory))
        try:
            with self._transaction(ctx) as db:
                dialect_name = db.get_bind().dialect.name
                for record in inventory.inventory:
                    self._write(
                        db,
                        ctx,
                        queries.insert_stock(record.art_id, record.name, record.quantity, dialect_name),
                        f"insert stock {record.art_id!r}",
                    )
                self._commit(db, ctx)
        except InventoryError as exc:
            log.error("upload_inventory rolled back", error=exc.message, code=exc.code)
            raise

        inserted = len(inventory.inventory)
        log.debug("upload_inventory done", inserted=inserted)
        return inserted

    def sell_product(self, ctx: OperationContext, product_name: str) -> None:
        """
        STARTED -> EXISTENCE_CHECKED -> STOCK_CHECKED -> DECREMENTED -> COMMITTED
        Toute erreur -> ROLLED_BACK, l'erreur d'origine remonte.

        Les lignes articles sont verrouillées (FOR UPDATE, ordre art_id) AVANT
        le contrôle de stock : une vente concurrente attend le commit puis relit.
        """
        log = logger.bind(rid=ctx.request_id, product=product_name)
        log.debug("sell_product entry")
        state = SaleState.started
        try:
            with self._transaction(ctx) as db:
                exists = self._scalar(db, ctx, queries.product_exists(product_name), "product exists")
                if exists == 0:
                    raise ProductNotFoundError(product_name)
                state = SaleState.existence_checked

                self._read(db, ctx, queries.lock_product_articles(product_name), "lock articles")
                missing = self._scalar(db, ctx, queries.product_in_stock(product_name), "product in stock")
                if missing != 0:
                    raise OutOfStockError(product_name)
                state = SaleState.stock_checked

                self._write(db, ctx, queries.decrement_stock_for_product(product_name), "update inventory")
                state = SaleState.decremented

                self._commit(db, ctx)
                state = SaleState.committed
        except (ProductNotFoundError, OutOfStockError) as exc:
            log.info("sale refused", reason=exc.message, failed_at=state.value, state=SaleState.rolled_back.value)
            raise
        except InventoryError as exc:
            log.error("sale failed", error=exc.message, code=exc.code, failed_at=state.value, state=SaleState.rolled_back.value)
            raise

        log.debug("product sold, inventory updated", state=state.value)

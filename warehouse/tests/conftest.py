import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from warehouse.app.core.config import Settings
from warehouse.app.db.models.models_v1 import Base
from warehouse.app.db.session import build_engine, build_session_factory
from warehouse.app.main import create_app
from warehouse.app.schemas.inventory import Inventory, Products
from warehouse.services.inventory import InventoryService, OperationContext


@pytest.fixture(scope="function")
def engine(tmp_path) -> Engine:
    """
    Schéma neuf par test.

    TEST_DATABASE_URL (postgres) si défini, sinon un fichier SQLite jetable.
    Le service ouvre ses propres transactions : pas de SAVEPOINT englobant ici,
    on repart d'un schéma vide à chaque test.
    """
    url = os.getenv("TEST_DATABASE_URL") or f"sqlite:///{tmp_path / 'warehouse.db'}"
    engine = build_engine(url)
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def inventory(engine) -> InventoryService:
    return InventoryService(build_session_factory(engine))


@pytest.fixture
def ctx() -> OperationContext:
    return OperationContext(request_id="test")


@pytest.fixture
def client(engine, inventory) -> TestClient:
    settings = Settings(database_url=engine.url.render_as_string(hide_password=False), environment="test")
    return TestClient(create_app(settings, inventory=inventory))


@pytest.fixture
def load_stock(inventory, ctx):
    """load_stock(A1=5, A2=3) -> articles A1/A2 avec ce stock."""

    def _load(**stocks: int) -> int:
        payload = Inventory(
            inventory=[
                {"art_id": art_id, "name": f"article {art_id}", "stock": qty} for art_id, qty in stocks.items()
            ]
        )
        return inventory.upload_inventory(ctx, payload)

    return _load


@pytest.fixture
def load_product(inventory, ctx):
    """load_product("P", A1=2, A2=1) -> produit P = 2 x A1 + 1 x A2."""

    def _load(name: str, **needs: int) -> int:
        payload = Products(
            products=[
                {
                    "name": name,
                    "contain_articles": [{"art_id": art_id, "amount_of": amount} for art_id, amount in needs.items()],
                }
            ]
        )
        return inventory.upload_products(ctx, payload)

    return _load


@pytest.fixture
def stock_by_article(inventory, ctx):
    def _read() -> dict[str, int]:
        return {s.art_id: s.quantity for s in inventory.get_inventory(ctx)}

    return _read

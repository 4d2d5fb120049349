from __future__ import annotations

from warehouse.app.core.config import Settings
from warehouse.app.db.session import build_engine, build_session_factory
from warehouse.app.schemas.inventory import Inventory, Products
from warehouse.services.inventory import InventoryService, OperationContext

SAMPLE_INVENTORY = {
    "inventory": [
        {"art_id": "1", "name": "leg", "stock": "12"},
        {"art_id": "2", "name": "screw", "stock": "17"},
        {"art_id": "3", "name": "seat", "stock": "2"},
        {"art_id": "4", "name": "table top", "stock": "1"},
    ]
}

SAMPLE_PRODUCTS = {
    "products": [
        {
            "name": "Dining Chair",
            "contain_articles": [
                {"art_id": "1", "amount_of": "4"},
                {"art_id": "2", "amount_of": "8"},
                {"art_id": "3", "amount_of": "1"},
            ],
        },
        {
            "name": "Dinning Table",
            "contain_articles": [
                {"art_id": "1", "amount_of": "4"},
                {"art_id": "2", "amount_of": "8"},
                {"art_id": "4", "amount_of": "1"},
            ],
        },
    ]
}


def run_seed(inventory: InventoryService) -> tuple[int, int]:
    ctx = OperationContext(request_id="seed")
    items = inventory.upload_inventory(ctx, Inventory.model_validate(SAMPLE_INVENTORY))
    products = inventory.upload_products(ctx, Products.model_validate(SAMPLE_PRODUCTS))
    return items, products


if __name__ == "__main__":
    settings = Settings.from_env()
    engine = build_engine(settings.database_url, pool_size=settings.db_pool_size)
    try:
        items, products = run_seed(InventoryService(build_session_factory(engine)))
        print(f"SEED OK: {items} item inserted, {products} product inserted")
    finally:
        engine.dispose()

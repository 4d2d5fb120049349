"""
Ventes concurrentes du même produit (vrai Postgres, pas de mock).

Il reste UNE unité : deux threads vendent en même temps, un seul doit
réussir, l'autre reçoit OutOfStockError, et le stock finit à 0 (jamais -1).

Nécessite TEST_DATABASE_URL vers un Postgres ; ignoré sinon
(SQLite n'a pas de verrou de ligne).
"""

import threading

import pytest

from warehouse.services.exceptions import OutOfStockError
from warehouse.services.inventory import OperationContext


@pytest.fixture(autouse=True)
def _postgres_only(engine):
    if engine.dialect.name != "postgresql":
        pytest.skip("TEST_DATABASE_URL is not a PostgreSQL database; skipping concurrency tests.")


@pytest.mark.parametrize("round_", range(5))
def test_two_concurrent_sales_with_one_unit_left(inventory, load_stock, load_product, stock_by_article, round_):
    load_stock(A1=2, A2=1)
    load_product("P", A1=2, A2=1)

    barrier = threading.Barrier(2)
    results: dict[str, object] = {}

    def seller(name: str) -> None:
        barrier.wait(timeout=5.0)
        try:
            inventory.sell_product(OperationContext.with_timeout(10.0, request_id=name), "P")
            results[name] = "sold"
        except OutOfStockError as exc:
            results[name] = exc

    threads = [threading.Thread(target=seller, args=(f"seller-{i}",)) for i in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=15.0)

    outcomes = list(results.values())
    assert outcomes.count("sold") == 1
    assert sum(isinstance(o, OutOfStockError) for o in outcomes) == 1
    assert stock_by_article() == {"A1": 0, "A2": 0}

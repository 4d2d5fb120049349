"""
Verrouillage de la vente, vérifiable sans Postgres.

- la requête de verrou compile en FOR UPDATE, ordonnée par art_id
- sell_product pose ce verrou AVANT le contrôle de stock, puis décrémente
"""

import pytest
from sqlalchemy import event
from sqlalchemy.dialects import postgresql

from warehouse.services import queries


def test_lock_query_is_for_update_in_article_order():
    sql = str(queries.lock_product_articles("P").compile(dialect=postgresql.dialect()))

    assert "FOR UPDATE" in sql
    assert "ORDER BY articles.art_id" in sql


@pytest.fixture
def statements(engine):
    seen: list[str] = []

    def record(conn, cursor, statement, parameters, context, executemany):
        seen.append(" ".join(statement.split()))

    event.listen(engine, "before_cursor_execute", record)
    try:
        yield seen
    finally:
        event.remove(engine, "before_cursor_execute", record)


def _index(seen: list[str], predicate) -> int:
    matches = [i for i, sql in enumerate(seen) if predicate(sql)]
    assert matches, seen
    return matches[0]


def test_sell_locks_articles_before_checking_stock(inventory, ctx, load_stock, load_product, statements):
    load_stock(A1=5, A2=3)
    load_product("P", A1=2, A2=1)
    statements.clear()

    inventory.sell_product(ctx, "P")

    lock = _index(statements, lambda s: s.startswith("SELECT articles.art_id FROM articles") and "ORDER BY articles.art_id" in s)
    stock_check = _index(statements, lambda s: "count(" in s.lower() and "LEFT OUTER JOIN articles" in s)
    decrement = _index(statements, lambda s: s.startswith("UPDATE articles"))

    assert lock < stock_check < decrement

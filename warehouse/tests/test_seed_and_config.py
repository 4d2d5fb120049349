from warehouse.app.core.config import DEFAULT_DATABASE_URL, Settings
from warehouse.app.db.seed import run_seed


def test_seed_loads_sample_catalog(inventory, ctx):
    assert run_seed(inventory) == (4, 2)

    stocks = {p.name: p.available_product_no for p in inventory.get_product_stock(ctx)}
    assert stocks == {"Dining Chair": "2", "Dinning Table": "1"}


def test_settings_defaults(monkeypatch):
    for var in ("DATABASE_URL", "LOG_LEVEL", "BACKEND_TIMEOUT", "DB_POOL_SIZE", "ENVIRONMENT"):
        monkeypatch.delenv(var, raising=False)

    settings = Settings.from_env()

    assert settings.database_url == DEFAULT_DATABASE_URL
    assert settings.backend_timeout == 25.0
    assert settings.db_pool_size == 5
    assert settings.environment == "development"


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///warehouse.db")
    monkeypatch.setenv("BACKEND_TIMEOUT", "2.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("VERSION", "1.2.3")

    settings = Settings.from_env()

    assert settings.database_url == "sqlite:///warehouse.db"
    assert settings.backend_timeout == 2.5
    assert settings.log_level == "debug"
    assert settings.version == "1.2.3"

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker


def build_engine(database_url: str, pool_size: int = 5) -> Engine:
    """
    Un seul engine (pool partagé) par process.

    Postgres : READ COMMITTED + verrous FOR UPDATE posés par le service.
    SQLite : usage local / tests uniquement.
    """
    url = make_url(database_url)
    kwargs: dict = {"pool_pre_ping": True, "pool_size": pool_size}

    if url.get_backend_name() == "postgresql":
        kwargs["isolation_level"] = "READ COMMITTED"
    elif url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}

    return create_engine(url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

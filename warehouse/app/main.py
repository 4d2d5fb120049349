from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from warehouse.app.api.v1.router import router as v1_router
from warehouse.app.core.config import Settings
from warehouse.app.core.logging import bind_request_id, clear_request_id, configure_logging
from warehouse.app.db.session import build_engine, build_session_factory
from warehouse.app.schemas.inventory import ResponseError
from warehouse.services.inventory import InventoryService

logger = structlog.get_logger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "invalid request"


def create_app(settings: Settings | None = None, inventory: InventoryService | None = None) -> FastAPI:
    """
    `inventory` fourni (tests) -> utilisé tel quel.
    Sinon l'engine est construit une seule fois au démarrage et partagé.
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = None
        if getattr(app.state, "inventory", None) is None:
            engine = build_engine(settings.database_url, pool_size=settings.db_pool_size)
            app.state.inventory = InventoryService(build_session_factory(engine))
            logger.info("store engine ready", dialect=engine.dialect.name)
        try:
            yield
        finally:
            if engine is not None:
                engine.dispose()

    app = FastAPI(title="WAREHOUSE INVENTORY", version=settings.version, lifespan=lifespan)
    app.state.settings = settings
    app.state.inventory = inventory

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        request.state.deadline = time.monotonic() + settings.backend_timeout
        bind_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            clear_request_id()
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content=ResponseError(message=str(exc.detail)).model_dump())

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=ResponseError(message=_validation_message(exc)).model_dump())

    app.include_router(v1_router, prefix="/warehouse/v1")
    return app


def run() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level, settings.environment, release=settings.version)
    uvicorn.run(create_app(settings), host=settings.listen_host, port=settings.listen_port)


if __name__ == "__main__":
    run()

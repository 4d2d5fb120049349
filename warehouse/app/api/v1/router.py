from fastapi import APIRouter

from warehouse.app.api.v1.endpoints.health import router as health_router
from warehouse.app.api.v1.endpoints.products import router as products_router
from warehouse.app.api.v1.endpoints.stock import router as stock_router

router = APIRouter()
router.include_router(health_router, tags=["health"])
router.include_router(products_router, tags=["products"])
router.include_router(stock_router, tags=["stock"])

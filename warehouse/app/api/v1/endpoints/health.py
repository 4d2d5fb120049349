from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from warehouse.app.api.deps import get_inventory_service
from warehouse.services.exceptions import ConnectivityError
from warehouse.services.inventory import InventoryService

router = APIRouter(prefix="/health")


@router.get("")
def is_healthy(inventory: InventoryService = Depends(get_inventory_service)):
    try:
        inventory.ping()
    except ConnectivityError:
        return JSONResponse(status_code=500, content={"message": "unhealthy endpoint"})
    return {"message": "healthy endpoint"}

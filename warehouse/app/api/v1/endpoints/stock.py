from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from warehouse.app.api.deps import get_inventory_service, get_operation_context
from warehouse.app.schemas.inventory import Inventory, ResponseProduct
from warehouse.services.exceptions import DeadlineExceededError, InventoryError
from warehouse.services.inventory import InventoryService, OperationContext

router = APIRouter(prefix="/inventory")


@router.get(
    "",
    response_model=ResponseProduct,
    response_model_exclude_none=True,
)
def get_inventory(
    inventory: InventoryService = Depends(get_inventory_service),
    ctx: OperationContext = Depends(get_operation_context),
):
    """Stock de tous les articles (READ ONLY)."""
    try:
        stocks = inventory.get_inventory(ctx)
    except DeadlineExceededError as exc:
        raise HTTPException(status_code=504, detail=exc.message)
    except InventoryError as exc:
        raise HTTPException(status_code=404, detail=exc.message)

    return ResponseProduct(inventory=stocks)


@router.post(
    "",
    response_model=ResponseProduct,
    response_model_exclude_none=True,
)
def upload_inventory(
    payload: Inventory,
    inventory: InventoryService = Depends(get_inventory_service),
    ctx: OperationContext = Depends(get_operation_context),
):
    try:
        inserted = inventory.upload_inventory(ctx, payload)
    except DeadlineExceededError as exc:
        raise HTTPException(status_code=504, detail=exc.message)
    except InventoryError as exc:
        raise HTTPException(status_code=400, detail=exc.message)

    return ResponseProduct(message=f"{inserted} item inserted")

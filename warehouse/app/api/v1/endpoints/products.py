from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from warehouse.app.api.deps import get_inventory_service, get_operation_context
from warehouse.app.schemas.inventory import Products, ResponseProduct
from warehouse.services.exceptions import DeadlineExceededError, InventoryError
from warehouse.services.inventory import InventoryService, OperationContext

router = APIRouter(prefix="/product")


@router.get(
    "",
    response_model=ResponseProduct,
    response_model_exclude_none=True,
)
def get_product_stock(
    inventory: InventoryService = Depends(get_inventory_service),
    ctx: OperationContext = Depends(get_operation_context),
):
    try:
        stocks = inventory.get_product_stock(ctx)
    except DeadlineExceededError as exc:
        raise HTTPException(status_code=504, detail=exc.message)
    except InventoryError as exc:
        raise HTTPException(status_code=404, detail=exc.message)

    if not stocks:
        return ResponseProduct(message="No product in stock")
    return ResponseProduct(product_stocks=stocks)


@router.post(
    "",
    response_model=ResponseProduct,
    response_model_exclude_none=True,
)
def upload_products(
    payload: Products,
    inventory: InventoryService = Depends(get_inventory_service),
    ctx: OperationContext = Depends(get_operation_context),
):
    try:
        inserted = inventory.upload_products(ctx, payload)
    except DeadlineExceededError as exc:
        raise HTTPException(status_code=504, detail=exc.message)
    except InventoryError as exc:
        raise HTTPException(status_code=400, detail=exc.message)

    return ResponseProduct(message=f"{inserted} product inserted")


@router.post(
    "/{product_name}",
    response_model=ResponseProduct,
    response_model_exclude_none=True,
)
def sell_product(
    product_name: str,
    inventory: InventoryService = Depends(get_inventory_service),
    ctx: OperationContext = Depends(get_operation_context),
):
    try:
        inventory.sell_product(ctx, product_name)
    except DeadlineExceededError as exc:
        raise HTTPException(status_code=504, detail=exc.message)
    except InventoryError as exc:
        # not found / out of stock / write : erreur client
        raise HTTPException(status_code=400, detail=exc.message)

    return ResponseProduct(message=f"Product {product_name} is sold and inventory is updated accordingly")

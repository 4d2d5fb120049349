from __future__ import annotations

from fastapi import Request

from warehouse.services.inventory import InventoryService, OperationContext


def get_inventory_service(request: Request) -> InventoryService:
    return request.app.state.inventory


def get_operation_context(request: Request) -> OperationContext:
    """Deadline fixée à l'arrivée de la requête (backend_timeout)."""
    return OperationContext(
        request_id=getattr(request.state, "request_id", None),
        deadline=getattr(request.state, "deadline", None),
    )

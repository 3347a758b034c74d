"""Warehouse endpoints: stock items and stock movements."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.erp.api.dependencies import (
    WarehouseCreator,
    WarehouseDeleter,
    WarehouseEditor,
    WarehouseServiceDep,
    WarehouseViewer,
)
from src.erp.models import StockStatus
from src.erp.schemas.pagination import PaginatedResponse
from src.erp.schemas.warehouse import (
    WarehouseItemCreate,
    WarehouseItemRead,
    WarehouseItemUpdate,
    WarehouseTransactionCreate,
    WarehouseTransactionRead,
)

router = APIRouter(prefix="/warehouse", tags=["warehouse"])


@router.get(
    "",
    response_model=PaginatedResponse[WarehouseItemRead],
    summary="List warehouse items",
    description="List stock items newest first, optionally filtered by category or status.",
)
async def list_items(
    service: WarehouseServiceDep,
    _user: WarehouseViewer,
    category: Annotated[str | None, Query(description="Filter by category")] = None,
    status_filter: Annotated[
        StockStatus | None, Query(alias="status", description="Filter by stock status")
    ] = None,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
) -> PaginatedResponse[WarehouseItemRead]:
    items, next_cursor, has_more = await service.list_items(
        category=category, status=status_filter, cursor=cursor, limit=limit
    )
    return PaginatedResponse(
        items=[WarehouseItemRead.model_validate(i) for i in items],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.post(
    "",
    response_model=WarehouseItemRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create warehouse item",
    description="Create a stock item. Its status is derived from quantity and min_stock.",
    responses={
        201: {"description": "Item created"},
        403: {"description": "Missing warehouse create permission"},
    },
)
async def create_item(
    request: WarehouseItemCreate, service: WarehouseServiceDep, _user: WarehouseCreator
) -> WarehouseItemRead:
    item = await service.create_item(request)
    return WarehouseItemRead.model_validate(item)


@router.get(
    "/{item_id}",
    response_model=WarehouseItemRead,
    summary="Get warehouse item",
    responses={404: {"description": "Item not found"}},
)
async def get_item(
    item_id: UUID, service: WarehouseServiceDep, _user: WarehouseViewer
) -> WarehouseItemRead:
    item = await service.get_item(item_id)
    return WarehouseItemRead.model_validate(item)


@router.put(
    "/{item_id}",
    response_model=WarehouseItemRead,
    summary="Update warehouse item",
    responses={404: {"description": "Item not found"}},
)
async def update_item(
    item_id: UUID,
    request: WarehouseItemUpdate,
    service: WarehouseServiceDep,
    _user: WarehouseEditor,
) -> WarehouseItemRead:
    item = await service.update_item(item_id, request)
    return WarehouseItemRead.model_validate(item)


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete warehouse item",
    description="Delete a stock item and its transaction history.",
    responses={404: {"description": "Item not found"}},
)
async def delete_item(
    item_id: UUID, service: WarehouseServiceDep, _user: WarehouseDeleter
) -> None:
    await service.delete_item(item_id)


@router.get(
    "/{item_id}/transactions",
    response_model=list[WarehouseTransactionRead],
    summary="List stock movements",
    responses={404: {"description": "Item not found"}},
)
async def list_transactions(
    item_id: UUID, service: WarehouseServiceDep, _user: WarehouseViewer
) -> list[WarehouseTransactionRead]:
    transactions = await service.list_transactions(item_id)
    return [WarehouseTransactionRead.model_validate(t) for t in transactions]


@router.post(
    "/{item_id}/transactions",
    response_model=WarehouseTransactionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record stock movement",
    description="Apply an incoming or outgoing movement and re-derive the item's status.",
    responses={
        201: {"description": "Movement recorded"},
        404: {"description": "Item not found"},
    },
)
async def create_transaction(
    item_id: UUID,
    request: WarehouseTransactionCreate,
    service: WarehouseServiceDep,
    user: WarehouseEditor,
) -> WarehouseTransactionRead:
    transaction = await service.apply_transaction(item_id, request, user.id)
    return WarehouseTransactionRead.model_validate(transaction)

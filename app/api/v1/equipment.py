"""
Equipment Inventory API endpoints
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api import deps
from app.core.config import settings
from app.core.security import CurrentUser
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.equipment import (
    Equipment,
    EquipmentCreate,
    EquipmentListResponse,
    EquipmentPage,
    EquipmentTransaction,
    EquipmentTransactionCreate,
    EquipmentTransactionListResponse,
    EquipmentUpdate,
    EquipmentWithTransactions,
    LowStockItem,
)
from app.services.equipment import (
    InventoryService,
    LowStockQuery,
    StockTransactionEngine,
    TransactionLedger,
)

router = APIRouter()

can_create = deps.PermissionChecker("equipment.create")
can_read = deps.PermissionChecker("equipment.read")
can_update = deps.PermissionChecker("equipment.update")
can_delete = deps.PermissionChecker("equipment.delete")


@router.post("", response_model=Equipment, status_code=status.HTTP_201_CREATED)
def create_equipment(
    equipment_in: EquipmentCreate,
    db: Session = Depends(deps.get_db),
    current_user: CurrentUser = Depends(can_create)
):
    """
    Register a new equipment type at one of the company's branches.
    """
    service = InventoryService(db, current_user)
    return service.create_equipment(equipment_in.model_dump(exclude_unset=True))


@router.get("", response_model=EquipmentListResponse)
def list_equipment(
    db: Session = Depends(deps.get_db),
    skip: int = Query(0, ge=0),
    take: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=1000),
    include_inactive: bool = Query(False, alias="includeInactive"),
    branch_id: Optional[str] = Query(None, alias="branchId"),
    category: Optional[str] = None,
    current_user: CurrentUser = Depends(can_read)
):
    """
    Retrieve equipment newest first, with recent transactions and company stock stats.
    """
    service = InventoryService(db, current_user)
    result = service.list_equipment(
        skip=skip,
        take=take,
        include_inactive=include_inactive,
        branch_id=branch_id,
        category=category,
    )
    return EquipmentListResponse(
        data=[EquipmentWithTransactions.build(item, recent) for item, recent in result["data"]],
        total=result["total"],
        stats=result["stats"],
        skip=result["skip"],
        take=result["take"],
    )


@router.get("/low-stock/dashboard", response_model=List[LowStockItem])
def get_low_stock(
    db: Session = Depends(deps.get_db),
    take: int = Query(settings.LOW_STOCK_DEFAULT_LIMIT, ge=1, le=100),
    current_user: CurrentUser = Depends(can_read)
):
    """
    Active equipment whose received quantity is at or below its threshold.
    """
    return LowStockQuery(db, current_user).items(limit=take)


@router.get("/branch/{branch_id}", response_model=List[Equipment])
def list_equipment_by_branch(
    branch_id: str = Depends(deps.check_branch_access),
    db: Session = Depends(deps.get_db),
    current_user: CurrentUser = Depends(can_read)
):
    service = InventoryService(db, current_user)
    return service.list_by_branch(branch_id)


@router.get("/category/{category}", response_model=EquipmentPage)
def list_equipment_by_category(
    category: str,
    db: Session = Depends(deps.get_db),
    skip: int = Query(0, ge=0),
    take: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=1000),
    current_user: CurrentUser = Depends(can_read)
):
    service = InventoryService(db, current_user)
    return service.list_by_category(category, skip=skip, take=take)


@router.post(
    "/transaction",
    response_model=EquipmentTransaction,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def record_transaction(
    transaction_in: EquipmentTransactionCreate,
    db: Session = Depends(deps.get_db),
    current_user: CurrentUser = Depends(can_update)
):
    """
    Record a stock movement and apply it to the equipment in one unit of work.

    IN and RETURN add stock; OUT, HANDOVER, MAINTENANCE and REPAIR withdraw it
    and fail with 400 when not enough is available.
    """
    engine = StockTransactionEngine(db, current_user)
    return engine.record_transaction(
        equipment_id=transaction_in.equipment_id,
        transaction_type=transaction_in.transaction_type,
        quantity=transaction_in.quantity,
        from_location=transaction_in.from_location,
        to_location=transaction_in.to_location,
        notes=transaction_in.notes,
        reference=transaction_in.reference,
    )


@router.get("/{equipment_id}", response_model=EquipmentWithTransactions)
def get_equipment(
    equipment_id: str,
    db: Session = Depends(deps.get_db),
    current_user: CurrentUser = Depends(can_read)
):
    """
    Get one equipment item with its full transaction history.
    """
    equipment = InventoryService(db, current_user).get_equipment(equipment_id)
    return EquipmentWithTransactions.build(equipment, equipment.transactions)


@router.put("/{equipment_id}", response_model=Equipment)
def update_equipment(
    equipment_id: str,
    equipment_in: EquipmentUpdate,
    db: Session = Depends(deps.get_db),
    current_user: CurrentUser = Depends(can_update)
):
    service = InventoryService(db, current_user)
    return service.update_equipment(equipment_id, equipment_in.model_dump(exclude_unset=True))


@router.delete("/{equipment_id}", response_model=MessageResponse)
def delete_equipment(
    equipment_id: str,
    db: Session = Depends(deps.get_db),
    current_user: CurrentUser = Depends(can_delete)
):
    service = InventoryService(db, current_user)
    return service.delete_equipment(equipment_id)


@router.get("/{equipment_id}/transactions", response_model=EquipmentTransactionListResponse)
def get_equipment_transactions(
    equipment_id: str,
    db: Session = Depends(deps.get_db),
    skip: int = Query(0, ge=0),
    take: int = Query(settings.TRANSACTION_PAGE_SIZE, ge=1, le=1000),
    current_user: CurrentUser = Depends(can_read)
):
    """
    Transaction history of one equipment item, newest first.
    """
    equipment = InventoryService(db, current_user).get_equipment(equipment_id)
    entries, total = TransactionLedger(db).history(equipment.id, skip=skip, take=take)
    return {"data": entries, "total": total, "skip": skip, "take": take}

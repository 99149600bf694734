"""
Inventory Store Service
Equipment creation, maintenance and listing scoped to the caller's company
"""
from typing import Any, Dict, List, Optional
import time

from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.security import CurrentUser
from app.models.company import Branch
from app.models.equipment import Equipment
from app.services.equipment.ledger import TransactionLedger

logger = get_logger("inventory")

CREATE_FIELDS = (
    "name", "category", "description", "manufacturer", "model", "location",
    "assigned_to", "condition", "notes", "purchase_date", "purchase_price",
    "warranty_expiry", "maintenance_date", "low_stock_threshold",
)

UPDATE_FIELDS = (
    "name", "description", "category", "location", "assigned_to", "status",
    "quantity", "available_quantity", "low_stock_threshold", "condition",
    "notes", "is_active",
)

REQUIRED_FIELDS = ("name", "category", "status", "quantity", "available_quantity", "is_active")


def build_qr_payload(serial_number: str) -> str:
    """Opaque identifier printed as QR code on the equipment label"""
    return f"EQUIP-{serial_number}-{int(time.time() * 1000)}"


def check_stock_levels(quantity: int, available_quantity: int) -> None:
    """Reject stock figures that break 0 <= available <= quantity"""
    if quantity < 0 or available_quantity < 0:
        raise ValidationError("Quantities cannot be negative")
    if available_quantity > quantity:
        raise ValidationError(
            f"Available quantity ({available_quantity}) cannot exceed quantity ({quantity})"
        )


class InventoryService:
    """
    Inventory Store
    Persisted equipment records owned by one company
    """

    def __init__(self, db: Session, current_user: CurrentUser):
        self.db = db
        self.current_user = current_user
        self.ledger = TransactionLedger(db)

    def _company_query(self):
        return self.db.query(Equipment).filter(
            Equipment.company_id == self.current_user.company_id
        )

    def get_branch(self, branch_id: str) -> Branch:
        branch = self.db.query(Branch).filter(Branch.id == branch_id).first()
        if not branch or branch.company_id != self.current_user.company_id:
            raise NotFoundError("Branch not found")
        return branch

    def get_equipment(self, equipment_id: str, for_update: bool = False) -> Equipment:
        """
        Load one equipment row of the caller's company.

        With for_update the row is locked until the surrounding transaction
        ends and any stale copy in the session is overwritten.
        """
        query = self._company_query().filter(Equipment.id == equipment_id)
        if for_update:
            query = query.with_for_update().populate_existing()

        equipment = query.first()
        if not equipment:
            raise NotFoundError("Equipment not found")
        return equipment

    def create_equipment(self, data: Dict[str, Any]) -> Equipment:
        """Register a new equipment type; the initial quantity counts as received and available"""
        serial_number = (data.get("serial_number") or "").strip()
        if not serial_number:
            raise ValidationError("Serial number is required")

        self.get_branch(data.get("branch_id"))

        existing = self.db.query(Equipment).filter(
            Equipment.serial_number == serial_number
        ).first()
        if existing:
            raise ConflictError("Equipment with this serial number already exists")

        quantity = data.get("quantity")
        quantity = 0 if quantity is None else quantity
        available = data.get("available_quantity")
        available = quantity if available is None else available
        check_stock_levels(quantity, available)

        equipment = Equipment(
            company_id=self.current_user.company_id,
            branch_id=data["branch_id"],
            serial_number=serial_number,
            quantity=quantity,
            available_quantity=available,
            qr_code=build_qr_payload(serial_number),
            **{field: data.get(field) for field in CREATE_FIELDS if data.get(field) is not None}
        )
        self.db.add(equipment)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Equipment with this serial number already exists")
        self.db.refresh(equipment)

        logger.info(f"Equipment created: {equipment.name} ({equipment.serial_number})")
        return equipment

    def update_equipment(self, equipment_id: str, data: Dict[str, Any]) -> Equipment:
        """Patch the given fields; stock figures must stay consistent"""
        equipment = self.get_equipment(equipment_id)

        unknown = set(data) - set(UPDATE_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        cleared = [f for f in REQUIRED_FIELDS if f in data and data[f] is None]
        if cleared:
            raise ValidationError(f"Fields cannot be null: {', '.join(cleared)}")

        if "quantity" in data or "available_quantity" in data:
            check_stock_levels(
                data.get("quantity", equipment.quantity),
                data.get("available_quantity", equipment.available_quantity),
            )

        for field, value in data.items():
            setattr(equipment, field, value)

        self.db.commit()
        self.db.refresh(equipment)

        logger.info(f"Equipment updated: {equipment.name}")
        return equipment

    def delete_equipment(self, equipment_id: str) -> Dict[str, str]:
        """Administrative delete; ledger entries of the item are kept"""
        equipment = self.get_equipment(equipment_id)
        name = equipment.name

        self.db.delete(equipment)
        self.db.commit()

        logger.info(f"Equipment deleted: {name}")
        return {"message": "Equipment deleted successfully"}

    def get_stats(self) -> Dict[str, int]:
        """Stock totals over every equipment row of the company, active or not"""
        total_received, available_stock, total_types = self.db.query(
            func.coalesce(func.sum(Equipment.quantity), 0),
            func.coalesce(func.sum(Equipment.available_quantity), 0),
            func.coalesce(func.sum(case((Equipment.is_active.is_(True), 1), else_=0)), 0),
        ).filter(
            Equipment.company_id == self.current_user.company_id
        ).one()

        return {
            "total_received": int(total_received),
            "available_stock": int(available_stock),
            "distributed_stock": int(total_received) - int(available_stock),
            "total_types": int(total_types),
        }

    def list_equipment(
        self,
        skip: int = 0,
        take: Optional[int] = None,
        include_inactive: bool = False,
        branch_id: Optional[str] = None,
        category: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Page of equipment, newest first, with recent ledger entries and company stats

        Returns a dict with data (list of (equipment, recent entries) pairs),
        total, stats, skip and take.
        """
        take = settings.DEFAULT_PAGE_SIZE if take is None else take

        query = self._company_query()
        if not include_inactive:
            query = query.filter(Equipment.is_active.is_(True))
        if branch_id:
            query = query.filter(Equipment.branch_id == branch_id)
        if category:
            query = query.filter(Equipment.category == category)

        total = query.count()
        rows = (
            query.order_by(Equipment.created_at.desc())
            .offset(skip)
            .limit(take)
            .all()
        )
        recent = self.ledger.recent_for(
            [equipment.id for equipment in rows],
            settings.RECENT_TRANSACTIONS_IN_LIST
        )

        return {
            "data": [(equipment, recent[equipment.id]) for equipment in rows],
            "total": total,
            "stats": self.get_stats(),
            "skip": skip,
            "take": take,
        }

    def list_by_branch(self, branch_id: str) -> List[Equipment]:
        """Active equipment stocked at one branch"""
        self.get_branch(branch_id)

        return (
            self._company_query()
            .filter(Equipment.branch_id == branch_id, Equipment.is_active.is_(True))
            .order_by(Equipment.created_at.desc())
            .all()
        )

    def list_by_category(
        self,
        category: str,
        skip: int = 0,
        take: Optional[int] = None
    ) -> Dict[str, Any]:
        take = settings.DEFAULT_PAGE_SIZE if take is None else take

        query = self._company_query().filter(Equipment.category == category)
        total = query.count()
        rows = (
            query.order_by(Equipment.created_at.desc())
            .offset(skip)
            .limit(take)
            .all()
        )
        return {"data": rows, "total": total, "skip": skip, "take": take}

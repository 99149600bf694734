"""
Stock Transaction Engine
Applies typed stock movements to equipment and records them in the ledger
"""
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import ERPException, InsufficientStockError, ValidationError
from app.core.logging import get_logger
from app.core.security import CurrentUser
from app.models.equipment import Equipment, EquipmentTransaction, TransactionType
from app.services.equipment.inventory import InventoryService
from app.services.equipment.ledger import TransactionLedger

logger = get_logger("inventory.transactions")


class StockTransactionEngine:
    """
    Records stock movements atomically.

    One call is one database transaction: the equipment row is locked, the
    ledger entry written, the stock delta applied and the handover rule
    evaluated before a single commit. Any failure rolls all of it back.

    Movement rules:
        IN        quantity += n, available += n, reactivates the item
        RETURN    available += n, reactivates the item
        OUT, HANDOVER, MAINTENANCE, REPAIR
                  available -= n, refused when available < n
        HANDOVER  additionally deactivates the item once available reaches 0
        other     ledger entry only (refused in strict mode)
    """

    def __init__(
        self,
        db: Session,
        current_user: CurrentUser,
        strict_types: Optional[bool] = None
    ):
        self.db = db
        self.current_user = current_user
        self.inventory = InventoryService(db, current_user)
        self.ledger = TransactionLedger(db)
        self.strict_types = settings.STRICT_TRANSACTION_TYPES if strict_types is None else strict_types

    def record_transaction(
        self,
        equipment_id: str,
        transaction_type: str,
        quantity: int,
        from_location: Optional[str] = None,
        to_location: Optional[str] = None,
        notes: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> EquipmentTransaction:
        kind = self._normalize_type(transaction_type)
        self._validate_quantity(quantity)

        try:
            equipment = self.inventory.get_equipment(equipment_id, for_update=True)

            entry = self.ledger.append(
                equipment_id=equipment.id,
                transaction_type=kind,
                quantity=quantity,
                created_by=self.current_user.id,
                from_location=from_location,
                to_location=to_location,
                notes=notes,
                reference=reference,
            )

            if kind == TransactionType.IN:
                self._apply(
                    equipment,
                    quantity=Equipment.quantity + quantity,
                    available_quantity=Equipment.available_quantity + quantity,
                    is_active=True,
                )
            elif kind == TransactionType.RETURN:
                self._apply(
                    equipment,
                    available_quantity=Equipment.available_quantity + quantity,
                    is_active=True,
                )
            elif kind in TransactionType.OUTBOUND:
                self._withdraw(equipment, quantity)

            if kind == TransactionType.HANDOVER and equipment.available_quantity <= 0:
                self._apply(equipment, is_active=False)
                logger.info(f"Equipment marked as inactive after full handover: {equipment.name}")

            name = equipment.name
            self.db.commit()

        except ERPException as e:
            self.db.rollback()
            logger.warning(f"{kind} transaction of {quantity} rejected for equipment {equipment_id}: {e}")
            raise
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Transaction recorded for equipment: {name} ({kind} x{quantity})")
        return entry

    def _normalize_type(self, transaction_type: str) -> str:
        kind = (transaction_type or "").strip().upper()
        if not kind:
            raise ValidationError("Transaction type is required")
        if self.strict_types and kind not in TransactionType.ALL:
            raise ValidationError(
                f"Unknown transaction type: {kind}. "
                f"Valid types: {', '.join(sorted(TransactionType.ALL))}"
            )
        return kind

    @staticmethod
    def _validate_quantity(quantity) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError("Quantity must be a positive integer")

    def _apply(self, equipment: Equipment, **values) -> None:
        """Write column values (or SQL expressions over them) and reload the row"""
        self.db.execute(
            update(Equipment)
            .where(Equipment.id == equipment.id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        self.db.refresh(equipment)

    def _withdraw(self, equipment: Equipment, quantity: int) -> None:
        """
        Take stock out with a guarded decrement.

        The availability check is part of the UPDATE itself, so it holds at
        commit time even where the backend cannot lock the row.
        """
        result = self.db.execute(
            update(Equipment)
            .where(
                Equipment.id == equipment.id,
                Equipment.available_quantity >= quantity,
            )
            .values(available_quantity=Equipment.available_quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        self.db.refresh(equipment)

        if result.rowcount == 0:
            raise InsufficientStockError(equipment.available_quantity, quantity)

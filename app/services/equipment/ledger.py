"""
Transaction Ledger
Append-only storage of equipment stock movements
"""
from typing import Dict, Iterable, List, Optional, Tuple
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.equipment import EquipmentTransaction


class TransactionLedger:
    """
    Ledger of stock movements.

    Only inserts and reads are offered. append() flushes but never commits:
    the entry belongs to the caller's unit of work and disappears with it on
    rollback.
    """

    def __init__(self, db: Session):
        self.db = db

    def append(
        self,
        equipment_id: str,
        transaction_type: str,
        quantity: int,
        created_by: str,
        from_location: Optional[str] = None,
        to_location: Optional[str] = None,
        notes: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> EquipmentTransaction:
        entry = EquipmentTransaction(
            equipment_id=equipment_id,
            transaction_type=transaction_type,
            quantity=quantity,
            from_location=from_location,
            to_location=to_location,
            notes=notes,
            reference=reference,
            created_by=created_by,
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def history(
        self,
        equipment_id: str,
        skip: int = 0,
        take: int = 20
    ) -> Tuple[List[EquipmentTransaction], int]:
        """Entries of one equipment item, newest first, with the total count"""
        query = self.db.query(EquipmentTransaction).filter(
            EquipmentTransaction.equipment_id == equipment_id
        )
        total = query.count()
        entries = (
            query.order_by(EquipmentTransaction.created_at.desc(), EquipmentTransaction.id.desc())
            .offset(skip)
            .limit(take)
            .all()
        )
        return entries, total

    def recent_for(
        self,
        equipment_ids: Iterable[str],
        per_item: int
    ) -> Dict[str, List[EquipmentTransaction]]:
        """Latest entries for each of several items, keyed by equipment id"""
        ids = list(equipment_ids)
        recent: Dict[str, List[EquipmentTransaction]] = {equipment_id: [] for equipment_id in ids}
        if not ids or per_item <= 0:
            return recent

        ranked = (
            select(
                EquipmentTransaction.id,
                func.row_number().over(
                    partition_by=EquipmentTransaction.equipment_id,
                    order_by=[EquipmentTransaction.created_at.desc(), EquipmentTransaction.id.desc()],
                ).label("position"),
            )
            .where(EquipmentTransaction.equipment_id.in_(ids))
            .subquery()
        )
        entries = (
            self.db.query(EquipmentTransaction)
            .join(ranked, EquipmentTransaction.id == ranked.c.id)
            .filter(ranked.c.position <= per_item)
            .order_by(EquipmentTransaction.created_at.desc(), EquipmentTransaction.id.desc())
            .all()
        )
        for entry in entries:
            recent[entry.equipment_id].append(entry)
        return recent

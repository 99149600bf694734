"""
Equipment Models
Inventory items and their append-only stock transaction ledger
"""
from sqlalchemy import (
    Column, String, Integer, Numeric, Boolean, Date, DateTime, Text,
    ForeignKey, CheckConstraint, Index
)
from sqlalchemy.orm import relationship, foreign

from app.core.database import Base
from app.models.company import generate_id, utcnow


class TransactionType:
    """Recognised ledger movement kinds"""
    IN = "IN"
    OUT = "OUT"
    RETURN = "RETURN"
    HANDOVER = "HANDOVER"
    MAINTENANCE = "MAINTENANCE"
    REPAIR = "REPAIR"

    INBOUND = frozenset({IN, RETURN})
    OUTBOUND = frozenset({OUT, HANDOVER, MAINTENANCE, REPAIR})
    ALL = INBOUND | OUTBOUND


class Equipment(Base):
    """
    Equipment item type held by a company branch.

    quantity is the cumulative amount ever received, available_quantity what is
    still on hand. Both are a cached summary of the ledger and are only moved by
    the stock transaction engine or an explicit administrative update.
    """
    __tablename__ = "equipment"

    id = Column(String(36), primary_key=True, default=generate_id)
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=False, index=True)
    branch_id = Column(String(36), ForeignKey("branches.id"), nullable=False, index=True)
    serial_number = Column(String(100), unique=True, nullable=False)

    # Descriptive
    name = Column(String(150), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    description = Column(Text)
    manufacturer = Column(String(100))
    model = Column(String(100))
    location = Column(String(150))
    assigned_to = Column(String(150))
    condition = Column(String(50))
    notes = Column(Text)
    purchase_date = Column(Date)
    purchase_price = Column(Numeric(15, 2))
    warranty_expiry = Column(Date)
    maintenance_date = Column(Date)

    # Stock
    quantity = Column(Integer, default=0, nullable=False)
    available_quantity = Column(Integer, default=0, nullable=False)
    low_stock_threshold = Column(Integer, nullable=True)

    # Lifecycle
    is_active = Column(Boolean, default=True, nullable=False)
    status = Column(String(30), default="available", nullable=False)

    qr_code = Column(String(255))

    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    branch = relationship("Branch")
    transactions = relationship(
        "EquipmentTransaction",
        primaryjoin=lambda: Equipment.id == foreign(EquipmentTransaction.equipment_id),
        order_by=lambda: [EquipmentTransaction.created_at.desc(), EquipmentTransaction.id.desc()],
        viewonly=True,
    )

    __table_args__ = (
        CheckConstraint("available_quantity >= 0", name="available_not_negative"),
        CheckConstraint("quantity >= 0", name="quantity_not_negative"),
    )


class EquipmentTransaction(Base):
    """
    Ledger entry for one stock movement.

    Rows are written once and never updated or deleted. equipment_id is a plain
    reference so the audit trail survives deletion of the equipment row.
    """
    __tablename__ = "equipment_transactions"

    id = Column(String(36), primary_key=True, default=generate_id)
    equipment_id = Column(String(36), nullable=False)
    transaction_type = Column(String(30), nullable=False)
    quantity = Column(Integer, nullable=False)
    from_location = Column(String(150))
    to_location = Column(String(150))
    notes = Column(Text)
    reference = Column(String(100))
    created_by = Column(String(36), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="quantity_positive"),
        Index("ix_equipment_transactions_equipment_created", "equipment_id", "created_at"),
    )

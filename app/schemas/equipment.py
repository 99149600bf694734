"""Equipment inventory and transaction ledger schemas"""

from pydantic import Field, field_validator
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal

from app.schemas.common import CamelModel


# Equipment Schemas
class EquipmentBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=150)
    category: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    manufacturer: Optional[str] = Field(None, max_length=100)
    model: Optional[str] = Field(None, max_length=100)
    location: Optional[str] = Field(None, max_length=150)
    assigned_to: Optional[str] = Field(None, max_length=150)
    condition: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_price: Optional[Decimal] = Field(None, ge=0)
    warranty_expiry: Optional[date] = None
    maintenance_date: Optional[date] = None
    low_stock_threshold: Optional[int] = Field(None, ge=0)


class EquipmentCreate(EquipmentBase):
    serial_number: str = Field(..., min_length=1, max_length=100)
    branch_id: str
    quantity: Optional[int] = Field(None, ge=0)
    available_quantity: Optional[int] = Field(None, ge=0)

    @field_validator("serial_number")
    @classmethod
    def strip_serial(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Serial number cannot be blank")
        return v


class EquipmentUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    location: Optional[str] = None
    assigned_to: Optional[str] = None
    status: Optional[str] = Field(None, max_length=30)
    quantity: Optional[int] = Field(None, ge=0)
    available_quantity: Optional[int] = Field(None, ge=0)
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    condition: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None


class Equipment(EquipmentBase):
    id: str
    company_id: str
    branch_id: str
    serial_number: str
    quantity: int
    available_quantity: int
    is_active: bool
    status: str
    qr_code: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


# Transaction Schemas
class EquipmentTransactionCreate(CamelModel):
    equipment_id: str = Field(..., min_length=1)
    transaction_type: str = Field(..., min_length=1, max_length=30)
    quantity: int = Field(..., gt=0, description="Units moved, always positive")
    from_location: Optional[str] = Field(None, max_length=150)
    to_location: Optional[str] = Field(None, max_length=150)
    notes: Optional[str] = None
    reference: Optional[str] = Field(None, max_length=100)


class EquipmentTransaction(CamelModel):
    id: str
    equipment_id: str
    transaction_type: str
    quantity: int
    from_location: Optional[str] = None
    to_location: Optional[str] = None
    notes: Optional[str] = None
    reference: Optional[str] = None
    created_by: str
    created_at: datetime


class EquipmentTransactionListResponse(CamelModel):
    data: List[EquipmentTransaction]
    total: int
    skip: int
    take: int


class EquipmentWithTransactions(Equipment):
    """Equipment together with (part of) its ledger, newest first"""
    transactions: List[EquipmentTransaction] = []

    @classmethod
    def build(cls, equipment, transactions) -> "EquipmentWithTransactions":
        item = Equipment.model_validate(equipment)
        return cls(
            **item.model_dump(),
            transactions=[EquipmentTransaction.model_validate(t) for t in transactions],
        )


# Listing Schemas
class InventoryStats(CamelModel):
    total_received: int = Field(..., description="Sum of cumulative quantities")
    available_stock: int = Field(..., description="Sum of available quantities")
    distributed_stock: int = Field(..., description="total_received - available_stock")
    total_types: int = Field(..., description="Number of active equipment types")


class EquipmentListResponse(CamelModel):
    data: List[EquipmentWithTransactions]
    total: int
    stats: InventoryStats
    skip: int
    take: int


class EquipmentPage(CamelModel):
    data: List[Equipment]
    total: int
    skip: int
    take: int


class LowStockItem(CamelModel):
    id: str
    name: str
    category: str
    quantity: int
    low_stock_threshold: Optional[int] = None
    serial_number: str

"""
ERP Pydantic Schemas
Request/Response models for the equipment inventory API
"""

from .common import CamelModel, MessageResponse, ErrorResponse, HealthResponse
from .equipment import (
    EquipmentBase, EquipmentCreate, EquipmentUpdate, Equipment,
    EquipmentTransactionCreate, EquipmentTransaction, EquipmentTransactionListResponse,
    EquipmentWithTransactions, InventoryStats, EquipmentListResponse,
    EquipmentPage, LowStockItem
)

__all__ = [
    "CamelModel",
    "MessageResponse",
    "ErrorResponse",
    "HealthResponse",
    "EquipmentBase",
    "EquipmentCreate",
    "EquipmentUpdate",
    "Equipment",
    "EquipmentTransactionCreate",
    "EquipmentTransaction",
    "EquipmentTransactionListResponse",
    "EquipmentWithTransactions",
    "InventoryStats",
    "EquipmentListResponse",
    "EquipmentPage",
    "LowStockItem",
]

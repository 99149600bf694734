"""
ERP SQLAlchemy Models
"""

# Import all models to ensure they are registered with SQLAlchemy
from .company import Company, Branch, Role
from .equipment import Equipment, EquipmentTransaction, TransactionType

__all__ = [
    "Company",
    "Branch",
    "Role",
    "Equipment",
    "EquipmentTransaction",
    "TransactionType",
]

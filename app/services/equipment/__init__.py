"""Equipment inventory services - store, ledger, transaction engine and low-stock query"""

from .inventory import InventoryService
from .ledger import TransactionLedger
from .transactions import StockTransactionEngine
from .low_stock import LowStockQuery

__all__ = [
    "InventoryService",
    "TransactionLedger",
    "StockTransactionEngine",
    "LowStockQuery",
]

"""
Low-Stock Query
Read-only view of active equipment at or under its configured threshold
"""
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import CurrentUser
from app.models.equipment import Equipment


class LowStockQuery:
    """
    Active items whose cumulative quantity is at or below the threshold.

    The comparison uses quantity (everything ever received), not
    available_quantity. An item without a threshold counts as 0, so it only
    shows up once nothing was ever received.
    """

    def __init__(self, db: Session, current_user: CurrentUser):
        self.db = db
        self.current_user = current_user

    def items(self, limit: Optional[int] = None) -> List[Equipment]:
        limit = settings.LOW_STOCK_DEFAULT_LIMIT if limit is None else limit
        if limit <= 0:
            return []

        return (
            self.db.query(Equipment)
            .filter(
                Equipment.company_id == self.current_user.company_id,
                Equipment.is_active.is_(True),
                Equipment.quantity <= func.coalesce(Equipment.low_stock_threshold, 0),
            )
            .order_by(Equipment.quantity.asc(), Equipment.name.asc())
            .limit(limit)
            .all()
        )

"""
Tests for the Low-Stock Query
"""

from sqlalchemy.orm import Session

from app.services.equipment import LowStockQuery, StockTransactionEngine


def low_stock_ids(db_session: Session, user, limit=None):
    return [item.id for item in LowStockQuery(db_session, user).items(limit=limit)]


def test_item_under_threshold_is_listed(db_session: Session, make_equipment, current_user):
    low = make_equipment(quantity=3, low_stock_threshold=5)
    make_equipment(quantity=6, low_stock_threshold=5)

    assert low_stock_ids(db_session, current_user) == [low.id]


def test_threshold_is_inclusive(db_session: Session, make_equipment, current_user):
    at_threshold = make_equipment(quantity=5, low_stock_threshold=5)

    assert low_stock_ids(db_session, current_user) == [at_threshold.id]


def test_inactive_items_never_listed(db_session: Session, inventory, make_equipment, current_user):
    equipment = make_equipment(quantity=0, low_stock_threshold=5)
    inventory.update_equipment(equipment.id, {"is_active": False})

    assert low_stock_ids(db_session, current_user) == []


def test_compares_received_not_available_quantity(db_session: Session, make_equipment, current_user):
    """Distributing stock does not make an item low on stock"""
    equipment = make_equipment(quantity=10, low_stock_threshold=5)
    StockTransactionEngine(db_session, current_user).record_transaction(equipment.id, "OUT", 9)

    assert equipment.available_quantity == 1
    assert low_stock_ids(db_session, current_user) == []


def test_missing_threshold_counts_as_zero(db_session: Session, make_equipment, current_user):
    empty = make_equipment(quantity=0)
    make_equipment(quantity=1)

    assert low_stock_ids(db_session, current_user) == [empty.id]


def test_ordered_by_quantity_and_limited(db_session: Session, make_equipment, current_user):
    items = [make_equipment(quantity=q, low_stock_threshold=10) for q in (7, 2, 9, 0, 4, 1, 3)]
    by_quantity = sorted(items, key=lambda e: e.quantity)

    assert low_stock_ids(db_session, current_user) == [e.id for e in by_quantity[:5]]
    assert low_stock_ids(db_session, current_user, limit=2) == [e.id for e in by_quantity[:2]]


def test_limit_applies_after_filtering(db_session: Session, make_equipment, current_user):
    """Plenty of healthy items must not push low items out of the result"""
    for _ in range(6):
        make_equipment(quantity=50, low_stock_threshold=5)
    low = make_equipment(quantity=1, low_stock_threshold=5)

    assert low_stock_ids(db_session, current_user) == [low.id]


def test_company_scoped(db_session: Session, make_equipment, other_user):
    make_equipment(quantity=0, low_stock_threshold=5)

    assert low_stock_ids(db_session, other_user) == []

"""
Tests for the Inventory Store Service
Equipment records, company scoping and stock statistics
"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import update
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.equipment import EquipmentTransaction
from app.services.equipment import InventoryService, StockTransactionEngine


class TestCreateEquipment:
    """Test suite for equipment creation"""

    def test_create_equipment_success(self, inventory: InventoryService, sample_equipment_data, company):
        """Initial quantity is both received and available"""
        equipment = inventory.create_equipment(sample_equipment_data)

        assert equipment.id is not None
        assert equipment.company_id == company.id
        assert equipment.serial_number == "HELM-001"
        assert equipment.quantity == 10
        assert equipment.available_quantity == 10
        assert equipment.is_active is True
        assert equipment.status == "available"
        assert equipment.qr_code.startswith("EQUIP-HELM-001-")

    def test_create_without_quantity_starts_empty(self, inventory: InventoryService, sample_equipment_data):
        sample_equipment_data.pop("quantity")

        equipment = inventory.create_equipment(sample_equipment_data)

        assert equipment.quantity == 0
        assert equipment.available_quantity == 0

    def test_create_duplicate_serial_number(self, inventory: InventoryService, sample_equipment_data):
        """Test creating equipment with duplicate serial number fails"""
        inventory.create_equipment(sample_equipment_data)

        duplicate = dict(sample_equipment_data, name="Another Helmet")
        with pytest.raises(ConflictError, match="serial number already exists"):
            inventory.create_equipment(duplicate)

    def test_create_in_foreign_branch(self, inventory: InventoryService, sample_equipment_data, other_branch):
        sample_equipment_data["branch_id"] = other_branch.id

        with pytest.raises(NotFoundError, match="Branch not found"):
            inventory.create_equipment(sample_equipment_data)

    def test_create_available_above_quantity(self, inventory: InventoryService, sample_equipment_data):
        sample_equipment_data["available_quantity"] = 11

        with pytest.raises(ValidationError):
            inventory.create_equipment(sample_equipment_data)

    def test_create_blank_serial_number(self, inventory: InventoryService, sample_equipment_data):
        sample_equipment_data["serial_number"] = "   "

        with pytest.raises(ValidationError, match="Serial number is required"):
            inventory.create_equipment(sample_equipment_data)


class TestReadUpdateDelete:
    """Test suite for single equipment operations"""

    def test_get_equipment(self, inventory: InventoryService, make_equipment):
        created = make_equipment(quantity=3)

        retrieved = inventory.get_equipment(created.id)

        assert retrieved.id == created.id
        assert retrieved.quantity == 3

    def test_get_equipment_of_other_company(self, db_session: Session, make_equipment, other_user):
        created = make_equipment(quantity=3)

        with pytest.raises(NotFoundError, match="Equipment not found"):
            InventoryService(db_session, other_user).get_equipment(created.id)

    def test_update_equipment(self, inventory: InventoryService, make_equipment):
        """Test updating descriptive fields and stock figures"""
        equipment = make_equipment(quantity=10)

        updated = inventory.update_equipment(equipment.id, {
            "name": "Renamed",
            "location": "Store B",
            "available_quantity": 4,
            "low_stock_threshold": 2,
        })

        assert updated.name == "Renamed"
        assert updated.location == "Store B"
        assert updated.quantity == 10
        assert updated.available_quantity == 4
        assert updated.low_stock_threshold == 2

    def test_update_rejects_available_above_quantity(self, inventory: InventoryService, make_equipment):
        equipment = make_equipment(quantity=5)

        with pytest.raises(ValidationError, match="cannot exceed quantity"):
            inventory.update_equipment(equipment.id, {"quantity": 3})

        assert inventory.get_equipment(equipment.id).quantity == 5

    def test_update_rejects_negative_quantity(self, inventory: InventoryService, make_equipment):
        equipment = make_equipment(quantity=5)

        with pytest.raises(ValidationError):
            inventory.update_equipment(equipment.id, {"available_quantity": -1})

    def test_update_rejects_unknown_field(self, inventory: InventoryService, make_equipment):
        equipment = make_equipment(quantity=5)

        with pytest.raises(ValidationError, match="serial_number"):
            inventory.update_equipment(equipment.id, {"serial_number": "NEW"})

    def test_update_rejects_null_name(self, inventory: InventoryService, make_equipment):
        equipment = make_equipment(quantity=5)

        with pytest.raises(ValidationError, match="name"):
            inventory.update_equipment(equipment.id, {"name": None})

    def test_update_after_return_above_received(self, db_session: Session, inventory: InventoryService, make_equipment, current_user):
        """Descriptive edits still work once returns exceed the received quantity"""
        equipment = make_equipment(quantity=10)
        engine = StockTransactionEngine(db_session, current_user)
        engine.record_transaction(equipment.id, "OUT", 10)
        engine.record_transaction(equipment.id, "RETURN", 10)
        engine.record_transaction(equipment.id, "RETURN", 2)
        assert equipment.available_quantity == 12

        updated = inventory.update_equipment(equipment.id, {"notes": "relabelled", "name": "Relabelled"})

        assert updated.notes == "relabelled"
        assert updated.name == "Relabelled"
        assert updated.quantity == 10
        assert updated.available_quantity == 12

    def test_update_touching_stock_still_checked_after_return(self, db_session: Session, inventory: InventoryService, make_equipment, current_user):
        equipment = make_equipment(quantity=10, available_quantity=9)
        StockTransactionEngine(db_session, current_user).record_transaction(equipment.id, "RETURN", 3)

        with pytest.raises(ValidationError, match="cannot exceed quantity"):
            inventory.update_equipment(equipment.id, {"quantity": 11})

    def test_delete_keeps_ledger(self, db_session: Session, inventory: InventoryService, make_equipment, current_user):
        """Ledger entries survive an administrative delete"""
        equipment = make_equipment(quantity=5)
        equipment_id = equipment.id
        StockTransactionEngine(db_session, current_user).record_transaction(equipment_id, "OUT", 2)

        result = inventory.delete_equipment(equipment_id)

        assert result == {"message": "Equipment deleted successfully"}
        with pytest.raises(NotFoundError):
            inventory.get_equipment(equipment_id)
        remaining = db_session.query(EquipmentTransaction).filter(
            EquipmentTransaction.equipment_id == equipment_id
        ).count()
        assert remaining == 1


class TestListing:
    """Test suite for listing and statistics"""

    def test_list_excludes_inactive_by_default(self, inventory: InventoryService, make_equipment):
        active = make_equipment(quantity=5)
        inactive = make_equipment(quantity=5)
        inventory.update_equipment(inactive.id, {"is_active": False})

        result = inventory.list_equipment()
        ids = [item.id for item, _ in result["data"]]

        assert ids == [active.id]
        assert result["total"] == 1

        result = inventory.list_equipment(include_inactive=True)
        assert result["total"] == 2

    def test_list_newest_first_with_pagination(self, inventory: InventoryService, make_equipment):
        first = make_equipment(quantity=1)
        second = make_equipment(quantity=1)
        third = make_equipment(quantity=1)

        result = inventory.list_equipment(skip=0, take=2)

        assert [item.id for item, _ in result["data"]] == [third.id, second.id]
        assert result["total"] == 3
        assert result["take"] == 2

        result = inventory.list_equipment(skip=2, take=2)
        assert [item.id for item, _ in result["data"]] == [first.id]

    def test_list_filters_by_branch_and_category(self, inventory: InventoryService, make_equipment, second_branch):
        make_equipment(quantity=1, category="Tools")
        in_warehouse = make_equipment(quantity=1, category="Vehicles", branch_id=second_branch.id)

        by_branch = inventory.list_equipment(branch_id=second_branch.id)
        by_category = inventory.list_equipment(category="Vehicles")

        assert [item.id for item, _ in by_branch["data"]] == [in_warehouse.id]
        assert [item.id for item, _ in by_category["data"]] == [in_warehouse.id]

    def test_list_carries_recent_transactions(self, db_session: Session, inventory: InventoryService, make_equipment, current_user):
        """Each item carries at most five newest ledger entries"""
        equipment = make_equipment(quantity=0)
        engine = StockTransactionEngine(db_session, current_user)
        start = datetime(2024, 1, 1, 8, 0)
        for quantity in range(1, 8):
            entry = engine.record_transaction(equipment.id, "IN", quantity)
            db_session.execute(
                update(EquipmentTransaction)
                .where(EquipmentTransaction.id == entry.id)
                .values(created_at=start + timedelta(minutes=quantity))
            )
            db_session.commit()

        result = inventory.list_equipment()
        _, recent = result["data"][0]

        assert len(recent) == 5
        assert [entry.quantity for entry in recent] == [7, 6, 5, 4, 3]

    def test_stats_cover_all_company_equipment(self, db_session: Session, inventory: InventoryService, make_equipment, current_user):
        """Stats ignore the page and the active filter"""
        first = make_equipment(quantity=10)
        make_equipment(quantity=4, available_quantity=1)
        hidden = make_equipment(quantity=6)
        inventory.update_equipment(hidden.id, {"is_active": False})
        StockTransactionEngine(db_session, current_user).record_transaction(first.id, "OUT", 3)

        stats = inventory.list_equipment(take=1)["stats"]

        assert stats["total_received"] == 20
        assert stats["available_stock"] == 7 + 1 + 6
        assert stats["distributed_stock"] == 20 - 14
        assert stats["total_types"] == 2

    def test_stats_for_empty_company(self, inventory: InventoryService):
        stats = inventory.get_stats()

        assert stats == {
            "total_received": 0,
            "available_stock": 0,
            "distributed_stock": 0,
            "total_types": 0,
        }

    def test_list_is_company_scoped(self, db_session: Session, make_equipment, other_user):
        make_equipment(quantity=1)

        result = InventoryService(db_session, other_user).list_equipment()

        assert result["total"] == 0
        assert result["stats"]["total_received"] == 0

    def test_list_by_branch_active_only(self, inventory: InventoryService, make_equipment, branch):
        active = make_equipment(quantity=1)
        inactive = make_equipment(quantity=1)
        inventory.update_equipment(inactive.id, {"is_active": False})

        items = inventory.list_by_branch(branch.id)

        assert [item.id for item in items] == [active.id]

    def test_list_by_foreign_branch(self, inventory: InventoryService, other_branch):
        with pytest.raises(NotFoundError, match="Branch not found"):
            inventory.list_by_branch(other_branch.id)

    def test_list_by_category_includes_inactive(self, inventory: InventoryService, make_equipment):
        make_equipment(quantity=1, category="Radios")
        inactive = make_equipment(quantity=1, category="Radios")
        make_equipment(quantity=1, category="Tools")
        inventory.update_equipment(inactive.id, {"is_active": False})

        result = inventory.list_by_category("Radios", skip=0, take=10)

        assert result["total"] == 2
        assert all(item.category == "Radios" for item in result["data"])

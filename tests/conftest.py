"""
Test Configuration and Fixtures
Shared testing infrastructure for the equipment inventory service
"""

import os

# The application engine is created at import time; keep it in memory
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from typing import Generator, Dict, Any
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.database import Base, create_db_engine, get_db
from app.core.security import CurrentUser, create_user_token
from app.models.company import Company, Branch, Role
from app.services.equipment import InventoryService

ALL_PERMISSIONS = [
    "equipment.create",
    "equipment.read",
    "equipment.update",
    "equipment.delete",
]

# Test database - in-memory SQLite shared by every session of a test
engine = create_db_engine("sqlite://", poolclass=StaticPool)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test"""
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database dependency override"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def company(db_session: Session) -> Company:
    company = Company(name="Test Company")
    db_session.add(company)
    db_session.commit()
    return company


@pytest.fixture
def other_company(db_session: Session) -> Company:
    company = Company(name="Other Company")
    db_session.add(company)
    db_session.commit()
    return company


@pytest.fixture
def branch(db_session: Session, company: Company) -> Branch:
    branch = Branch(company_id=company.id, name="Head Office", code="HQ")
    db_session.add(branch)
    db_session.commit()
    return branch


@pytest.fixture
def second_branch(db_session: Session, company: Company) -> Branch:
    branch = Branch(company_id=company.id, name="Warehouse", code="WH")
    db_session.add(branch)
    db_session.commit()
    return branch


@pytest.fixture
def other_branch(db_session: Session, other_company: Company) -> Branch:
    branch = Branch(company_id=other_company.id, name="Other Office", code="HQ")
    db_session.add(branch)
    db_session.commit()
    return branch


@pytest.fixture
def manager_role(db_session: Session, company: Company) -> Role:
    """Role with every equipment permission, limited to assigned branches"""
    role = Role(
        company_id=company.id,
        name="manager",
        description="Equipment manager",
        permissions=list(ALL_PERMISSIONS),
    )
    db_session.add(role)
    db_session.commit()
    return role


@pytest.fixture
def viewer_role(db_session: Session, company: Company) -> Role:
    role = Role(
        company_id=company.id,
        name="viewer",
        description="Read only",
        permissions=["equipment.read"],
    )
    db_session.add(role)
    db_session.commit()
    return role


@pytest.fixture
def current_user(company: Company, branch: Branch, manager_role: Role) -> CurrentUser:
    return CurrentUser(
        id="user-1",
        company_id=company.id,
        role_id=manager_role.id,
        branch_ids=[branch.id],
        email="manager@erp.test",
        username="manager",
    )


@pytest.fixture
def other_user(other_company: Company, other_branch: Branch) -> CurrentUser:
    return CurrentUser(
        id="user-2",
        company_id=other_company.id,
        role_id="no-role",
        branch_ids=[other_branch.id],
    )


@pytest.fixture
def auth_headers(current_user: CurrentUser) -> Dict[str, str]:
    """Get authentication headers for the manager"""
    token = create_user_token(current_user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def viewer_headers(current_user: CurrentUser, viewer_role: Role) -> Dict[str, str]:
    viewer = current_user.model_copy(update={"id": "user-3", "role_id": viewer_role.id})
    token = create_user_token(viewer)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sample_equipment_data(branch: Branch) -> Dict[str, Any]:
    """Sample equipment data for testing"""
    return {
        "name": "Safety Helmet",
        "category": "PPE",
        "serial_number": "HELM-001",
        "branch_id": branch.id,
        "manufacturer": "SafeCo",
        "location": "Store A",
        "quantity": 10,
        "low_stock_threshold": 5,
    }


@pytest.fixture
def inventory(db_session: Session, current_user: CurrentUser) -> InventoryService:
    return InventoryService(db_session, current_user)


@pytest.fixture
def make_equipment(inventory: InventoryService, branch: Branch):
    """Factory creating equipment with the given stock figures"""
    counter = {"n": 0}

    def _make(quantity: int = 0, available_quantity: int = None, **fields):
        counter["n"] += 1
        data = {
            "name": f"Item {counter['n']}",
            "category": "Tools",
            "serial_number": f"SN-{counter['n']:04d}",
            "branch_id": branch.id,
            "quantity": quantity,
            "available_quantity": available_quantity,
        }
        data.update(fields)
        return inventory.create_equipment(data)

    return _make

"""
Tenant Models
Companies, branches and roles used to scope equipment and authorize callers
"""
from sqlalchemy import Column, String, Boolean, DateTime, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import uuid

from app.core.database import Base


def generate_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Company(Base):
    """Tenant owning branches, roles and equipment"""
    __tablename__ = "companies"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(150), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    branches = relationship("Branch", back_populates="company")


class Branch(Base):
    """Company branch; equipment is stocked at exactly one branch"""
    __tablename__ = "branches"
    __table_args__ = (
        UniqueConstraint("company_id", "code", name="uq_branches_company_code"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    code = Column(String(30), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    company = relationship("Company", back_populates="branches")


class Role(Base):
    """User role carrying a flat list of capability strings (e.g. equipment.read)"""
    __tablename__ = "roles"

    id = Column(String(36), primary_key=True, default=generate_id)
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=True, index=True)
    name = Column(String(50), nullable=False)
    description = Column(String(200))
    permissions = Column(JSON, default=list, nullable=False)
    # Branch guard is skipped for roles that see every branch of the company
    all_branches = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def has_permission(self, permission: str) -> bool:
        return permission in (self.permissions or [])

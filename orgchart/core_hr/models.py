"""Core HR ORM models: Department, Employee, Address.

SQLAlchemy 2.0 async-compatible models with Mapped[] annotations.
Column names match the PostgreSQL schema defined in 001_initial_schema.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from orgchart.common.constants import AddressType, Role
from orgchart.database import Base


# ═════════════════════════════════════════════════════════════════════
# Department
# ═════════════════════════════════════════════════════════════════════


class Department(Base):
    """Organisational unit; read-only from the hierarchy's point of view."""

    __tablename__ = "departments"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(sa.String(150), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(sa.Text)

    # ── Relationships ───────────────────────────────────────────────
    employees: Mapped[list[Employee]] = relationship(
        back_populates="department", foreign_keys="Employee.department_id",
    )

    def __repr__(self) -> str:
        return f"<Department {self.name!r}>"


# ═════════════════════════════════════════════════════════════════════
# Employee
# ═════════════════════════════════════════════════════════════════════


class Employee(Base):
    """Identity and org-placement record - central entity of the directory."""

    __tablename__ = "employees"

    # ── Primary key ─────────────────────────────────────────────────
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # ── Name ────────────────────────────────────────────────────────
    first_name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(sa.String(100), nullable=False)

    # ── Credentials ─────────────────────────────────────────────────
    official_email: Mapped[str] = mapped_column(
        sa.String(255), unique=True, nullable=False,
    )
    contact_number: Mapped[str] = mapped_column(
        sa.String(20), unique=True, nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    role: Mapped[Optional[Role]] = mapped_column(
        sa.Enum(Role, name="employee_role", create_type=False),
    )

    # ── Org placement ───────────────────────────────────────────────
    designation: Mapped[Optional[str]] = mapped_column(sa.String(150))
    department_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True), sa.ForeignKey("departments.id"),
    )
    # No relationship; the manager is looked up by id on demand.
    reporting_manager_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True), sa.ForeignKey("employees.id", name="fk_employee_reporting_manager"),
    )

    # ── Timestamps ──────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), server_default=sa.func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        onupdate=sa.func.now(),
    )

    # ── Relationships ───────────────────────────────────────────────
    department: Mapped[Optional[Department]] = relationship(
        back_populates="employees",
        foreign_keys=[department_id],
        lazy="selectin",
    )
    addresses: Mapped[list[Address]] = relationship(
        back_populates="employee",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    # ── Helpers ─────────────────────────────────────────────────────

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<Employee {self.official_email} ({self.role})>"


# ═════════════════════════════════════════════════════════════════════
# Address
# ═════════════════════════════════════════════════════════════════════


class Address(Base):
    """Labeled contact location owned by one employee."""

    __tablename__ = "addresses"
    __table_args__ = (
        sa.UniqueConstraint("employee_id", "address_type", name="uq_address_employee_type"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    employee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
    )
    address_type: Mapped[AddressType] = mapped_column(
        sa.Enum(AddressType, name="address_type", create_type=False),
        nullable=False,
    )
    line1: Mapped[Optional[str]] = mapped_column(sa.String(255))
    line2: Mapped[Optional[str]] = mapped_column(sa.String(255))
    city: Mapped[Optional[str]] = mapped_column(sa.String(100))
    state: Mapped[Optional[str]] = mapped_column(sa.String(100))
    pincode: Mapped[Optional[str]] = mapped_column(sa.String(20))
    country: Mapped[Optional[str]] = mapped_column(sa.String(100))

    employee: Mapped[Employee] = relationship(back_populates="addresses")

    def __repr__(self) -> str:
        return f"<Address {self.address_type.value} of {self.employee_id}>"

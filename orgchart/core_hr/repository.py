"""Credential store - async lookups and writes for employees and departments.

Every employee query loads ``department`` and ``addresses`` eagerly (the
relationships are ``lazy="selectin"``) so results are safe to serialise
outside the session's greenlet.
"""

from __future__ import annotations

import uuid
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import MultipleResultsFound, NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from orgchart.common.constants import Role
from orgchart.core_hr.models import Department, Employee


class EmployeeRepository:
    """Per-field lookups, save and delete for ``Employee`` rows."""

    model = Employee

    async def find_by_id(
        self,
        db: AsyncSession,
        employee_id: uuid.UUID,
        *,
        populate_existing: bool = False,
    ) -> Optional[Employee]:
        query = select(Employee).where(Employee.id == employee_id)
        if populate_existing:
            query = query.execution_options(populate_existing=True)
        result = await db.execute(query)
        return result.scalars().first()

    async def find_by_email(self, db: AsyncSession, official_email: str) -> Optional[Employee]:
        result = await db.execute(
            select(Employee).where(Employee.official_email == official_email),
        )
        return result.scalars().first()

    async def find_by_contact_number(
        self, db: AsyncSession, contact_number: str,
    ) -> Optional[Employee]:
        result = await db.execute(
            select(Employee).where(Employee.contact_number == contact_number),
        )
        return result.scalars().first()

    async def find_by_role(self, db: AsyncSession, role: Role) -> Optional[Employee]:
        """Return the single employee holding *role*.

        Raises ``MultipleResultsFound`` when more than one employee holds it.
        """
        result = await db.execute(select(Employee).where(Employee.role == role))
        employees = result.scalars().all()
        if len(employees) > 1:
            raise MultipleResultsFound(
                f"{len(employees)} employees hold role {role.value}",
            )
        return employees[0] if employees else None

    async def find_by_manager(
        self, db: AsyncSession, manager_id: uuid.UUID,
    ) -> Sequence[Employee]:
        result = await db.execute(
            select(Employee)
            .where(Employee.reporting_manager_id == manager_id)
            .order_by(Employee.first_name, Employee.last_name)
        )
        return result.scalars().all()

    async def find_by_department_and_role(
        self, db: AsyncSession, department_id: uuid.UUID, role: Role,
    ) -> Sequence[Employee]:
        result = await db.execute(
            select(Employee).where(
                Employee.department_id == department_id,
                Employee.role == role,
            )
        )
        return result.scalars().all()

    async def find_all(self, db: AsyncSession) -> Sequence[Employee]:
        result = await db.execute(
            select(Employee).order_by(Employee.first_name, Employee.last_name),
        )
        return result.scalars().all()

    async def save(self, db: AsyncSession, employee: Employee) -> Employee:
        """Insert or update *employee* and return it fully reloaded.

        Raises ``IntegrityError`` on a unique / foreign-key violation.
        """
        db.add(employee)
        await db.flush()
        # Reload server-side defaults and eager relationships.
        return await self.find_by_id(db, employee.id, populate_existing=True)

    async def delete_by_id(self, db: AsyncSession, employee_id: uuid.UUID) -> None:
        """Hard-delete an employee and their addresses.

        Raises ``NoResultFound`` if the id does not exist and
        ``IntegrityError`` if other rows still reference the employee.
        """
        employee = await db.get(Employee, employee_id)
        if employee is None:
            raise NoResultFound(f"No employee row for id {employee_id}")
        await db.delete(employee)
        await db.flush()


class DepartmentRepository:
    """Lookups and inserts for ``Department`` rows."""

    model = Department

    async def find_by_id(
        self, db: AsyncSession, department_id: uuid.UUID,
    ) -> Optional[Department]:
        return await db.get(Department, department_id)

    async def find_by_name(self, db: AsyncSession, name: str) -> Optional[Department]:
        result = await db.execute(select(Department).where(Department.name == name))
        return result.scalars().first()

    async def find_all(self, db: AsyncSession) -> Sequence[Department]:
        """All departments with their member employees loaded."""
        result = await db.execute(
            select(Department)
            .options(selectinload(Department.employees))
            .order_by(Department.name)
            .execution_options(populate_existing=True)
        )
        return result.scalars().all()

    async def save(self, db: AsyncSession, department: Department) -> Department:
        db.add(department)
        await db.flush()
        return department


employee_repository = EmployeeRepository()
department_repository = DepartmentRepository()

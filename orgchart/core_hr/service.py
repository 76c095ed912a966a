"""Core HR service layer - employee lifecycle orchestration.

Uses:
  - ``employee_repository / department_repository`` from orgchart.core_hr.repository
  - uniqueness checks from orgchart.core_hr.guards (always before any write)
  - ``resolve_reports_or_self / build_org_summary`` from orgchart.core_hr.hierarchy
  - ``AuthService`` for login, ``hash_password`` for credentials

Every operation returns an ``AppResponse`` envelope or raises one of
``NotFoundError``, ``DuplicateResourceError``, ``DuplicateAddressError``,
``InvalidCredentialsError``.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Optional, Sequence, Union

from sqlalchemy.exc import IntegrityError, NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession

from orgchart.auth.dependencies import AuthContext
from orgchart.auth.schemas import LoginResponse
from orgchart.auth.security import hash_password
from orgchart.auth.service import AuthService
from orgchart.common.constants import MANAGER_ROLE
from orgchart.common.exceptions import DuplicateResourceError, NotFoundError
from orgchart.common.responses import AppResponse
from orgchart.core_hr.guards import (
    check_address_unique,
    check_credentials_unique,
    check_role_available,
)
from orgchart.core_hr.hierarchy import build_org_summary, resolve_reports_or_self
from orgchart.core_hr.models import Address, Department, Employee
from orgchart.core_hr.repository import department_repository, employee_repository
from orgchart.core_hr.schemas import (
    AddressSchema,
    DepartmentCreate,
    DepartmentResponse,
    EmployeeCreate,
    EmployeeDetail,
    EmployeeListItem,
    EmployeeUpdate,
    OrganisationSummary,
    ReportingChainResponse,
)

logger = logging.getLogger(__name__)


# ── Helpers ─────────────────────────────────────────────────────────

def _build_addresses(items: Sequence[AddressSchema]) -> list[Address]:
    """Turn payload addresses into rows, rejecting repeated types."""
    accepted: list[Address] = []
    for item in items:
        check_address_unique(accepted, item.address_type)
        accepted.append(Address(**item.model_dump()))
    return accepted


def _merge_addresses(employee: Employee, items: Sequence[AddressSchema]) -> None:
    """Replace stored addresses type-by-type with the incoming ones."""
    seen: list[AddressSchema] = []
    for item in items:
        check_address_unique(seen, item.address_type)
        seen.append(item)

    stored = {addr.address_type: addr for addr in employee.addresses}
    for item in items:
        values = item.model_dump()
        existing = stored.get(item.address_type)
        if existing is None:
            employee.addresses.append(Address(**values))
            continue
        for field, value in values.items():
            setattr(existing, field, value)


async def _ensure_references(
    db: AsyncSession,
    department_id: Optional[uuid.UUID],
    reporting_manager_id: Optional[uuid.UUID],
) -> None:
    if department_id is not None:
        if await department_repository.find_by_id(db, department_id) is None:
            raise NotFoundError("Department", "Department not found.")
    if reporting_manager_id is not None:
        if await employee_repository.find_by_id(db, reporting_manager_id) is None:
            raise NotFoundError("Reporting Manager", "Reporting manager not found.")


def _conflict_from_integrity_error(exc: IntegrityError) -> Optional[DuplicateResourceError]:
    """Map a unique-constraint violation lost to a racing request."""
    err = str(exc.orig)
    if "official_email" in err:
        return DuplicateResourceError(
            "official_email", "Employee already exists with this email.",
        )
    if "contact_number" in err:
        return DuplicateResourceError(
            "contact_number", "Employee already exists with this contact number.",
        )
    return None


async def _save(db: AsyncSession, employee: Employee) -> Employee:
    try:
        return await employee_repository.save(db, employee)
    except IntegrityError as exc:
        await db.rollback()
        conflict = _conflict_from_integrity_error(exc)
        if conflict is None:
            raise
        raise conflict


async def _department_managers_listing(db: AsyncSession) -> list[EmployeeDetail]:
    """Listing returned once a department has at least one manager.

    NOTE: returns every employee in the organisation, not just the
    department's managers. Narrow the query here to change that.
    """
    employees = await employee_repository.find_all(db)
    return [EmployeeDetail.model_validate(emp) for emp in employees]


# ═════════════════════════════════════════════════════════════════════
# EmployeeService
# ═════════════════════════════════════════════════════════════════════


class EmployeeService:
    """Async CRUD, login and hierarchy operations for employees."""

    # ── Create ──────────────────────────────────────────────────────

    @staticmethod
    async def create(
        db: AsyncSession,
        data: EmployeeCreate,
    ) -> AppResponse[EmployeeDetail]:
        """Validate uniqueness, hash the password and persist a new employee."""
        logger.info("Signup requested for %s", data.official_email)

        await check_credentials_unique(db, data.official_email, data.contact_number)
        await check_role_available(db, data.role)
        await _ensure_references(db, data.department_id, data.reporting_manager_id)
        addresses = _build_addresses(data.addresses)

        employee = Employee(
            **data.model_dump(exclude={"password", "addresses"}),
            password_hash=hash_password(data.password),
            addresses=addresses,
        )
        saved = await _save(db, employee)
        logger.info("Employee %s saved", saved.id)
        return AppResponse(
            status_code=201, success=True, data=EmployeeDetail.model_validate(saved),
        )

    # ── Get single ──────────────────────────────────────────────────

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        employee_id: uuid.UUID,
    ) -> AppResponse[EmployeeDetail]:
        employee = await employee_repository.find_by_id(db, employee_id)
        if employee is None:
            logger.error("Requested employee not found")
            raise NotFoundError("Employee", "Requesting employee not found.")
        return AppResponse(
            status_code=200, success=True, data=EmployeeDetail.model_validate(employee),
        )

    # ── Update (merge) ──────────────────────────────────────────────

    @staticmethod
    async def update(
        db: AsyncSession,
        employee_id: uuid.UUID,
        data: EmployeeUpdate,
    ) -> AppResponse[EmployeeDetail]:
        """Merge the provided fields onto the stored employee.

        Fields absent (or null) in *data* keep their stored value.
        """
        employee = await employee_repository.find_by_id(db, employee_id)
        if employee is None:
            logger.error("Requested employee for update not found")
            raise NotFoundError("Employee", "Requesting employee not found.")

        changes: dict[str, Any] = data.model_dump(
            exclude_unset=True, exclude_none=True, exclude={"addresses", "password"},
        )
        logger.info("Updating employee %s fields: %s", employee.id, sorted(changes))

        await check_credentials_unique(
            db,
            changes.get("official_email"),
            changes.get("contact_number"),
            exclude_id=employee.id,
        )
        await check_role_available(db, changes.get("role"), exclude_id=employee.id)
        await _ensure_references(
            db, changes.get("department_id"), changes.get("reporting_manager_id"),
        )

        if data.addresses is not None:
            _merge_addresses(employee, data.addresses)
        for field, value in changes.items():
            setattr(employee, field, value)
        if data.password is not None:
            employee.password_hash = hash_password(data.password)

        saved = await _save(db, employee)
        return AppResponse(
            status_code=202, success=True, data=EmployeeDetail.model_validate(saved),
        )

    # ── Add address ─────────────────────────────────────────────────

    @staticmethod
    async def add_address(
        db: AsyncSession,
        employee_id: uuid.UUID,
        address: AddressSchema,
    ) -> AppResponse[EmployeeDetail]:
        employee = await employee_repository.find_by_id(db, employee_id)
        if employee is None:
            raise NotFoundError("Employee", "Requesting employee not found.")

        check_address_unique(employee.addresses, address.address_type)
        employee.addresses.append(Address(**address.model_dump()))

        saved = await _save(db, employee)
        return AppResponse(
            status_code=201, success=True, data=EmployeeDetail.model_validate(saved),
        )

    # ── Delete ──────────────────────────────────────────────────────

    @staticmethod
    async def delete(db: AsyncSession, employee_id: uuid.UUID) -> AppResponse[str]:
        """Hard-delete an employee.

        Every store failure (missing row, constraint violation) surfaces as
        ``NotFoundError`` without its original cause.
        """
        try:
            await employee_repository.delete_by_id(db, employee_id)
        except NoResultFound as exc:
            logger.info("Employee already deleted - %s", exc)
            raise NotFoundError("Employee", "Employee already removed.") from None
        except IntegrityError as exc:
            await db.rollback()
            logger.info("Employee delete rejected by store - %s", exc.orig)
            raise NotFoundError("Employee", "Employee already removed.") from None
        logger.info("Employee %s deleted", employee_id)
        return AppResponse(
            status_code=204, success=True, data="Employee deleted successfully.",
        )

    # ── List ────────────────────────────────────────────────────────

    @staticmethod
    async def list_all(db: AsyncSession) -> AppResponse[list[EmployeeListItem]]:
        employees = await employee_repository.find_all(db)
        logger.info("Employees fetched from store: %d", len(employees))
        return AppResponse(
            status_code=200,
            success=True,
            data=[EmployeeListItem.model_validate(emp) for emp in employees],
        )

    # ── Login ───────────────────────────────────────────────────────

    @staticmethod
    async def login(
        db: AsyncSession,
        official_email: str,
        password: str,
    ) -> AppResponse[LoginResponse]:
        login = await AuthService.login(db, official_email, password)
        return AppResponse(status_code=200, success=True, data=login)

    # ── Org summary ─────────────────────────────────────────────────

    @staticmethod
    async def get_org_summary(db: AsyncSession) -> AppResponse[OrganisationSummary]:
        summary = await build_org_summary(db)
        return AppResponse(status_code=200, success=True, data=summary)

    # ── Department managers ─────────────────────────────────────────

    @staticmethod
    async def get_managers_of_department(
        db: AsyncSession,
        department_id: uuid.UUID,
    ) -> AppResponse[list[EmployeeDetail]]:
        managers = await employee_repository.find_by_department_and_role(
            db, department_id, MANAGER_ROLE,
        )
        if not managers:
            return AppResponse(status_code=200, success=True, data=[])
        return AppResponse(
            status_code=200, success=True, data=await _department_managers_listing(db),
        )

    # ── Hierarchy ───────────────────────────────────────────────────

    @staticmethod
    async def get_child_employees_or_reporting_managers(
        db: AsyncSession,
        reportee_id: uuid.UUID,
        auth: AuthContext,
    ) -> AppResponse[Union[list[EmployeeDetail], ReportingChainResponse]]:
        """Direct reports for a SUPER_ADMIN caller, else self + manager."""
        resolved = await resolve_reports_or_self(db, auth.role, reportee_id)
        return AppResponse(status_code=200, success=True, data=resolved)


# ═════════════════════════════════════════════════════════════════════
# DepartmentService
# ═════════════════════════════════════════════════════════════════════


class DepartmentService:
    """Async read / create operations for departments."""

    @staticmethod
    async def list_departments(db: AsyncSession) -> AppResponse[list[DepartmentResponse]]:
        departments = await department_repository.find_all(db)
        return AppResponse(
            status_code=200,
            success=True,
            data=[DepartmentResponse.model_validate(d) for d in departments],
        )

    @staticmethod
    async def create_department(
        db: AsyncSession,
        data: DepartmentCreate,
    ) -> AppResponse[DepartmentResponse]:
        if await department_repository.find_by_name(db, data.name) is not None:
            logger.error("Department already exists: %s", data.name)
            raise DuplicateResourceError(
                "name", "Department already exists with this name.",
            )

        # A new department has no members yet.
        department = await department_repository.save(
            db, Department(name=data.name, description=data.description, employees=[]),
        )
        return AppResponse(
            status_code=201,
            success=True,
            data=DepartmentResponse.model_validate(department),
        )

"""Core HR router - Employee and Department API endpoints.

Routes:
    /employees                    - List, create employees
    /employees/org-summary        - Super admin + all departments
    /employees/{id}               - Get, update, delete employee
    /employees/{id}/addresses     - Add an address
    /employees/{id}/hierarchy     - Direct reports or self + manager
    /departments                  - List, create departments
    /departments/{id}/managers    - Department managers listing
"""


import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from orgchart.auth.dependencies import AuthContext, get_auth_context, require_role
from orgchart.common.constants import Role
from orgchart.common.exceptions import ForbiddenException
from orgchart.core_hr.schemas import (
    AddressSchema,
    DepartmentCreate,
    EmployeeCreate,
    EmployeeUpdate,
)
from orgchart.core_hr.service import DepartmentService, EmployeeService
from orgchart.database import get_db


# ═════════════════════════════════════════════════════════════════════
# Routers
# ═════════════════════════════════════════════════════════════════════

employees_router = APIRouter(prefix="", tags=["employees"])
departments_router = APIRouter(prefix="", tags=["departments"])


# ═════════════════════════════════════════════════════════════════════
# Employee Endpoints
# ═════════════════════════════════════════════════════════════════════


# ── GET /employees - List employees ─────────────────────────────────

@employees_router.get("")
async def list_employees(
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    """Condensed public view of every employee (no pagination)."""
    return await EmployeeService.list_all(db)


# ── POST /employees - Create employee ──────────────────────────────

@employees_router.post("", status_code=201)
async def create_employee(
    body: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_role(Role.ADMIN)),
):
    """Create an employee on someone's behalf. Requires **ADMIN** or above."""
    return await EmployeeService.create(db, body)


# ── GET /employees/org-summary - Super admin + departments ─────────
# NOTE: This MUST be defined before /employees/{employee_id} to avoid
# path parameter conflict.

@employees_router.get("/org-summary")
async def get_org_summary(
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    return await EmployeeService.get_org_summary(db)


# ── GET /employees/{id} - Employee profile ─────────────────────────

@employees_router.get("/{employee_id}")
async def get_employee(
    employee_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    return await EmployeeService.get_by_id(db, employee_id)


# ── PUT /employees/{id} - Merge-update employee ────────────────────

@employees_router.put("/{employee_id}", status_code=202)
async def update_employee(
    employee_id: uuid.UUID,
    body: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_role(Role.ADMIN)),
):
    """Partial update; fields left out of the body keep their value."""
    return await EmployeeService.update(db, employee_id, body)


# ── DELETE /employees/{id} - Hard delete ───────────────────────────

@employees_router.delete("/{employee_id}", status_code=204)
async def delete_employee(
    employee_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_role(Role.ADMIN)),
):
    result = await EmployeeService.delete(db, employee_id)
    return Response(status_code=result.status_code)


# ── POST /employees/{id}/addresses - Add address ───────────────────

@employees_router.post("/{employee_id}/addresses", status_code=201)
async def add_address(
    employee_id: uuid.UUID,
    body: AddressSchema,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    """Add an address of a type the employee does not have yet.

    Access rules:
    - **EMPLOYEE**: own record only
    - **ADMIN+**: any employee
    """
    if auth.employee_id != employee_id and not auth.has_role(Role.ADMIN):
        raise ForbiddenException(detail="You can only add addresses to your own profile.")
    return await EmployeeService.add_address(db, employee_id, body)


# ── GET /employees/{id}/hierarchy - Reports or reporting chain ─────

@employees_router.get("/{employee_id}/hierarchy")
async def get_hierarchy(
    employee_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    """**SUPER_ADMIN** gets the direct reports; everyone else gets the
    employee's own record plus their reporting manager."""
    return await EmployeeService.get_child_employees_or_reporting_managers(
        db, employee_id, auth,
    )


# ═════════════════════════════════════════════════════════════════════
# Department Endpoints
# ═════════════════════════════════════════════════════════════════════


@departments_router.get("")
async def list_departments(
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    return await DepartmentService.list_departments(db)


@departments_router.post("", status_code=201)
async def create_department(
    body: DepartmentCreate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_role(Role.ADMIN)),
):
    return await DepartmentService.create_department(db, body)


@departments_router.get("/{department_id}/managers")
async def get_department_managers(
    department_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    return await EmployeeService.get_managers_of_department(db, department_id)

"""Hierarchy resolution and organisation summary.

Both functions are pure with respect to their inputs: the caller's role is
an argument, never ambient state.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional, Union

from sqlalchemy.exc import MultipleResultsFound
from sqlalchemy.ext.asyncio import AsyncSession

from orgchart.common.constants import TOP_PRIVILEGE_ROLE, Role
from orgchart.common.exceptions import DuplicateResourceError, NotFoundError
from orgchart.core_hr.repository import department_repository, employee_repository
from orgchart.core_hr.schemas import (
    DepartmentResponse,
    EmployeeDetail,
    OrganisationSummary,
    ReportingChainResponse,
)

logger = logging.getLogger(__name__)


async def resolve_reports_or_self(
    db: AsyncSession,
    requestor_role: Optional[Role],
    target_employee_id: uuid.UUID,
) -> Union[list[EmployeeDetail], ReportingChainResponse]:
    """Direct reports for a top-privilege caller, else self + manager.

    - SUPER_ADMIN: every employee whose reporting manager is the target
      (possibly an empty list).
    - anyone else: the target's own record and their reporting manager's
      record; ``NotFoundError`` if the target is missing or the manager
      reference is absent or dangling.
    """
    if requestor_role == TOP_PRIVILEGE_ROLE:
        reports = await employee_repository.find_by_manager(db, target_employee_id)
        logger.info("Resolved %d direct reports", len(reports))
        return [EmployeeDetail.model_validate(emp) for emp in reports]

    employee = await employee_repository.find_by_id(db, target_employee_id)
    if employee is None:
        logger.error("Employee not found for hierarchy lookup")
        raise NotFoundError("Employee", "Employee not found.")

    manager = None
    if employee.reporting_manager_id is not None:
        manager = await employee_repository.find_by_id(db, employee.reporting_manager_id)
    if manager is None:
        logger.error("Reporting manager missing for employee %s", employee.id)
        raise NotFoundError("Reporting Manager", "Reporting manager not found.")

    return ReportingChainResponse(
        employee=EmployeeDetail.model_validate(employee),
        reporting_manager=EmployeeDetail.model_validate(manager),
    )


async def build_org_summary(db: AsyncSession) -> OrganisationSummary:
    """The unique SUPER_ADMIN's public profile plus every department."""
    try:
        super_admin = await employee_repository.find_by_role(db, TOP_PRIVILEGE_ROLE)
    except MultipleResultsFound:
        logger.error("More than one super admin exists")
        raise DuplicateResourceError(
            "role", "More than one super admin exists for this organisation.",
        )
    if super_admin is None:
        logger.error("Super admin doesn't exist")
        raise NotFoundError("Super Admin", "Super admin doesn't exist.")

    departments = await department_repository.find_all(db)
    return OrganisationSummary(
        super_admin=EmployeeDetail.model_validate(super_admin),
        departments=[DepartmentResponse.model_validate(d) for d in departments],
    )

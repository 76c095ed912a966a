"""Hierarchy resolver tests - direct reports for the top role, self plus
manager for everyone else, and the not-found paths."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from orgchart.auth.dependencies import AuthContext
from orgchart.common.constants import Role
from orgchart.common.exceptions import NotFoundError
from orgchart.core_hr.hierarchy import resolve_reports_or_self
from orgchart.core_hr.schemas import ReportingChainResponse
from orgchart.core_hr.service import EmployeeService
from tests.conftest import auth_headers_for, seed_employee, seed_orphaned_report


# ── Resolver ────────────────────────────────────────────────────────


class TestResolveReportsOrSelf:

    async def test_top_role_gets_direct_reports(self, db: AsyncSession):
        boss = await seed_employee(db, role=Role.SUPER_ADMIN)
        reports = [
            await seed_employee(db, reporting_manager_id=boss.id) for _ in range(3)
        ]
        await seed_employee(db)  # reports to nobody

        result = await resolve_reports_or_self(db, Role.SUPER_ADMIN, boss.id)

        assert isinstance(result, list)
        assert {e.id for e in result} == {r.id for r in reports}

    async def test_top_role_with_no_reports_gets_empty_list(self, db: AsyncSession):
        loner = await seed_employee(db)

        assert await resolve_reports_or_self(db, Role.SUPER_ADMIN, loner.id) == []

    async def test_top_role_with_unknown_target_gets_empty_list(self, db: AsyncSession):
        assert await resolve_reports_or_self(db, Role.SUPER_ADMIN, uuid.uuid4()) == []

    @pytest.mark.parametrize("role", [Role.ADMIN, Role.EMPLOYEE, None])
    async def test_other_roles_get_self_and_manager(self, db: AsyncSession, role):
        manager = await seed_employee(db, first_name="Manager", role=Role.ADMIN)
        emp = await seed_employee(db, first_name="Report", reporting_manager_id=manager.id)

        result = await resolve_reports_or_self(db, role, emp.id)

        assert isinstance(result, ReportingChainResponse)
        assert result.employee.id == emp.id
        assert result.reporting_manager.id == manager.id

    async def test_missing_target(self, db: AsyncSession):
        with pytest.raises(NotFoundError) as exc:
            await resolve_reports_or_self(db, Role.EMPLOYEE, uuid.uuid4())
        assert exc.value.detail == "Employee not found."

    async def test_no_manager_is_not_found(self, db: AsyncSession):
        emp = await seed_employee(db)

        with pytest.raises(NotFoundError) as exc:
            await resolve_reports_or_self(db, Role.EMPLOYEE, emp.id)
        assert exc.value.detail == "Reporting manager not found."

    async def test_dangling_manager_is_not_found(self, db: AsyncSession):
        emp = await seed_orphaned_report(db)

        with pytest.raises(NotFoundError):
            await resolve_reports_or_self(db, Role.ADMIN, emp.id)


async def test_service_reads_role_from_auth_context(db: AsyncSession):
    boss = await seed_employee(db, role=Role.SUPER_ADMIN)
    report = await seed_employee(db, reporting_manager_id=boss.id)

    as_boss = AuthContext(employee_id=boss.id, email=boss.official_email, role=Role.SUPER_ADMIN)
    as_report = AuthContext(
        employee_id=report.id, email=report.official_email, role=Role.EMPLOYEE,
    )

    reports = await EmployeeService.get_child_employees_or_reporting_managers(
        db, boss.id, as_boss,
    )
    chain = await EmployeeService.get_child_employees_or_reporting_managers(
        db, report.id, as_report,
    )

    assert [e.id for e in reports.data] == [report.id]
    assert chain.data.reporting_manager.id == boss.id


# ── HTTP API ────────────────────────────────────────────────────────


class TestHierarchyAPI:

    async def test_super_admin_sees_reports(self, client, db, super_admin):
        report = await seed_employee(db, reporting_manager_id=super_admin.id)

        resp = await client.get(
            f"/api/v1/employees/{super_admin.id}/hierarchy",
            headers=auth_headers_for(super_admin),
        )

        assert resp.status_code == 200
        assert [e["id"] for e in resp.json()["data"]] == [str(report.id)]

    async def test_employee_sees_self_and_manager(self, client, db, admin):
        emp = await seed_employee(db, reporting_manager_id=admin.id)

        resp = await client.get(
            f"/api/v1/employees/{emp.id}/hierarchy", headers=auth_headers_for(emp),
        )

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["employee"]["id"] == str(emp.id)
        assert data["reporting_manager"]["id"] == str(admin.id)

    async def test_employee_without_manager_gets_404(self, client, employee):
        resp = await client.get(
            f"/api/v1/employees/{employee.id}/hierarchy", headers=auth_headers_for(employee),
        )
        assert resp.status_code == 404

"""Department and organisation-summary tests."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from orgchart.common.constants import Role
from orgchart.common.exceptions import DuplicateResourceError, NotFoundError
from orgchart.core_hr.hierarchy import build_org_summary
from orgchart.core_hr.schemas import DepartmentCreate
from orgchart.core_hr.service import DepartmentService, EmployeeService
from tests.conftest import auth_headers_for, seed_department, seed_employee


# ═════════════════════════════════════════════════════════════════════
# ORG SUMMARY
# ═════════════════════════════════════════════════════════════════════


class TestOrgSummary:

    async def test_without_super_admin(self, db: AsyncSession):
        await seed_department(db)
        await seed_employee(db, role=Role.ADMIN)

        with pytest.raises(NotFoundError) as exc:
            await build_org_summary(db)
        assert exc.value.detail == "Super admin doesn't exist."

    async def test_lists_super_admin_and_every_department_once(self, db: AsyncSession):
        boss = await seed_employee(db, role=Role.SUPER_ADMIN)
        eng = await seed_department(db, name="Engineering")
        ops = await seed_department(db, name="Operations")
        await seed_employee(db, department_id=eng.id)
        await seed_employee(db, department_id=eng.id)

        summary = await build_org_summary(db)

        assert summary.super_admin.id == boss.id
        assert sorted(d.id for d in summary.departments) == sorted([eng.id, ops.id])
        by_name = {d.name: d for d in summary.departments}
        assert len(by_name["Engineering"].employees) == 2
        assert by_name["Operations"].employees == []

    async def test_two_super_admins_is_a_conflict(self, db: AsyncSession):
        await seed_employee(db, role=Role.SUPER_ADMIN)
        await seed_employee(db, role=Role.SUPER_ADMIN)

        with pytest.raises(DuplicateResourceError) as exc:
            await build_org_summary(db)
        assert "role" in exc.value.errors

    async def test_with_no_departments(self, db: AsyncSession):
        await seed_employee(db, role=Role.SUPER_ADMIN)

        result = await EmployeeService.get_org_summary(db)

        assert result.status_code == 200
        assert result.data.departments == []

    async def test_api(self, client, super_admin, employee):
        resp = await client.get(
            "/api/v1/employees/org-summary", headers=auth_headers_for(employee),
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["super_admin"]["id"] == str(super_admin.id)


# ═════════════════════════════════════════════════════════════════════
# DEPARTMENT MANAGERS
# ═════════════════════════════════════════════════════════════════════


class TestDepartmentManagers:

    async def test_department_without_admin_returns_empty(self, db: AsyncSession):
        dept = await seed_department(db)
        await seed_employee(db, department_id=dept.id, role=Role.EMPLOYEE)

        result = await EmployeeService.get_managers_of_department(db, dept.id)

        assert result.status_code == 200
        assert result.data == []

    async def test_department_with_admin_returns_every_employee(self, db: AsyncSession):
        dept = await seed_department(db, name="Sales")
        other = await seed_department(db, name="Legal")
        await seed_employee(db, department_id=dept.id, role=Role.ADMIN)
        await seed_employee(db, department_id=dept.id, role=Role.EMPLOYEE)
        await seed_employee(db, department_id=other.id, role=Role.EMPLOYEE)
        await seed_employee(db, role=Role.SUPER_ADMIN)

        result = await EmployeeService.get_managers_of_department(db, dept.id)

        assert len(result.data) == 4

    async def test_unknown_department_returns_empty(self, db: AsyncSession):
        await seed_employee(db, role=Role.ADMIN)

        result = await EmployeeService.get_managers_of_department(db, uuid.uuid4())

        assert result.data == []

    async def test_api(self, client, db, employee):
        dept = await seed_department(db)
        await seed_employee(db, department_id=dept.id, role=Role.ADMIN)

        resp = await client.get(
            f"/api/v1/departments/{dept.id}/managers", headers=auth_headers_for(employee),
        )

        assert resp.status_code == 200
        assert len(resp.json()["data"]) == 2


# ═════════════════════════════════════════════════════════════════════
# DEPARTMENT CRUD
# ═════════════════════════════════════════════════════════════════════


class TestDepartmentCRUD:

    async def test_create_department(self, db: AsyncSession):
        result = await DepartmentService.create_department(
            db, DepartmentCreate(name="Design", description="Brand and UX"),
        )

        assert result.status_code == 201
        assert result.data.name == "Design"
        assert result.data.employees == []

    async def test_duplicate_name_rejected(self, db: AsyncSession):
        await seed_department(db, name="Design")

        with pytest.raises(DuplicateResourceError):
            await DepartmentService.create_department(db, DepartmentCreate(name="Design"))

    async def test_list_departments(self, db: AsyncSession):
        await seed_department(db, name="B-Team")
        await seed_department(db, name="A-Team")

        result = await DepartmentService.list_departments(db)

        assert [d.name for d in result.data] == ["A-Team", "B-Team"]

    async def test_employee_cannot_create_via_api(self, client, employee):
        resp = await client.post(
            "/api/v1/departments", json={"name": "Ops"}, headers=auth_headers_for(employee),
        )
        assert resp.status_code == 403

    async def test_admin_creates_via_api(self, client, admin):
        resp = await client.post(
            "/api/v1/departments", json={"name": "Ops"}, headers=auth_headers_for(admin),
        )
        assert resp.status_code == 201

        listing = await client.get("/api/v1/departments", headers=auth_headers_for(admin))
        assert [d["name"] for d in listing.json()["data"]] == ["Ops"]

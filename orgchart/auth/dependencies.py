"""Auth dependencies - JWT validation, per-request auth context, RBAC."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, Request
from fastapi.exceptions import HTTPException
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from orgchart.auth.security import decode_access_token
from orgchart.common.constants import DEFAULT_ROLE, ROLE_HIERARCHY, Role
from orgchart.common.exceptions import ForbiddenException
from orgchart.core_hr.repository import employee_repository
from orgchart.database import get_db


@dataclass(frozen=True)
class AuthContext:
    """Verified identity of the caller, scoped to a single request."""

    employee_id: uuid.UUID
    email: str
    role: Role

    def has_role(self, *allowed_roles: Role) -> bool:
        effective_roles = ROLE_HIERARCHY.get(self.role, {self.role})
        return bool(effective_roles.intersection(allowed_roles))


def _extract_bearer(request: Request) -> str:
    """Extract Bearer token from Authorization header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing or invalid Authorization header.")
    return auth_header[7:]


# ── Core dependency ─────────────────────────────────────────────────

async def get_auth_context(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> AuthContext:
    """Validate the JWT and return the caller's ``AuthContext``."""
    token = _extract_bearer(request)

    try:
        payload = decode_access_token(token)
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired.")
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token.")

    if payload.get("type") != "access":
        raise HTTPException(status_code=401, detail="Invalid token type.")

    try:
        employee_id = uuid.UUID(payload["employee_id"])
    except (KeyError, TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token.")

    employee = await employee_repository.find_by_id(db, employee_id)
    if employee is None:
        raise HTTPException(status_code=401, detail="User account not found.")

    try:
        role = Role(payload.get("role", DEFAULT_ROLE.value))
    except ValueError:
        role = DEFAULT_ROLE

    context = AuthContext(employee_id=employee.id, email=employee.official_email, role=role)
    request.state.auth = context
    return context


# ── Role-based dependency ───────────────────────────────────────────

def require_role(*allowed_roles: Role) -> Callable:
    """Return a FastAPI dependency that enforces role membership.

    Respects hierarchy - e.g. SUPER_ADMIN can access ADMIN endpoints.
    """

    async def _check(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if not auth.has_role(*allowed_roles):
            raise ForbiddenException(
                detail=f"Role '{auth.role.value}' is not permitted. "
                       f"Required: {[r.value for r in allowed_roles]}.",
            )
        return auth

    return _check

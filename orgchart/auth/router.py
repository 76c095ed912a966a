"""Auth router - signup, password login, current user profile."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from orgchart.auth.dependencies import AuthContext, get_auth_context
from orgchart.auth.schemas import LoginRequest
from orgchart.common.rate_limit import limiter
from orgchart.config import settings
from orgchart.core_hr.schemas import EmployeeCreate, EmployeeSignup
from orgchart.core_hr.service import EmployeeService
from orgchart.database import get_db

router = APIRouter(prefix="", tags=["auth"])


# ── POST /signup - Self-registration ───────────────────────────────

@router.post("/signup", status_code=201)
async def signup(
    body: EmployeeSignup,
    db: AsyncSession = Depends(get_db),
):
    """Self-registration. The new employee never holds a role; admins assign one."""
    return await EmployeeService.create(db, EmployeeCreate(**body.model_dump()))


# ── POST /login - Email + password ─────────────────────────────────

@router.post("/login")
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    return await EmployeeService.login(db, body.official_email, body.password)


# ── GET /me - Current user profile ─────────────────────────────────

@router.get("/me")
async def me(
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    return await EmployeeService.get_by_id(db, auth.employee_id)

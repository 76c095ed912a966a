"""Auth Pydantic schemas for request / response validation."""


import uuid
from typing import Optional

from pydantic import BaseModel, EmailStr

from orgchart.common.constants import Role


# ── Requests ────────────────────────────────────────────────────────

class LoginRequest(BaseModel):
    official_email: EmailStr
    password: str


# ── Responses ───────────────────────────────────────────────────────

class LoginResponse(BaseModel):
    employee_id: uuid.UUID
    first_name: str
    last_name: str
    role: Optional[Role] = None
    designation: Optional[str] = None
    access_token: str
    token_type: str = "bearer"
    expires_in: int

"""Core HR Pydantic v2 schemas - request / response validation.

Naming conventions:
  - *Create / *Update  → request bodies (write)
  - *Response / *Detail → response bodies (read, "public views")
  - *Summary / *ListItem → compact read representations

No read schema carries the password hash.
"""


import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from orgchart.common.constants import AddressType, Role


# ═════════════════════════════════════════════════════════════════════
# Address
# ═════════════════════════════════════════════════════════════════════


class AddressSchema(BaseModel):
    """Address block in create / update payloads."""

    address_type: AddressType
    line1: Optional[str] = Field(None, max_length=255)
    line2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    pincode: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)


class AddressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    address_type: AddressType
    line1: Optional[str] = None
    line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    country: Optional[str] = None


# ═════════════════════════════════════════════════════════════════════
# Department
# ═════════════════════════════════════════════════════════════════════


class DepartmentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None


class DepartmentBrief(BaseModel):
    """Minimal department info embedded in employee responses."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str


class EmployeeSummary(BaseModel):
    """Minimal employee reference (department members)."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    last_name: str
    designation: Optional[str] = None
    role: Optional[Role] = None


class DepartmentResponse(BaseModel):
    """Department with its member employees."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: Optional[str] = None
    employees: list[EmployeeSummary] = Field(default_factory=list)


# ═════════════════════════════════════════════════════════════════════
# Employee - write schemas
# ═════════════════════════════════════════════════════════════════════


class EmployeeSignup(BaseModel):
    """Public self-registration payload. Carries no role; any sent is ignored."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    official_email: EmailStr
    contact_number: str = Field(..., min_length=1, max_length=20)
    password: str = Field(..., min_length=6, max_length=128)
    designation: Optional[str] = Field(None, max_length=150)
    department_id: Optional[uuid.UUID] = None
    reporting_manager_id: Optional[uuid.UUID] = None
    addresses: list[AddressSchema] = Field(default_factory=list)


class EmployeeCreate(EmployeeSignup):
    """Employee created by an admin (or the bootstrap script); may set a role."""

    role: Optional[Role] = None


class EmployeeUpdate(BaseModel):
    """Merge payload: only the provided (non-null) fields are applied."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    official_email: Optional[EmailStr] = None
    contact_number: Optional[str] = Field(None, min_length=1, max_length=20)
    password: Optional[str] = Field(None, min_length=6, max_length=128)
    role: Optional[Role] = None
    designation: Optional[str] = Field(None, max_length=150)
    department_id: Optional[uuid.UUID] = None
    reporting_manager_id: Optional[uuid.UUID] = None
    addresses: Optional[list[AddressSchema]] = None


# ═════════════════════════════════════════════════════════════════════
# Employee - read schemas
# ═════════════════════════════════════════════════════════════════════


class EmployeeListItem(BaseModel):
    """Condensed employee row for the directory listing."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    last_name: str
    official_email: str
    designation: Optional[str] = None
    role: Optional[Role] = None
    department: Optional[DepartmentBrief] = None


class EmployeeDetail(BaseModel):
    """Full public view of an employee."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    last_name: str
    official_email: str
    contact_number: str
    role: Optional[Role] = None
    designation: Optional[str] = None
    department: Optional[DepartmentBrief] = None
    reporting_manager_id: Optional[uuid.UUID] = None
    addresses: list[AddressResponse] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ═════════════════════════════════════════════════════════════════════
# Hierarchy / org summary
# ═════════════════════════════════════════════════════════════════════


class ReportingChainResponse(BaseModel):
    """Self-service hierarchy view: the employee and their manager."""

    employee: EmployeeDetail
    reporting_manager: EmployeeDetail


class OrganisationSummary(BaseModel):
    """Top-level admin plus every department."""

    super_admin: EmployeeDetail
    departments: list[DepartmentResponse]

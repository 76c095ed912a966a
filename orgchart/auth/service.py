"""Auth service - credential verification and session-token issuance."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from orgchart.auth.schemas import LoginResponse
from orgchart.auth.security import hash_password, issue_access_token, verify_password
from orgchart.common.constants import DEFAULT_ROLE
from orgchart.common.exceptions import InvalidCredentialsError
from orgchart.core_hr.models import Employee
from orgchart.core_hr.repository import employee_repository

logger = logging.getLogger(__name__)

# Compared against when the email is unknown, so both failure paths pay
# for one bcrypt check.
_UNKNOWN_USER_HASH = hash_password("no-such-employee")


def build_claims(employee: Employee) -> dict[str, Any]:
    """Custom token claims: role (EMPLOYEE when unset) and employee id."""
    role = employee.role or DEFAULT_ROLE
    return {
        "role": role.value,
        "employee_id": str(employee.id),
    }


class AuthService:
    """Stateless login: verify credentials, issue a signed token."""

    @staticmethod
    async def login(
        db: AsyncSession,
        official_email: str,
        password: str,
    ) -> LoginResponse:
        """Return a login response with a fresh token.

        Unknown email and wrong password raise the same
        ``InvalidCredentialsError``.
        """
        employee = await employee_repository.find_by_email(db, official_email)
        if employee is None:
            verify_password(password, _UNKNOWN_USER_HASH)
            logger.error("Login failed: no employee with email %s", official_email)
            raise InvalidCredentialsError()

        if not verify_password(password, employee.password_hash):
            logger.error("Login failed: password mismatch for %s", official_email)
            raise InvalidCredentialsError()

        token, expires_in = issue_access_token(
            employee.official_email, build_claims(employee),
        )
        logger.info("Issued access token for employee %s", employee.id)
        return LoginResponse(
            employee_id=employee.id,
            first_name=employee.first_name,
            last_name=employee.last_name,
            role=employee.role,
            designation=employee.designation,
            access_token=token,
            expires_in=expires_in,
        )

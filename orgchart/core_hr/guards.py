"""Uniqueness guard - read-only checks that must pass before any write.

Raises:
  - ``DuplicateResourceError`` for email / contact number / SUPER_ADMIN clashes
  - ``DuplicateAddressError`` for a second address of one type
"""

from __future__ import annotations

import logging
import uuid
from typing import Iterable, Optional, Protocol

from sqlalchemy.exc import MultipleResultsFound
from sqlalchemy.ext.asyncio import AsyncSession

from orgchart.common.constants import TOP_PRIVILEGE_ROLE, AddressType, Role
from orgchart.common.exceptions import DuplicateAddressError, DuplicateResourceError
from orgchart.core_hr.repository import employee_repository

logger = logging.getLogger(__name__)


class _TypedAddress(Protocol):
    address_type: AddressType


def _is_other(employee, exclude_id: Optional[uuid.UUID]) -> bool:
    return employee is not None and employee.id != exclude_id


async def check_credentials_unique(
    db: AsyncSession,
    official_email: Optional[str],
    contact_number: Optional[str],
    *,
    exclude_id: Optional[uuid.UUID] = None,
) -> None:
    """Fail if another employee already uses the email or contact number.

    ``None`` values are skipped; *exclude_id* lets an employee keep their own.
    """
    if official_email is not None:
        existing = await employee_repository.find_by_email(db, official_email)
        if _is_other(existing, exclude_id):
            logger.error("Employee already exists with email: %s", official_email)
            raise DuplicateResourceError(
                "official_email", "Employee already exists with this email.",
            )

    if contact_number is not None:
        existing = await employee_repository.find_by_contact_number(db, contact_number)
        if _is_other(existing, exclude_id):
            logger.error("Employee already exists with contact number: %s", contact_number)
            raise DuplicateResourceError(
                "contact_number", "Employee already exists with this contact number.",
            )


def check_address_unique(
    addresses: Iterable[_TypedAddress],
    address_type: AddressType,
) -> None:
    """Fail if *addresses* already hold one of *address_type*."""
    if any(addr.address_type == address_type for addr in addresses):
        logger.error("Duplicate %s address rejected", address_type.value)
        raise DuplicateAddressError(address_type.value)


async def check_role_available(
    db: AsyncSession,
    role: Optional[Role],
    *,
    exclude_id: Optional[uuid.UUID] = None,
) -> None:
    """Fail if *role* is the top-privilege role and someone else holds it."""
    if role != TOP_PRIVILEGE_ROLE:
        return
    try:
        holder = await employee_repository.find_by_role(db, TOP_PRIVILEGE_ROLE)
        taken = _is_other(holder, exclude_id)
    except MultipleResultsFound:
        taken = True
    if taken:
        logger.error("Rejected second %s", TOP_PRIVILEGE_ROLE.value)
        raise DuplicateResourceError(
            "role", "A super admin already exists for this organisation.",
        )

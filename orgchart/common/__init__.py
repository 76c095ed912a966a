"""Common module - shared utilities for the org chart backend."""

from orgchart.common.constants import (
    DEFAULT_ROLE,
    MANAGER_ROLE,
    ROLE_HIERARCHY,
    TOP_PRIVILEGE_ROLE,
    AddressType,
    Role,
)
from orgchart.common.exceptions import (
    AppException,
    DuplicateAddressError,
    DuplicateResourceError,
    ForbiddenException,
    InvalidCredentialsError,
    NotFoundError,
    register_exception_handlers,
)
from orgchart.common.responses import AppResponse

__all__ = [
    # Constants / Enums
    "AddressType",
    "Role",
    "DEFAULT_ROLE",
    "MANAGER_ROLE",
    "ROLE_HIERARCHY",
    "TOP_PRIVILEGE_ROLE",
    # Exceptions
    "AppException",
    "DuplicateAddressError",
    "DuplicateResourceError",
    "ForbiddenException",
    "InvalidCredentialsError",
    "NotFoundError",
    "register_exception_handlers",
    # Responses
    "AppResponse",
]

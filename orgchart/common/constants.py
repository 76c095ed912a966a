"""Enums and constants for the org chart - matching PostgreSQL ENUM types."""

from __future__ import annotations

import enum


# ── Auth / Roles ────────────────────────────────────────────────────

class Role(str, enum.Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    EMPLOYEE = "EMPLOYEE"


# The organisation's top node; the only role allowed unrestricted
# hierarchy queries.
TOP_PRIVILEGE_ROLE = Role.SUPER_ADMIN

# Role that marks an employee as a department manager.
MANAGER_ROLE = Role.ADMIN

# Claimed in tokens for employees stored without a role.
DEFAULT_ROLE = Role.EMPLOYEE

# Each role implicitly includes the roles below it.
ROLE_HIERARCHY: dict[Role, set[Role]] = {
    Role.SUPER_ADMIN: {Role.SUPER_ADMIN, Role.ADMIN, Role.EMPLOYEE},
    Role.ADMIN: {Role.ADMIN, Role.EMPLOYEE},
    Role.EMPLOYEE: {Role.EMPLOYEE},
}


# ── Addresses ───────────────────────────────────────────────────────

class AddressType(str, enum.Enum):
    PERMANENT = "PERMANENT"
    CURRENT = "CURRENT"

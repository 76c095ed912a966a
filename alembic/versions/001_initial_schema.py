"""001 – Initial schema: departments, employees, addresses, enums.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-17 10:00:00.000000+00:00
"""

from alembic import op

# Revision identifiers
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

ENUM_TYPES: list[tuple[str, list[str]]] = [
    ("employee_role", ["SUPER_ADMIN", "ADMIN", "EMPLOYEE"]),
    ("address_type", ["PERMANENT", "CURRENT"]),
]


def _create_enum(name: str, values: list[str]) -> None:
    vals = ", ".join(f"'{v}'" for v in values)
    op.execute(f"CREATE TYPE {name} AS ENUM ({vals})")


def _drop_enum(name: str) -> None:
    op.execute(f"DROP TYPE IF EXISTS {name}")


# ---------------------------------------------------------------------------
# UPGRADE
# ---------------------------------------------------------------------------


def upgrade() -> None:
    # ── Extensions ────────────────────────────────────────────────────────
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ── Enum types ────────────────────────────────────────────────────────
    for name, values in ENUM_TYPES:
        _create_enum(name, values)

    # ── 1. departments ────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE departments (
            id          UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            name        VARCHAR(150) NOT NULL UNIQUE,
            description TEXT
        )
    """)

    # ── 2. employees ──────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE employees (
            id                   UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            first_name           VARCHAR(100) NOT NULL,
            last_name            VARCHAR(100) NOT NULL,
            official_email       VARCHAR(255) NOT NULL UNIQUE,
            contact_number       VARCHAR(20)  NOT NULL UNIQUE,
            password_hash        VARCHAR(255) NOT NULL,
            role                 employee_role,
            designation          VARCHAR(150),
            department_id        UUID REFERENCES departments(id),
            reporting_manager_id UUID,
            created_at           TIMESTAMPTZ DEFAULT NOW(),
            updated_at           TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT fk_employee_reporting_manager
                FOREIGN KEY (reporting_manager_id) REFERENCES employees(id)
        )
    """)

    # ── 3. addresses ──────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE addresses (
            id           UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            employee_id  UUID NOT NULL REFERENCES employees(id) ON DELETE CASCADE,
            address_type address_type NOT NULL,
            line1        VARCHAR(255),
            line2        VARCHAR(255),
            city         VARCHAR(100),
            state        VARCHAR(100),
            pincode      VARCHAR(20),
            country      VARCHAR(100),
            CONSTRAINT uq_address_employee_type UNIQUE (employee_id, address_type)
        )
    """)

    # ── Indexes ───────────────────────────────────────────────────────────
    op.execute("CREATE INDEX ix_employees_role ON employees(role)")
    op.execute("CREATE INDEX ix_employees_department_id ON employees(department_id)")
    op.execute(
        "CREATE INDEX ix_employees_reporting_manager_id ON employees(reporting_manager_id)"
    )


# ---------------------------------------------------------------------------
# DOWNGRADE
# ---------------------------------------------------------------------------


def downgrade() -> None:
    for t in ("addresses", "employees", "departments"):
        op.execute(f"DROP TABLE IF EXISTS {t} CASCADE")

    for name, _ in reversed(ENUM_TYPES):
        _drop_enum(name)

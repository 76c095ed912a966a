#!/usr/bin/env python3
"""Create the organisation's SUPER_ADMIN account.

Run once after ``alembic upgrade head``. The account goes through the same
signup path as every other employee, so the uniqueness checks apply and a
second SUPER_ADMIN is refused.

Usage:
    python scripts/create_super_admin.py --email ceo@example.com \\
        --password s3cretpw --first-name Asha --last-name Rao --contact 9800000001

Exit codes:
    0 = account created
    1 = rejected (duplicate email / contact number / existing super admin)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from orgchart.common.constants import Role
from orgchart.common.exceptions import AppException
from orgchart.common.responses import AppResponse
from orgchart.core_hr.schemas import EmployeeCreate, EmployeeDetail
from orgchart.core_hr.service import EmployeeService
from orgchart.database import async_session_factory

logger = logging.getLogger("create_super_admin")


async def create_super_admin(
    db: AsyncSession,
    *,
    official_email: str,
    password: str,
    first_name: str,
    last_name: str,
    contact_number: str,
    designation: Optional[str] = "Chief Executive Officer",
) -> AppResponse[EmployeeDetail]:
    """Sign up an employee holding the top-privilege role."""
    payload = EmployeeCreate(
        first_name=first_name,
        last_name=last_name,
        official_email=official_email,
        contact_number=contact_number,
        password=password,
        role=Role.SUPER_ADMIN,
        designation=designation,
    )
    return await EmployeeService.create(db, payload)


async def _run(args: argparse.Namespace) -> int:
    async with async_session_factory() as db:
        try:
            result = await create_super_admin(
                db,
                official_email=args.email,
                password=args.password,
                first_name=args.first_name,
                last_name=args.last_name,
                contact_number=args.contact,
                designation=args.designation,
            )
            await db.commit()
        except AppException as exc:
            await db.rollback()
            logger.error("Super admin not created: %s", exc.detail)
            return 1

    logger.info("Super admin created: %s (%s)", result.data.official_email, result.data.id)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the SUPER_ADMIN account")
    parser.add_argument("--email", required=True, help="Official email")
    parser.add_argument("--password", required=True, help="Login password (min 6 chars)")
    parser.add_argument("--first-name", required=True)
    parser.add_argument("--last-name", required=True)
    parser.add_argument("--contact", required=True, help="Contact number")
    parser.add_argument("--designation", default="Chief Executive Officer")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()

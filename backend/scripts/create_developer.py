#!/usr/bin/env python
"""Create the first DEVELOPER account.

DEVELOPER accounts cannot be created through the API, so this script is the
only way to bootstrap one. The account bypasses access rules.
"""

import asyncio
import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from muebleria_api.database import async_session_maker, engine
from muebleria_api.models.domain.role import Role
from muebleria_api.models.orm.account import AccountORM
from muebleria_api.models.orm.base import utcnow
from muebleria_api.repositories.account_repository import AccountRepository
from muebleria_api.security.password import get_password_service
from muebleria_api.utils.validation import normalize_username


async def create_developer(
    username: str,
    password: str,
    first_name: str | None = None,
    last_name: str | None = None,
) -> bool:
    """Create a DEVELOPER account."""
    normalized = normalize_username(username)
    if normalized is None:
        print(f"Invalid username: {username}")
        return False

    password_service = get_password_service()

    is_valid, errors = password_service.validate_password_strength(password)
    if not is_valid:
        print(f"Password validation failed: {errors}")
        return False

    try:
        async with async_session_maker() as session:
            repo = AccountRepository(session)

            if await repo.exists_by_username(normalized):
                print(f"Account {normalized} already exists")
                return False

            await repo.add(
                AccountORM(
                    username=normalized,
                    password_hash=password_service.hash_password(password),
                    role=Role.DEVELOPER,
                    is_active=True,
                    bypass_access_rules=True,
                    password_changed_at=utcnow(),
                    first_name=first_name,
                    last_name=last_name,
                )
            )
            await session.commit()
    finally:
        await engine.dispose()

    print(f"Developer account created: {normalized}")
    return True


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Create a DEVELOPER account")
    parser.add_argument("--username", required=True, help="Login name")
    parser.add_argument("--password", required=True, help="Password (letters and digits, min 8 chars)")
    parser.add_argument("--first-name", help="First name")
    parser.add_argument("--last-name", help="Last name")
    args = parser.parse_args()

    created = asyncio.run(create_developer(args.username, args.password, args.first_name, args.last_name))
    sys.exit(0 if created else 1)

"""Create users by login, reusing any that already exist.

Usage: uv run python bin/seed-users.py <login> [<login> ...]

Handy for trying out pagination against a local database.
"""

import asyncio
import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

from shared.db import Database, SqliteUserRepository
from webapi.server.settings import ApiServerSettings
from webapi.users.validation import is_valid_login


async def main() -> None:
    logins = sys.argv[1:]
    if not logins:
        print(f"Usage: {sys.argv[0]} <login> [<login> ...]")
        sys.exit(1)

    invalid = [login for login in logins if not is_valid_login(login)]
    if invalid:
        print(f"Error: logins must contain only letters or digits: {', '.join(invalid)}")
        sys.exit(1)

    settings = ApiServerSettings()
    db = Database(settings.database_path)
    db.connect()
    try:
        user_repo = SqliteUserRepository(db)
        for login in logins:
            user = await user_repo.get_or_create_by_login(login)
            print(f"{user.login}: {user.id}")
    finally:
        db.close()


if __name__ == "__main__":
    asyncio.run(main())

"""
Create an account from the shell (e.g. an admin on a fresh install). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD NAME [role]
Example:
  python -m app.scripts.create_user admin@example.com your-secure-password "Site Admin" ADMIN
"""
import argparse
import sys

from email_validator import EmailNotValidError, validate_email

from app.core.config import get_settings
from app.core.database import Database
from app.core.exceptions import ConflictError
from app.core.security import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    hash_password,
)
from app.models import AccountStatus, Role, User
from app.repositories.users import UserRepository


def main(argv: list[str] | None = None, database: Database | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a TaskNest account.")
    parser.add_argument("email", help="Login email")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("name", help=f"Display name ({NAME_MIN_LEN}-{NAME_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default=Role.USER.value, choices=[r.value for r in Role])
    args = parser.parse_args(argv)

    try:
        email = validate_email(args.email.strip(), check_deliverability=False).normalized
    except EmailNotValidError as exc:
        print(f"Invalid email: {exc}", file=sys.stderr)
        return 1
    name = args.name.strip()
    if not (NAME_MIN_LEN <= len(name) <= NAME_MAX_LEN):
        print(f"Name must be {NAME_MIN_LEN}-{NAME_MAX_LEN} characters.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    owns_database = database is None
    if database is None:
        database = Database(get_settings().DATABASE_URL)
    db = database.session_factory()
    try:
        users = UserRepository(db)
        if users.get_by_email(email) is not None:
            print(f"Account '{email}' already exists.", file=sys.stderr)
            return 1
        user = User(
            email=email,
            password_hash=hash_password(args.password, get_settings().BCRYPT_ROUNDS),
            name=name,
            role=Role(args.role),
            status=AccountStatus.ACTIVE,
        )
        try:
            users.add(user)
        except ConflictError as exc:
            print(exc.message, file=sys.stderr)
            return 1
        print(f"Created account '{email}' with role '{args.role}'.")
        return 0
    finally:
        db.close()
        if owns_database:
            database.dispose()


if __name__ == "__main__":
    sys.exit(main())

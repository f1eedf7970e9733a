"""
Create a user (e.g. first admin; registration only creates 'user'). Run from project root:
  python -m travel_api.scripts.create_user EMAIL PASSWORD NAME [role]
Example:
  python -m travel_api.scripts.create_user admin@example.com your-secure-password "Site Admin" admin
"""
import argparse
import sys

from travel_api.core.config import get_settings
from travel_api.core.database import Database
from travel_api.core.errors import EmailInUseError
from travel_api.core.security import hash_password
from travel_api.schemas.auth import NAME_MAX_LEN, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, Role
from travel_api.services.users import UserRepository


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Travel API user.")
    parser.add_argument("email", help="Login email")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("name", help="Display name")
    parser.add_argument("role", nargs="?", default=Role.USER.value, choices=[r.value for r in Role])
    args = parser.parse_args(argv)

    email = args.email.strip()
    name = args.name.strip()
    if not email or "@" not in email:
        print("Invalid email.", file=sys.stderr)
        return 1
    if not name or len(name) > NAME_MAX_LEN:
        print("Invalid name length.", file=sys.stderr)
        return 1
    if len(args.password) < PASSWORD_MIN_LEN or len(args.password) > PASSWORD_MAX_LEN:
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    settings = get_settings()
    database = Database(settings.DATABASE_URL)
    db = database.session()
    try:
        users = UserRepository(db)
        if users.get_by_email(email) is not None:
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        try:
            users.create(
                name=name,
                email=email,
                password_hash=hash_password(args.password, rounds=settings.BCRYPT_ROUNDS),
                role=Role(args.role),
            )
        except EmailInUseError:
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        print(f"Created user '{email}' with role '{args.role}'.")
        return 0
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())

"""
Create an admin user (e.g. the first super admin). Run from project root:
  python -m volterra.scripts.create_user EMAIL PASSWORD NAME [role]
Example:
  python -m volterra.scripts.create_user owner@volterra.example 'a-long-password' "Sandra" SUPER_ADMIN
"""
import argparse
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from volterra.core.database import SessionLocal, session_scope
from volterra.core.security import (
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    hash_password,
)
from volterra.models.enums import UserRole, UserStatus
from volterra.models.user import User

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a Volterra admin user (no registration UI).")
    parser.add_argument("email", help="Login email (max 255 chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("name", help="Display name")
    parser.add_argument(
        "role",
        nargs="?",
        default=UserRole.USER.value,
        choices=[r.value for r in UserRole],
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    email = args.email.strip().lower()
    name = args.name.strip()
    if not email or "@" not in email or len(email) > EMAIL_MAX_LEN:
        print("Invalid email.", file=sys.stderr)
        return 1
    if not name or len(name) > NAME_MAX_LEN:
        print("Invalid name length.", file=sys.stderr)
        return 1
    if len(args.password) < PASSWORD_MIN_LEN or len(args.password) > PASSWORD_MAX_LEN:
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    try:
        with session_scope(SessionLocal) as db:
            if db.query(User.id).filter(User.email == email).first() is not None:
                print(f"User '{email}' already exists.", file=sys.stderr)
                return 1
            user = User(
                email=email,
                name=name,
                password_hash=hash_password(args.password),
                role=args.role,
                status=UserStatus.ACTIVE.value,
            )
            db.add(user)
            db.commit()
            logger.info("Created user id=%s role=%s", user.id, args.role)
    except SQLAlchemyError:
        logger.exception("Failed to create user %s", email)
        return 1
    print(f"Created user '{email}' with role '{args.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

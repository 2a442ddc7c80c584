"""
Create an account in one identity category. Run from project root:
  python -m sessionauth.scripts.create_user CATEGORY USERNAME PASSWORD [options]
Examples:
  python -m sessionauth.scripts.create_user consumer alice 'correct horse' --email alice@example.com
  python -m sessionauth.scripts.create_user admin root 's3cret-pass' --admin-type super_admin
"""
import argparse
import sys
from datetime import date

from sqlalchemy.orm import Session

from sessionauth.core.database import SessionLocal
from sessionauth.core.security import PASSWORD_MAX_LEN, USERNAME_MAX_LEN, hash_password
from sessionauth.models import Admin, Consumer, Retailer
from sessionauth.schemas.auth import IDENTITY_CATEGORIES
from sessionauth.services.identity import find_by_username


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a consumer, retailer or admin account.")
    parser.add_argument("category", choices=IDENTITY_CATEGORIES)
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password (1-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("--email", default="")
    parser.add_argument("--first-name", default="")
    parser.add_argument("--middle-name", default=None)
    parser.add_argument("--last-name", default="")
    parser.add_argument("--gender", default=None, help="consumer only")
    parser.add_argument("--birthdate", type=date.fromisoformat, default=None, help="consumer only, YYYY-MM-DD")
    parser.add_argument("--location-id", type=int, default=None, help="consumer/retailer only")
    parser.add_argument("--admin-type", default="admin", help="admin only")
    return parser


def _age_on(birthdate: date, today: date) -> int:
    return today.year - birthdate.year - ((today.month, today.day) < (birthdate.month, birthdate.day))


def build_account(args: argparse.Namespace, username: str) -> Consumer | Retailer | Admin:
    """Construct the ORM row for args.category; only that category's fields are set."""
    common = {
        "username": username,
        "password_hash": hash_password(args.password.strip()),
        "first_name": args.first_name,
        "middle_name": args.middle_name,
        "last_name": args.last_name,
    }
    if args.category == "consumer":
        return Consumer(
            **common,
            email=args.email,
            gender=args.gender,
            birthdate=args.birthdate,
            age=_age_on(args.birthdate, date.today()) if args.birthdate else None,
            location_id=args.location_id,
        )
    if args.category == "retailer":
        return Retailer(**common, email=args.email, location_id=args.location_id)
    return Admin(**common, admin_type=args.admin_type)


def create_account(db: Session, args: argparse.Namespace) -> int:
    username = args.username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    password = args.password.strip()
    if not password or len(password) > PASSWORD_MAX_LEN:
        print(f"Password must be 1-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1
    if find_by_username(db, args.category, username) is not None:
        print(f"{args.category.title()} '{username}' already exists.", file=sys.stderr)
        return 1
    db.add(build_account(args, username))
    db.commit()
    print(f"Created {args.category} '{username}'.")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    db = SessionLocal()
    try:
        return create_account(db, args)
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())

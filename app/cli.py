"""CLI commands for Inkwell."""

import argparse
import getpass
import sys

from sqlalchemy.orm import Session

from app.database import SessionLocal
from app.models.user import User
from app.services.auth.local_provider import hash_password
from app.services.invite_state_machine import InviteStateMachine


def create_user(
    email: str,
    password: str | None = None,
    is_admin: bool = False,
    first_name: str | None = None,
    last_name: str | None = None,
) -> None:
    """Create a user account (optionally an admin)."""
    db: Session = SessionLocal()

    try:
        # Check if email already exists
        existing = db.query(User).filter(User.email == email.lower()).first()
        if existing:
            print(f"Error: User with email '{email}' already exists.")
            sys.exit(1)

        # Get password if not provided
        if not password:
            password = getpass.getpass("Password: ")
            password_confirm = getpass.getpass("Confirm password: ")
            if password != password_confirm:
                print("Error: Passwords do not match.")
                sys.exit(1)

        if len(password) < 8:
            print("Error: Password must be at least 8 characters.")
            sys.exit(1)

        user = User(
            email=email.lower(),
            password_hash=hash_password(password),
            is_admin=is_admin,
            first_name=first_name,
            last_name=last_name,
        )
        db.add(user)
        db.commit()

        kind = "Admin user" if is_admin else "User"
        print(f"{kind} created successfully: {email.lower()}")

    finally:
        db.close()


def expire_invites() -> int:
    """Mark overdue pending invites as expired."""
    db: Session = SessionLocal()

    try:
        count = InviteStateMachine(db).expire_stale_invites()
        print(f"Expired {count} invite(s).")
        return count
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Inkwell CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # create-user command
    create_user_parser = subparsers.add_parser(
        "create-user", help="Create a user account"
    )
    create_user_parser.add_argument("--email", required=True, help="Email address")
    create_user_parser.add_argument(
        "--password", help="Password (will prompt if not provided)"
    )
    create_user_parser.add_argument(
        "--admin", action="store_true", help="Grant admin privileges"
    )
    create_user_parser.add_argument("--first-name", help="First name")
    create_user_parser.add_argument("--last-name", help="Last name")

    # expire-invites command
    subparsers.add_parser(
        "expire-invites", help="Mark pending invites past their expiry as expired"
    )

    args = parser.parse_args()

    if args.command == "create-user":
        create_user(
            args.email,
            args.password,
            is_admin=args.admin,
            first_name=args.first_name,
            last_name=args.last_name,
        )
    elif args.command == "expire-invites":
        expire_invites()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

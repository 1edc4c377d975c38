"""FreshCart database management CLI.

Reuses the setup_db/drop_db utilities of the domain.

Usage:
    python src/manage.py setup-db          # Create all tables
    python src/manage.py drop-db           # Drop all tables
    python src/manage.py create-admin --email admin@example.com --username admin --password secret
"""

import argparse
import sys

# Acts for the operator running this CLI; it never owns any records.
_OPERATOR_ID = "manage"


def _domain():
    from freshcart.domain import freshcart

    print("Initializing freshcart domain...")
    freshcart.init()
    return freshcart


def setup_database():
    from freshcart.utils.db import setup_db

    domain = _domain()
    print("Creating database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    from freshcart.utils.db import drop_db

    domain = _domain()
    print("Dropping database schema...")
    drop_db(domain)
    print("Done.")


def create_admin(email, username, password):
    from freshcart.identity.user.administration import CreateUser
    from freshcart.identity.user.registration import new_password_hash
    from freshcart.identity.user.user import Role, User
    from freshcart.utils.db import setup_db

    domain = _domain()
    setup_db(domain)
    with domain.domain_context():
        command = CreateUser(
            actor_id=_OPERATOR_ID,
            actor_role=Role.ADMIN.value,
            email=email,
            username=username,
            password_hash=new_password_hash(password),
            role=Role.ADMIN.value,
        )
        user_id = domain.process(command, asynchronous=False)
        user = domain.repository_for(User).get(user_id)
    print(f"Admin {user.username} created with id {user_id}.")


def main():
    parser = argparse.ArgumentParser(description="FreshCart management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    admin_parser = subparsers.add_parser("create-admin", help="Create an admin account")
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--username", required=True)
    admin_parser.add_argument("--password", required=True)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "create-admin":
        create_admin(args.email, args.username, args.password)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

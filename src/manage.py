"""LockLedger database management CLI.

Provides commands to create and drop the ledger's database schema.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    """Create the ledger's tables in the configured SQL database."""
    from ledger.domain import ledger
    from ledger.utils.db import setup_db

    print("Initializing ledger domain...")
    ledger.init()
    print("Creating ledger database schema...")
    setup_db(ledger)
    print("Done.")


def drop_database():
    """Drop the ledger's tables from the configured SQL database."""
    from ledger.domain import ledger
    from ledger.utils.db import drop_db

    print("Initializing ledger domain...")
    ledger.init()
    print("Dropping ledger database schema...")
    drop_db(ledger)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="LockLedger database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

"""Crumb & Co. database management CLI.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys

import structlog

logger = structlog.get_logger(__name__)


def setup_database():
    from bakery.domain import bakery
    from bakery.utils.db import setup_db

    bakery.init()
    logger.info("Creating bakery database schema")
    setup_db(bakery)
    logger.info("Bakery schema ready")


def drop_database():
    from bakery.domain import bakery
    from bakery.utils.db import drop_db

    bakery.init()
    logger.info("Dropping bakery database schema")
    drop_db(bakery)
    logger.info("Bakery schema dropped")


def main():
    parser = argparse.ArgumentParser(description="Crumb & Co. database management")
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

"""
main.py
-------
Entry point for the restaurant POS backend self-check.

Responsibilities:
    - Open the database connection pool.
    - Create the schema if it does not exist yet.
    - Run the database self-check and report the outcome.
"""

import sys

import psycopg2

from db.connection import Database
from db.init_db import create_tables
from services.diagnostics_service import DiagnosticsService
from utils.logger import get_logger

logger = get_logger(__name__)


def main() -> int:
    """Run the self-check; returns the process exit code."""

    # ── 1. Database setup ─────────────────────────────────
    db = Database()
    logger.info(f"Connecting to {db.settings.describe()}...")
    try:
        db.open()
    except psycopg2.OperationalError:
        logger.error("Database unreachable, aborting.")
        return 1

    try:
        schema = create_tables(db)
        if schema.error:
            return 1

        # ── 2. Self-check ─────────────────────────────────
        report = DiagnosticsService(db).run_all()
        if report.error:
            failed = [check.name for check in report.error.results if not check.passed]
            logger.error(f"Self-check failed: {', '.join(failed)}")
            return 1

        logger.info("All database checks passed.")
        return 0
    finally:
        # ── 3. Cleanup ────────────────────────────────────
        db.close()


if __name__ == "__main__":
    sys.exit(main())

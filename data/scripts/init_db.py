"""
Create and seed the sales SQLite database.

Imports the `app` package, so run it after `pip install -e .` or from the
repository root as `python -m data.scripts.init_db`.
"""
import argparse
import logging
import sqlite3
import sys

from app.config import settings
from app.db import SalesStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

def main():
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--db-path", type=str, default=settings.db_path, help="SQLite file to create or update.")
    args = parser.parse_args()

    logger.info(f"Initializing database at {args.db_path}...")
    try:
        with SalesStore(args.db_path) as store:
            # Seeding is idempotent, running this twice leaves the same rows.
            store.initialize(read_only=False)
            counts = store.table_counts()
    except sqlite3.Error as e:
        logger.error(f"Failed to initialize database: {e}")
        sys.exit(1)

    for table, count in counts.items():
        logger.info(f"{table}: {count} rows")
    logger.info("SQLite database setup complete!")

if __name__ == "__main__":
    main()

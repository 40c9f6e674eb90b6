import logging
import sqlite3

from .errors import ExecutionError
from .schema import DDL, SEED_CATEGORIES, SEED_PRODUCTS, SEED_SALES, TABLES

logger = logging.getLogger(__name__)


class SalesStore:
    """
    Owns the single SQLite connection used by the API.

    Opened once per process (see the app lifespan), seeded, then switched to
    query_only so nothing that reaches run_sql can write.
    """

    def __init__(self, path: str, default_limit: int = 100):
        self.path = path
        self.default_limit = default_limit
        self.conn = sqlite3.connect(path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")

    def __enter__(self) -> "SalesStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self.conn.close()

    def initialize(self, read_only: bool = True) -> None:
        """Creates the tables, inserts the sample data, and locks the connection."""
        with self.conn:
            self.conn.executescript(DDL)
            self._seed()
        if read_only:
            self.conn.execute("PRAGMA query_only = ON")
        logger.info("SQLite database setup complete! (%s)", self.path)

    def _seed(self) -> None:
        # Every insert is guarded, re-running never duplicates rows.
        for name in SEED_CATEGORIES:
            self.conn.execute(
                "INSERT INTO categories (name) "
                "SELECT ? WHERE NOT EXISTS (SELECT 1 FROM categories WHERE name = ?)",
                (name, name),
            )
        for name, category_id, price in SEED_PRODUCTS:
            self.conn.execute(
                "INSERT INTO products (name, category_id, price) "
                "SELECT ?, ?, ? WHERE NOT EXISTS (SELECT 1 FROM products WHERE name = ?)",
                (name, category_id, price, name),
            )
        for product_id, revenue, quantity, sale_date in SEED_SALES:
            self.conn.execute(
                "INSERT INTO sales (product_id, revenue, quantity_sold, sale_date) "
                "SELECT ?, ?, ?, ? WHERE NOT EXISTS "
                "(SELECT 1 FROM sales WHERE product_id = ? AND sale_date = ?)",
                (product_id, revenue, quantity, sale_date, product_id, sale_date),
            )

    def run_sql(self, query: str):
        """
        Runs an already approved SQL statement and returns
        (column names, rows, truncated). Rows are plain dicts; at most
        `default_limit` of them are returned, `truncated` says whether more existed.
        """
        cur = self.conn.cursor()
        try:
            cur.execute(query)
            rows = [dict(r) for r in cur.fetchmany(self.default_limit + 1)]
            cols = [d[0] for d in cur.description] if cur.description else []
            truncated = len(rows) > self.default_limit
            return cols, rows[: self.default_limit], truncated
        except (sqlite3.Error, sqlite3.Warning) as e:
            logger.error("SQL execution failed: %s | %s", e, query)
            raise ExecutionError(detail=str(e)) from e
        finally:
            cur.close()

    def table_counts(self) -> dict[str, int]:
        return {
            t: self.conn.execute(f"SELECT COUNT(*) FROM {t}").fetchone()[0]
            for t in TABLES
        }

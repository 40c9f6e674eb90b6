# app/validate.py
from typing import Tuple
import re
import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

DESTRUCTIVE_PATTERN = re.compile(
    r"\b(DROP\s+TABLE|DELETE\s+FROM|ALTER\s+TABLE|UPDATE\s+SET)\b",
    re.IGNORECASE,
)
READ_ONLY_ROOTS = (exp.Select, exp.Union, exp.Intersect, exp.Except, exp.Subquery)

DESTRUCTIVE_MESSAGE = "Potentially destructive queries are not allowed"
SELECT_ONLY_MESSAGE = "Only SELECT queries are allowed"

def strip_code_fences(s: str) -> str:
    s = s.strip()
    if s.startswith("```"):
        s = s.strip("`")
        if s.lower().startswith("sql"):
            s = s[3:]
    return s.strip()

def is_destructive(sql: str) -> bool:
    # Denylist, not a parser: "UPDATE products SET" is not caught here.
    return DESTRUCTIVE_PATTERN.search(sql) is not None

def is_read_only(sql: str) -> bool:
    """
    True when every statement parses to a SELECT (or a set operation of
    SELECTs). SQL that sqlglot cannot parse is not judged here; SQLite
    rejects it on execution.
    """
    try:
        statements = [s for s in sqlglot.parse(sql, read="sqlite") if s is not None]
    except SqlglotError:
        return True
    return all(isinstance(s, READ_ONLY_ROOTS) for s in statements)

def validate_sql(sql: str) -> Tuple[bool, str, str]:
    """
    Gate run on model-produced SQL before it reaches the database.
    Returns (ok, message, cleaned_sql).
    """
    if not sql or not sql.strip():
        return False, "Empty SQL.", sql

    sql = strip_code_fences(sql)

    if is_destructive(sql):
        return False, DESTRUCTIVE_MESSAGE, sql

    if not is_read_only(sql):
        return False, SELECT_ONLY_MESSAGE, sql

    return True, "ok", sql

from typing import Optional

import sqlglot
from loguru import logger

from querypilot.app.core.settings import settings

# connector kind -> sqlglot dialect
DIALECTS = {
    "postgresql": "postgres",
    "mysql": "mysql",
    "sqlite": "sqlite",
}


def format_sql(sql: str, dialect: Optional[str] = None, indent: Optional[int] = None) -> str:
    """Pretty-print SQL with upper-case keywords; returns the input unchanged on failure."""
    width = indent or settings.SQL_INDENT
    read = DIALECTS.get(dialect or "", dialect)
    try:
        out = sqlglot.transpile(
            sql, read=read, write=read, pretty=True, pad=width, indent=width
        )
    except Exception as e:
        logger.debug("sql format failed", error=type(e).__name__)
        return sql
    return ";\n".join(out) if out else sql

import re
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

# priority order matters: the first keyword found decides the query type
SCHEMA_KEYWORDS = ["DROP", "TRUNCATE", "ALTER", "CREATE", "GRANT", "REVOKE"]
DATA_KEYWORDS = ["INSERT", "UPDATE", "DELETE"]
READ_PREFIXES = ["SELECT", "SHOW", "DESCRIBE", "EXPLAIN"]

_IDENT = r"""((?:[`"']?[\w$]+[`"']?)(?:\.[`"']?[\w$]+[`"']?)?)"""

TABLE_PATTERNS = [
    re.compile(r"\bINSERT\s+INTO\s+" + _IDENT, re.I),
    re.compile(r"\bUPDATE\s+" + _IDENT + r"\s+SET\b", re.I),
    re.compile(r"\bDELETE\s+FROM\s+" + _IDENT, re.I),
    re.compile(r"\bCREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?" + _IDENT, re.I),
    re.compile(r"\bDROP\s+TABLE\s+(?:IF\s+EXISTS\s+)?" + _IDENT, re.I),
    re.compile(r"\bALTER\s+TABLE\s+" + _IDENT, re.I),
    re.compile(r"\bTRUNCATE\s+(?:TABLE\s+)?" + _IDENT, re.I),
]


class QueryCategory(str, Enum):
    SELECT = "select"
    DATA_MUTATION = "data-mutation"
    SCHEMA_MUTATION = "schema-mutation"
    UNKNOWN = "unknown"


class SqlStatement(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw_text: str
    normalized_text: str
    statement_count: int
    category: QueryCategory
    query_type: str
    mutated_table_name: Optional[str] = None
    # quoted as written, for queries against the table
    mutated_table_ref: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.normalized_text

    @property
    def is_mutation(self) -> bool:
        return self.category in (
            QueryCategory.DATA_MUTATION,
            QueryCategory.SCHEMA_MUTATION,
        )


def split_statements(sql: str) -> List[str]:
    return [s for s in sql.split(";") if s.strip()]


def _first_keyword(text: str, keywords: List[str]) -> Optional[str]:
    for kw in keywords:
        if re.search(rf"\b{kw}\b", text):
            return kw
    return None


def extract_table_ref(sql: str) -> Optional[str]:
    """Table identifier as written; backtick and double-quote quoting kept."""
    for pattern in TABLE_PATTERNS:
        m = pattern.search(sql)
        if m:
            # single-quoted names are a sqlite/mysql quirk; drop those quotes
            return m.group(1).replace("'", "")
    return None


def _unquote(ref: Optional[str]) -> Optional[str]:
    return re.sub(r"[`\"]", "", ref) if ref else None


def extract_table_name(sql: str) -> Optional[str]:
    return _unquote(extract_table_ref(sql))


def classify(sql: str) -> SqlStatement:
    """
    Keyword classification of a raw SQL string.

    Pattern based, not a parser: keywords inside comments or string literals
    are counted like any other token.
    """
    raw = sql or ""
    normalized = raw.strip().upper()
    count = len(split_statements(raw))

    table_ref = None
    kw = _first_keyword(normalized, SCHEMA_KEYWORDS)
    if kw:
        category = QueryCategory.SCHEMA_MUTATION
    else:
        kw = _first_keyword(normalized, DATA_KEYWORDS)
        category = QueryCategory.DATA_MUTATION if kw else QueryCategory.UNKNOWN

    if kw:
        query_type = kw.lower()
        table_ref = extract_table_ref(raw)
    elif any(normalized.startswith(p) for p in READ_PREFIXES):
        category = QueryCategory.SELECT
        query_type = "select"
    else:
        query_type = "unknown"

    return SqlStatement(
        raw_text=raw,
        normalized_text=normalized,
        statement_count=count,
        category=category,
        query_type=query_type,
        mutated_table_name=_unquote(table_ref),
        mutated_table_ref=table_ref,
    )

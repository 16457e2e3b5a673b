from typing import Any, Dict, List, Mapping, Optional

from loguru import logger
from pydantic import BaseModel

from querypilot.app.connectors.base import BaseConnector, Row
from querypilot.app.core.settings import settings
from querypilot.app.validators.classifier import classify
from querypilot.app.validators.formatting import format_sql

# changed-row count field per driver: mysql, postgres, sqlite, then generic spellings
AFFECTED_COUNT_FIELDS = ("affectedRows", "rowcount", "changes", "rowCount", "affected_rows")


class ExecutionOutcome(BaseModel):
    formatted_sql: str
    rows: List[Dict[str, Any]]
    row_count: int
    affected_row_count: Optional[int] = None
    query_type: str

    def to_response(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "sql": self.formatted_sql,
            "results": self.rows,
            "rowCount": self.row_count,
            "requiresConfirmation": False,
            "queryType": self.query_type,
        }
        if self.affected_row_count is not None:
            out["affectedRowCount"] = self.affected_row_count
        return out


def affected_count(meta: Mapping[str, Any]) -> int:
    for key in AFFECTED_COUNT_FIELDS:
        if meta.get(key) is not None:
            try:
                return max(int(meta[key]), 0)
            except (TypeError, ValueError):
                return 0
    return 0


def snapshot(connector: BaseConnector, table: str, limit: Optional[int] = None) -> List[Row]:
    """Current contents of ``table``; empty when the read fails (e.g. after a DROP)."""
    n = limit or settings.SNAPSHOT_LIMIT
    try:
        rows = connector.execute(f"SELECT * FROM {table} LIMIT {int(n)}")
    except Exception as e:
        logger.warning("snapshot read failed", table=table, error=str(e)[:200])
        return []
    return rows if isinstance(rows, list) else []


def normalize(raw: Any, sql: str, connector: BaseConnector) -> ExecutionOutcome:
    stmt = classify(sql)
    formatted = format_sql(sql, connector.DIALECT)

    if isinstance(raw, Mapping):
        affected = affected_count(raw)
        rows: List[Row] = []
        if stmt.mutated_table_ref:
            rows = snapshot(connector, stmt.mutated_table_ref)
        return ExecutionOutcome(
            formatted_sql=formatted,
            rows=rows,
            row_count=len(rows),
            affected_row_count=affected,
            query_type=stmt.query_type,
        )

    rows = list(raw or [])
    return ExecutionOutcome(
        formatted_sql=formatted,
        rows=rows,
        row_count=len(rows),
        query_type=stmt.query_type,
    )

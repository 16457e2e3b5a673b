from __future__ import annotations

import threading
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

# A row maps column name -> None | bool | int | float | str | bytes
RowValue = Union[None, bool, int, float, str, bytes]
Row = Dict[str, RowValue]
MutationResult = Dict[str, Any]
ExecuteResult = Union[List[Row], MutationResult]


def _coerce(o: Any) -> RowValue:
    if o is None or isinstance(o, (bool, int, float, str, bytes)):
        return o
    if isinstance(o, (datetime, date, time, Decimal, UUID)):
        return str(o)
    if isinstance(o, (bytearray, memoryview)):
        return bytes(o)
    return str(o)


def to_row(columns: List[str], values) -> Row:
    return {c: _coerce(v) for c, v in zip(columns, values)}


class NotConnectedError(RuntimeError):
    def __init__(self, kind: str):
        super().__init__(f"{kind} database not connected")


class BaseConnector:
    """
    Capability shared by every database adapter.

    ``execute`` returns a list of rows when the statement produced a result
    set and a driver-specific mutation mapping otherwise.
    """

    KIND = "base"
    DIALECT: Optional[str] = None

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self._conn: Any = None
        self._lock = threading.Lock()

    @property
    def connected(self) -> bool:
        return self._conn is not None

    def _require(self):
        if self._conn is None:
            raise NotConnectedError(self.KIND)
        return self._conn

    def connect(self) -> None:
        raise NotImplementedError

    def disconnect(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def execute(self, sql: str) -> ExecuteResult:
        raise NotImplementedError

    def describe_schema(self) -> Dict[str, Any]:
        raise NotImplementedError

    def test_connection(self) -> bool:
        try:
            if self._conn is None:
                self.connect()
            rows = self.execute("SELECT 1")
            return isinstance(rows, list) and len(rows) > 0
        except Exception:
            return False

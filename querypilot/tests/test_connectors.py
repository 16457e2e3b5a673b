from datetime import date
from decimal import Decimal

import pytest

from querypilot.app.connectors.base import NotConnectedError, to_row
from querypilot.app.connectors.factory import create_connector, resolve_kind
from querypilot.app.connectors.mysql import MySQLConnector
from querypilot.app.connectors.postgres import PostgresConnector
from querypilot.app.connectors.sqlite import SQLiteConnector


def test_sqlite_read_returns_rows(sqlite_db):
    rows = sqlite_db.execute("SELECT id, name FROM users ORDER BY id")
    assert rows == [
        {"id": 1, "name": "ada"},
        {"id": 5, "name": "linus"},
        {"id": 7, "name": "grace"},
    ]


def test_sqlite_write_returns_metadata(sqlite_db):
    res = sqlite_db.execute("UPDATE users SET name = 'x' WHERE id > 1")
    assert res["changes"] == 2
    res = sqlite_db.execute("INSERT INTO users (id, name) VALUES (9, 'ken')")
    assert res == {"changes": 1, "lastInsertRowid": 9}


def test_sqlite_schema(sqlite_db):
    schema = sqlite_db.describe_schema()
    (users,) = schema["tables"]
    assert users["name"] == "users"
    cols = {c["name"]: c for c in users["columns"]}
    assert cols["id"]["primary_key"] is True
    assert cols["name"]["nullable"] is False
    assert cols["updated_at"]["nullable"] is True


def test_sqlite_test_connection(tmp_path):
    db = SQLiteConnector({"path": str(tmp_path / "x.sqlite")})
    assert db.test_connection() is True
    assert db.connected
    db.disconnect()
    assert not db.connected


def test_execute_requires_connection(tmp_path):
    db = SQLiteConnector({"path": str(tmp_path / "x.sqlite")})
    with pytest.raises(NotConnectedError):
        db.execute("SELECT 1")


def test_row_values_are_coerced():
    row = to_row(["a", "b", "c", "d"], [Decimal("1.50"), date(2024, 1, 2), memoryview(b"hi"), None])
    assert row == {"a": "1.50", "b": "2024-01-02", "c": b"hi", "d": None}


def test_factory_selects_adapter(tmp_path):
    assert isinstance(create_connector("postgres", {"host": "h"}), PostgresConnector)
    assert isinstance(create_connector("mysql", {"host": "h"}), MySQLConnector)
    db = create_connector("sqlite", {"path": str(tmp_path / "f.sqlite")})
    assert isinstance(db, SQLiteConnector)
    assert db.config["path"].endswith("f.sqlite")


def test_factory_rejects_unknown_kind():
    with pytest.raises(ValueError):
        resolve_kind("oracle")
